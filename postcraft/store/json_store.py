"""
Flat-file backend: users.json and generations.json under one directory.

Generations are kept newest first. A process-local lock serializes each
operation's read-modify-write; it does not coordinate multiple processes.
"""
import json
import logging
import os
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from postcraft.core.errors import AccountNotFound, EmailAlreadyRegistered, StorageError
from postcraft.schemas.auth import Account
from postcraft.schemas.generation import GenerationRecord, GenerationSummary
from postcraft.store.base import Store, new_id, normalize_email, summarize, utcnow

logger = logging.getLogger(__name__)


class JsonFileStore(Store):

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.users_path = os.path.join(data_dir, "users.json")
        self.generations_path = os.path.join(data_dir, "generations.json")
        self._lock = threading.RLock()

    # ----- file helpers -----

    def _read(self, path: str) -> List[Dict[str, Any]]:
        if not os.path.isfile(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            raise StorageError() from e
        if not isinstance(data, list):
            logger.error("Unexpected contents in %s: expected a list", path)
            raise StorageError()
        return data

    def _write(self, path: str, data: List[Dict[str, Any]]) -> None:
        tmp_path = f"{path}.tmp"
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise StorageError() from e

    @staticmethod
    def _user_to_dict(account: Account) -> Dict[str, Any]:
        data = account.model_dump()
        data["created_at"] = account.created_at.isoformat()
        return data

    @staticmethod
    def _generation_to_dict(record: GenerationRecord) -> Dict[str, Any]:
        return {
            "id": record.id,
            "user_id": record.user_id,
            "prompt": record.prompt,
            "tone": record.tone,
            "audience": record.audience,
            "content": record.content,
            "created_at": record.created_at.isoformat(),
        }

    @staticmethod
    def _to_record(data: Dict[str, Any]) -> GenerationRecord:
        return GenerationRecord(
            id=data["id"],
            user_id=data["user_id"],
            prompt=data["prompt"],
            tone=data["tone"],
            audience=data["audience"],
            content=data["content"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    # ----- accounts -----

    def create_user(self, email: str, name: str, hashed_password: str) -> Account:
        normalized_email = normalize_email(email)
        with self._lock:
            users = self._read(self.users_path)
            if any(normalize_email(u["email"]) == normalized_email for u in users):
                raise EmailAlreadyRegistered()
            account = Account(
                id=new_id(),
                email=normalized_email,
                name=name,
                hashed_password=hashed_password,
                plan_tier="free",
                generations_count=0,
                created_at=utcnow(),
            )
            users.append(self._user_to_dict(account))
            self._write(self.users_path, users)
            return account

    def get_user_by_id(self, user_id: str) -> Optional[Account]:
        with self._lock:
            for u in self._read(self.users_path):
                if u["id"] == user_id:
                    return Account.model_validate(u)
        return None

    def get_user_by_email(self, email: str) -> Optional[Account]:
        normalized_email = normalize_email(email)
        with self._lock:
            for u in self._read(self.users_path):
                if normalize_email(u["email"]) == normalized_email:
                    return Account.model_validate(u)
        return None

    def _update_user(self, user_id: str, **changes) -> Account:
        with self._lock:
            users = self._read(self.users_path)
            for u in users:
                if u["id"] == user_id:
                    for key, value in changes.items():
                        u[key] = value(u[key]) if callable(value) else value
                    self._write(self.users_path, users)
                    return Account.model_validate(u)
        raise AccountNotFound()

    def increment_usage(self, user_id: str) -> Account:
        return self._update_user(user_id, generations_count=lambda count: int(count) + 1)

    def upgrade_plan(self, user_id: str) -> Account:
        return self._update_user(user_id, plan_tier="pro")

    # ----- generations -----

    def create_generation(
        self,
        user_id: str,
        prompt: str,
        tone: str,
        audience: str,
        content: Dict[str, Any],
    ) -> GenerationRecord:
        record = GenerationRecord(
            id=new_id(),
            user_id=user_id,
            prompt=prompt,
            tone=tone,
            audience=audience,
            content=content,
            created_at=utcnow(),
        )
        with self._lock:
            generations = self._read(self.generations_path)
            generations.insert(0, self._generation_to_dict(record))

            kept = []
            owned = 0
            for g in generations:
                if g["user_id"] == user_id:
                    owned += 1
                    if owned > self.history_limit:
                        continue
                kept.append(g)
            self._write(self.generations_path, kept)

        evicted = len(generations) - len(kept)
        if evicted:
            logger.info("Evicted %s old generation(s) for user %s", evicted, user_id)
        return record

    def list_generations(self, user_id: str) -> List[GenerationSummary]:
        with self._lock:
            generations = self._read(self.generations_path)
        return [
            summarize(self._to_record(g))
            for g in generations
            if g["user_id"] == user_id
        ]

    def get_generation(self, generation_id: str, user_id: str) -> Optional[GenerationRecord]:
        with self._lock:
            for g in self._read(self.generations_path):
                if g["id"] == generation_id and g["user_id"] == user_id:
                    return self._to_record(g)
        return None

    def delete_generation(self, generation_id: str, user_id: str) -> bool:
        with self._lock:
            generations = self._read(self.generations_path)
            remaining = [
                g for g in generations
                if not (g["id"] == generation_id and g["user_id"] == user_id)
            ]
            if len(remaining) == len(generations):
                return False
            self._write(self.generations_path, remaining)
            return True
