"""
Storage interface shared by the SQL and JSON-file backends.

Every operation is self-contained: no transaction spans two calls, and
concurrent writers get last-write-wins semantics per record. Backends raise
StorageError for their own I/O failures and EmailAlreadyRegistered when the
case-insensitive email uniqueness check fails.
"""
import abc
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from postcraft.core.plan_limits import HISTORY_LIMIT
from postcraft.schemas.auth import Account
from postcraft.schemas.generation import GenerationRecord, GenerationSummary


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Timestamps are stored in UTC; some drivers (SQLite) return them naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_email(email: str) -> str:
    return email.strip().lower()


def summarize(record: GenerationRecord) -> GenerationSummary:
    blog_post = record.content.get("blogPost") or {}
    return GenerationSummary(
        id=record.id,
        prompt=record.prompt,
        tone=record.tone,
        audience=record.audience,
        blog_title=str(blog_post.get("title") or ""),
        created_at=record.created_at,
    )


class Store(abc.ABC):
    history_limit = HISTORY_LIMIT

    # ----- accounts -----

    @abc.abstractmethod
    def create_user(self, email: str, name: str, hashed_password: str) -> Account:
        """Create a free account with zero generations."""

    @abc.abstractmethod
    def get_user_by_id(self, user_id: str) -> Optional[Account]:
        ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[Account]:
        """Case-insensitive lookup."""

    @abc.abstractmethod
    def increment_usage(self, user_id: str) -> Account:
        """Add exactly one to the account's lifetime generation count."""

    @abc.abstractmethod
    def upgrade_plan(self, user_id: str) -> Account:
        """Move the account to pro. Idempotent; there is no way back to free."""

    # ----- generations -----

    @abc.abstractmethod
    def create_generation(
        self,
        user_id: str,
        prompt: str,
        tone: str,
        audience: str,
        content: Dict[str, Any],
    ) -> GenerationRecord:
        """
        Store a new record and evict the owner's records beyond the
        ``history_limit`` most recent. Other owners are untouched.
        """

    @abc.abstractmethod
    def list_generations(self, user_id: str) -> List[GenerationSummary]:
        """Owner's history, newest first."""

    @abc.abstractmethod
    def get_generation(self, generation_id: str, user_id: str) -> Optional[GenerationRecord]:
        """None when the record does not exist or belongs to someone else."""

    @abc.abstractmethod
    def delete_generation(self, generation_id: str, user_id: str) -> bool:
        """False when the record does not exist or belongs to someone else."""
