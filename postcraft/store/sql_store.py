import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from postcraft.core.errors import AccountNotFound, EmailAlreadyRegistered, StorageError
from postcraft.models.generation import Generation
from postcraft.models.user import User
from postcraft.schemas.auth import Account
from postcraft.schemas.generation import GenerationRecord, GenerationSummary
from postcraft.store.base import Store, as_utc, new_id, normalize_email, summarize, utcnow

logger = logging.getLogger(__name__)


def _to_record(row: Generation) -> GenerationRecord:
    return GenerationRecord(
        id=row.id,
        user_id=row.user_id,
        prompt=row.prompt,
        tone=row.tone,
        audience=row.audience,
        content=json.loads(row.content_json),
        created_at=as_utc(row.created_at),
    )


def _to_account(user: User) -> Account:
    account = Account.model_validate(user)
    account.created_at = as_utc(account.created_at)
    return account


class SqlStore(Store):
    """Relational backend; one short-lived session per operation."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _session(self) -> Session:
        return self.session_factory()

    def _fail(self, db: Session, operation: str, e: Exception):
        db.rollback()
        logger.error("SQL store %s failed: %s", operation, e)
        raise StorageError() from e

    # ----- accounts -----

    def create_user(self, email: str, name: str, hashed_password: str) -> Account:
        normalized_email = normalize_email(email)
        db = self._session()
        try:
            existing = db.query(User).filter(
                func.lower(User.email) == normalized_email
            ).first()
            if existing:
                raise EmailAlreadyRegistered()
            user = User(
                id=new_id(),
                email=normalized_email,
                name=name,
                hashed_password=hashed_password,
                plan_tier="free",
                generations_count=0,
                created_at=utcnow(),
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return _to_account(user)
        except IntegrityError as e:
            # Lost a race against a concurrent registration for the same email
            db.rollback()
            raise EmailAlreadyRegistered() from e
        except SQLAlchemyError as e:
            self._fail(db, "create_user", e)
        finally:
            db.close()

    def get_user_by_id(self, user_id: str) -> Optional[Account]:
        db = self._session()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            return _to_account(user) if user else None
        except SQLAlchemyError as e:
            self._fail(db, "get_user_by_id", e)
        finally:
            db.close()

    def get_user_by_email(self, email: str) -> Optional[Account]:
        db = self._session()
        try:
            user = db.query(User).filter(
                func.lower(User.email) == normalize_email(email)
            ).first()
            return _to_account(user) if user else None
        except SQLAlchemyError as e:
            self._fail(db, "get_user_by_email", e)
        finally:
            db.close()

    def increment_usage(self, user_id: str) -> Account:
        db = self._session()
        try:
            # Increment in the database, not from a value read earlier
            result = db.execute(
                update(User)
                .where(User.id == user_id)
                .values(generations_count=User.generations_count + 1)
            )
            if result.rowcount == 0:
                db.rollback()
                raise AccountNotFound()
            db.commit()
            user = db.query(User).filter(User.id == user_id).first()
            return _to_account(user)
        except SQLAlchemyError as e:
            self._fail(db, "increment_usage", e)
        finally:
            db.close()

    def upgrade_plan(self, user_id: str) -> Account:
        db = self._session()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                raise AccountNotFound()
            if user.plan_tier != "pro":
                user.plan_tier = "pro"
                db.commit()
                db.refresh(user)
            return _to_account(user)
        except SQLAlchemyError as e:
            self._fail(db, "upgrade_plan", e)
        finally:
            db.close()

    # ----- generations -----

    def create_generation(
        self,
        user_id: str,
        prompt: str,
        tone: str,
        audience: str,
        content: Dict[str, Any],
    ) -> GenerationRecord:
        db = self._session()
        try:
            row = Generation(
                id=new_id(),
                user_id=user_id,
                prompt=prompt,
                tone=tone,
                audience=audience,
                content_json=json.dumps(content, ensure_ascii=False),
                created_at=utcnow(),
            )
            db.add(row)
            db.flush()

            # The new row is always kept, even if an older row shares its timestamp
            keep_ids = [row.id] + [
                gen_id
                for (gen_id,) in db.query(Generation.id)
                .filter(Generation.user_id == user_id, Generation.id != row.id)
                .order_by(Generation.created_at.desc(), Generation.id.desc())
                .limit(self.history_limit - 1)
                .all()
            ]
            evicted = (
                db.query(Generation)
                .filter(Generation.user_id == user_id, Generation.id.notin_(keep_ids))
                .delete(synchronize_session=False)
            )
            db.commit()
            db.refresh(row)
            if evicted:
                logger.info("Evicted %s old generation(s) for user %s", evicted, user_id)
            return _to_record(row)
        except SQLAlchemyError as e:
            self._fail(db, "create_generation", e)
        finally:
            db.close()

    def list_generations(self, user_id: str) -> List[GenerationSummary]:
        db = self._session()
        try:
            rows = (
                db.query(Generation)
                .filter(Generation.user_id == user_id)
                .order_by(Generation.created_at.desc())
                .all()
            )
            return [summarize(_to_record(row)) for row in rows]
        except SQLAlchemyError as e:
            self._fail(db, "list_generations", e)
        finally:
            db.close()

    def get_generation(self, generation_id: str, user_id: str) -> Optional[GenerationRecord]:
        db = self._session()
        try:
            row = db.query(Generation).filter(
                Generation.id == generation_id,
                Generation.user_id == user_id,
            ).first()
            return _to_record(row) if row else None
        except SQLAlchemyError as e:
            self._fail(db, "get_generation", e)
        finally:
            db.close()

    def delete_generation(self, generation_id: str, user_id: str) -> bool:
        db = self._session()
        try:
            deleted = db.query(Generation).filter(
                Generation.id == generation_id,
                Generation.user_id == user_id,
            ).delete(synchronize_session=False)
            db.commit()
            return deleted > 0
        except SQLAlchemyError as e:
            self._fail(db, "delete_generation", e)
        finally:
            db.close()
