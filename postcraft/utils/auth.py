from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from postcraft.core.config import JWT_SECRET, JWT_ALGORITHM, SESSION_EXPIRE_DAYS
from postcraft.core.errors import Unauthenticated

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized hash format
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=SESSION_EXPIRE_DAYS)
    to_encode = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify a session token signed with the application's secret.
    Returns the payload if signature and expiry are valid, None otherwise.
    """
    if not token:
        return None
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None


def verify_session(token: Optional[str]) -> str:
    """
    Resolve a session token to the account id it was issued for.

    Any failure (missing, malformed, expired, bad signature, no subject) raises
    Unauthenticated; there is no anonymous fallback.
    """
    payload = verify_token(token or "")
    if not payload:
        raise Unauthenticated()
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise Unauthenticated()
    return user_id
