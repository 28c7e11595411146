import logging

from fastapi import APIRouter, Depends, Response, status

from postcraft.core.config import COOKIE_NAME, ENVIRONMENT, SESSION_EXPIRE_DAYS
from postcraft.core.errors import AccountNotFound, InvalidCredentials
from postcraft.core.plan_limits import get_plan_limit
from postcraft.dependencies.auth import get_current_user_id
from postcraft.schemas.auth import Account, UserCreate, UserLogin, UserResponse
from postcraft.store import Store, get_store
from postcraft.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


def user_response(account: Account) -> UserResponse:
    limit = get_plan_limit(account.plan_tier, "max_generations")
    return UserResponse(
        id=account.id,
        email=account.email,
        name=account.name,
        plan=account.plan_tier,
        generations_count=account.generations_count,
        generations_limit=None if limit == -1 else limit,
        created_at=account.created_at.isoformat() if account.created_at else None,
    )


def set_session_cookie(response: Response, user_id: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=create_access_token(user_id),
        max_age=60 * 60 * 24 * SESSION_EXPIRE_DAYS,
        path="/",
        httponly=True,
        secure=ENVIRONMENT == "production",
        samesite="strict",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    response: Response,
    store: Store = Depends(get_store),
):
    """Create a free account and start a session."""
    account = store.create_user(
        email=user_data.email,
        name=user_data.name.strip(),
        hashed_password=hash_password(user_data.password),
    )
    set_session_cookie(response, account.id)
    logger.info("Registered user %s", account.id)
    return {"user": user_response(account)}


@router.post("/login")
def login(
    credentials: UserLogin,
    response: Response,
    store: Store = Depends(get_store),
):
    account = store.get_user_by_email(credentials.email)
    # Same error for unknown email and wrong password
    if not account or not verify_password(credentials.password, account.hashed_password):
        raise InvalidCredentials()
    set_session_cookie(response, account.id)
    return {"user": user_response(account)}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(
        key=COOKIE_NAME,
        path="/",
        httponly=True,
        secure=ENVIRONMENT == "production",
        samesite="strict",
    )
    return {"success": True}


@router.get("/me")
def get_me(
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Get current user profile"""
    account = store.get_user_by_id(user_id)
    if not account:
        raise AccountNotFound()
    return {"user": user_response(account)}
