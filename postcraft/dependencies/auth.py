from typing import Optional

from fastapi import Cookie, Depends

from postcraft.core.config import COOKIE_NAME
from postcraft.services.generation_workflow import GenerationWorkflow
from postcraft.services.synthesizer import ContentSynthesizer
from postcraft.store import Store, get_store
from postcraft.utils.auth import verify_session

_synthesizer: Optional[ContentSynthesizer] = None


def get_session_token(auth_token: Optional[str] = Cookie(None, alias=COOKIE_NAME)) -> Optional[str]:
    return auth_token


def get_current_user_id(token: Optional[str] = Depends(get_session_token)) -> str:
    """
    FastAPI dependency that verifies the session cookie and returns the account id.
    Raises Unauthenticated (401) on any failure.
    """
    return verify_session(token)


def get_synthesizer() -> ContentSynthesizer:
    """Shared synthesizer; the Groq client is created on first use."""
    global _synthesizer
    if _synthesizer is None:
        _synthesizer = ContentSynthesizer()
    return _synthesizer


def get_workflow(
    store: Store = Depends(get_store),
    synthesizer: ContentSynthesizer = Depends(get_synthesizer),
) -> GenerationWorkflow:
    return GenerationWorkflow(store, synthesizer)
