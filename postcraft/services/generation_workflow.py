"""
Generation workflow: one "generate content" request end to end.

Steps run strictly in order: authenticate, load account, quota check, input
validation, synthesis, persist, increment usage. Any failure stops the
request; nothing is retried here.

Persisting the record and incrementing the usage counter are two separate
store writes. A crash between them leaves the counter one short of the stored
history. Two concurrent requests for the same account can also both pass the
quota check before either increments; the check is not atomic with the
increment.
"""
import logging
from typing import Callable, Optional, Tuple

from postcraft.core.errors import AccountNotFound, InvalidInput, QuotaExceeded
from postcraft.core.plan_limits import get_plan_limit
from postcraft.schemas.auth import Account
from postcraft.schemas.generation import (
    AUDIENCE_MAX_LENGTH,
    AUDIENCE_MIN_LENGTH,
    PROMPT_MAX_LENGTH,
    PROMPT_MIN_LENGTH,
    TONES,
    GenerateRequest,
    GenerationRecord,
)
from postcraft.services.synthesizer import ContentSynthesizer
from postcraft.store.base import Store
from postcraft.utils.auth import verify_session

logger = logging.getLogger(__name__)


def check_generation_quota(account: Account) -> None:
    """Raise QuotaExceeded when the account's plan has no generations left."""
    limit = get_plan_limit(account.plan_tier, "max_generations")
    if limit != -1 and account.generations_count >= limit:
        raise QuotaExceeded(limit)


def validate_generation_input(data: GenerateRequest) -> Tuple[str, str, str]:
    """
    Check prompt, tone and audience in that order and raise InvalidInput for
    the first one that fails.
    """
    prompt, tone, audience = data.prompt, data.tone, data.audience

    if not isinstance(prompt, str) or len(prompt) < PROMPT_MIN_LENGTH:
        raise InvalidInput("prompt", f"Prompt must be at least {PROMPT_MIN_LENGTH} characters")
    if len(prompt) > PROMPT_MAX_LENGTH:
        raise InvalidInput("prompt", f"Prompt must be at most {PROMPT_MAX_LENGTH} characters")

    if not isinstance(tone, str) or tone not in TONES:
        raise InvalidInput("tone", "Please select a valid tone")

    if not isinstance(audience, str) or len(audience) < AUDIENCE_MIN_LENGTH:
        raise InvalidInput("audience", "Please specify your target audience")
    if len(audience) > AUDIENCE_MAX_LENGTH:
        raise InvalidInput("audience", "Audience description is too long")

    return prompt, tone, audience


class GenerationWorkflow:

    def __init__(
        self,
        store: Store,
        synthesizer: ContentSynthesizer,
        session_verifier: Callable[[Optional[str]], str] = verify_session,
    ):
        self.store = store
        self.synthesizer = synthesizer
        self.session_verifier = session_verifier

    def request_generation(self, session_token: Optional[str], data: GenerateRequest) -> GenerationRecord:
        """Authenticate the session token, then run generate() for its account."""
        account_id = self.session_verifier(session_token)
        return self.generate(account_id, data)

    def generate(self, account_id: str, data: GenerateRequest) -> GenerationRecord:
        """Run the workflow for an account id the caller has already verified."""
        account = self.store.get_user_by_id(account_id)
        if account is None:
            logger.warning("Generation requested for missing account %s", account_id)
            raise AccountNotFound()

        try:
            check_generation_quota(account)
        except QuotaExceeded:
            logger.info(
                "Quota reached for user %s (%s generations on %s plan)",
                account.id, account.generations_count, account.plan_tier,
            )
            raise

        prompt, tone, audience = validate_generation_input(data)

        content = self.synthesizer.synthesize(prompt, tone, audience)

        record = self.store.create_generation(
            user_id=account.id,
            prompt=prompt,
            tone=tone,
            audience=audience,
            content=content,
        )
        # Only reached once the record is stored
        updated = self.store.increment_usage(account.id)

        logger.info(
            "Generation %s created for user %s (%s generations used)",
            record.id, account.id, updated.generations_count,
        )
        return record
