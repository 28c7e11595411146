"""
Error taxonomy for the service.

Every error carries a stable ``kind`` (machine readable) and a human-readable
``message`` that is safe to show to end users. HTTP status mapping lives in
``postcraft.api.errors``; nothing here knows about HTTP.
"""
from typing import Any, Dict, Optional


class PostcraftError(Exception):
    kind = "internal_error"
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.kind}


# ----- generation workflow -----

class GenerationError(PostcraftError):
    """Base class for failures surfaced by the generation workflow."""


class Unauthenticated(GenerationError):
    kind = "unauthenticated"
    default_message = "Unauthorized."


class AccountNotFound(GenerationError):
    kind = "account_not_found"
    default_message = "User not found."


class QuotaExceeded(GenerationError):
    kind = "quota_exceeded"

    def __init__(self, limit: int, message: Optional[str] = None):
        self.limit = limit
        super().__init__(
            message
            or f"You've reached the free plan limit of {limit} generations. "
            "Upgrade to Pro for unlimited access."
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["limit_reached"] = True
        data["limit"] = self.limit
        return data


class InvalidInput(GenerationError):
    kind = "invalid_input"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid {field}.")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class SynthesisUnavailable(GenerationError):
    kind = "synthesis_unavailable"
    default_message = "Content generation is temporarily unavailable. Please try again later."


class SynthesisEmpty(GenerationError):
    kind = "synthesis_empty"
    default_message = "No response received from AI. Please try again."


class SynthesisMalformed(GenerationError):
    kind = "synthesis_malformed"
    default_message = "AI returned invalid JSON. Please try again."


class StorageError(GenerationError):
    kind = "storage_error"
    # Storage details are logged, never shown
    default_message = "Internal server error."


# ----- accounts, history, payments -----

class EmailAlreadyRegistered(PostcraftError):
    kind = "email_already_registered"
    default_message = "An account with this email already exists."


class InvalidCredentials(PostcraftError):
    kind = "invalid_credentials"
    default_message = "Invalid email or password."


class GenerationNotFound(PostcraftError):
    kind = "not_found"
    default_message = "Not found."


class PaymentNotConfigured(PostcraftError):
    kind = "payment_not_configured"
    default_message = "Payment gateway not configured."


class PaymentVerificationFailed(PostcraftError):
    kind = "payment_verification_failed"
    default_message = "Invalid payment signature."


class PaymentGatewayError(PostcraftError):
    kind = "payment_gateway_error"
    default_message = "Failed to create payment order."
