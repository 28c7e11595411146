"""
Content synthesizer: one chat-completion call to the Groq API per request,
parsed into the six-section content document.
"""
import json
import logging
from typing import Any, Dict, Optional

import groq

from postcraft.core.config import GROQ_API_KEY, GROQ_API_KEY_PLACEHOLDER, GROQ_MODEL
from postcraft.core.errors import SynthesisEmpty, SynthesisMalformed, SynthesisUnavailable
from postcraft.schemas.generation import CONTENT_SECTIONS
from postcraft.services.prompts import build_messages

logger = logging.getLogger(__name__)

TEMPERATURE = 0.8
MAX_TOKENS = 4096


def parse_content(raw: Optional[str]) -> Dict[str, Any]:
    """
    Turn the model's reply into the content document.
    Only the shape is checked: a JSON object holding all six sections as objects.
    """
    text = (raw or "").strip()
    if not text:
        raise SynthesisEmpty()
    try:
        content = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Model reply is not valid JSON: %s", e)
        raise SynthesisMalformed() from e
    if not isinstance(content, dict):
        logger.warning("Model reply is JSON but not an object (%s)", type(content).__name__)
        raise SynthesisMalformed()
    missing = [
        section for section in CONTENT_SECTIONS
        if not isinstance(content.get(section), dict)
    ]
    if missing:
        logger.warning("Model reply is missing sections: %s", ", ".join(missing))
        raise SynthesisMalformed()
    return content


class ContentSynthesizer:

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = GROQ_MODEL,
        client: Any = None,
    ):
        self.api_key = GROQ_API_KEY if api_key is None else api_key
        self.model = model
        self._client = client

    def is_configured(self) -> bool:
        if self._client is not None:
            return True
        return bool(self.api_key) and self.api_key != GROQ_API_KEY_PLACEHOLDER

    def _get_client(self):
        if not self.is_configured():
            logger.error("GROQ_API_KEY is not configured; content generation is disabled")
            raise SynthesisUnavailable()
        if self._client is None:
            logger.info("Initializing Groq client...")
            self._client = groq.Groq(api_key=self.api_key)
        return self._client

    def synthesize(self, prompt: str, tone: str, audience: str) -> Dict[str, Any]:
        client = self._get_client()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=build_messages(prompt, tone, audience),
                response_format={"type": "json_object"},
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except (groq.APIConnectionError, groq.AuthenticationError, groq.PermissionDeniedError) as e:
            logger.error("Groq API unreachable or rejected credentials: %s", e)
            raise SynthesisUnavailable() from e
        except (groq.RateLimitError, groq.InternalServerError) as e:
            logger.error("Groq API unavailable: %s", e)
            raise SynthesisUnavailable() from e
        except groq.BadRequestError as e:
            # JSON mode rejects generations that fail to parse server-side
            if "json_validate_failed" in str(e):
                logger.warning("Groq rejected a non-JSON generation: %s", e)
                raise SynthesisMalformed() from e
            logger.error("Groq rejected the request (check GROQ_MODEL): %s", e)
            raise SynthesisUnavailable() from e
        except groq.NotFoundError as e:
            logger.error("Groq model %r not found: %s", self.model, e)
            raise SynthesisUnavailable() from e
        except groq.APIError as e:
            logger.error("Groq API error: %s", e)
            raise SynthesisUnavailable() from e

        choices = getattr(completion, "choices", None) or []
        raw = choices[0].message.content if choices and choices[0].message else None
        return parse_content(raw)
