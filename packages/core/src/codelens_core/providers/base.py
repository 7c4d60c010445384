"""Base review generator implementing the Template Method pattern.

All providers share the same generation flow:
    generate(prompt) → _call_api(system, prompt)   ← only this differs per provider
                     → empty-response check
                     → any SDK exception mapped to GenerationError

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

There is no retry loop: a failed call surfaces immediately as a
GenerationError and the caller decides what to do.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from codelens_core.errors import GenerationError
from codelens_core.prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

# Shared defaults — subclasses and config may override.
_MAX_TOKENS = 800
_TEMPERATURE = 0.3


class BaseGenerator(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS
    TEMPERATURE: float = _TEMPERATURE

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.model = model or self.MODEL
        self.temperature = self.TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or self.MAX_TOKENS

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw response text.

        Raises GenerationError on network failure, a non-2xx response, or a
        response with no usable text.
        """
        try:
            text = self._call_api(SYSTEM_PROMPT, prompt)
        except GenerationError:
            raise
        except Exception as e:
            status = _status_of(e)
            logger.error("%s API call failed (status=%s): %s", self.__class__.__name__, status, e)
            raise GenerationError(f"{self.__class__.__name__} request failed: {e}", status=status) from e

        if not isinstance(text, str) or not text.strip():
            logger.error("%s returned an empty response", self.__class__.__name__)
            raise GenerationError(f"{self.__class__.__name__} returned an empty response.")
        return text

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        """Make a single API call and return the raw text response.

        This is the only method subclasses must implement. It should raise
        on failure; generate() translates the exception.
        """


def _status_of(exc: Exception) -> int | None:
    """Pull an HTTP status code off an SDK exception, if it carries one."""
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None
