from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from codelens_core.errors import GenerationError
from codelens_core.providers.base import BaseGenerator


class OpenAIGenerator(BaseGenerator):
    MODEL = "gpt-4o"
    BASE_URL: str | None = None

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float = 60.0,
    ):
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. " "Install it with: pip install openai"
            )
        super().__init__(model=model, temperature=temperature, max_tokens=max_tokens)
        # max_retries=0: the SDK retries by default, and failures must surface on the first attempt.
        self.client = _OpenAI(api_key=api_key, base_url=self.BASE_URL, timeout=timeout, max_retries=0)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not response.choices:
            raise GenerationError(f"{self.__class__.__name__} response contained no choices.")
        return response.choices[0].message.content


class OpenRouterGenerator(OpenAIGenerator):
    """OpenRouter speaks the OpenAI chat-completions protocol at its own base URL."""

    MODEL = "openai/gpt-4o"
    BASE_URL = "https://openrouter.ai/api/v1"
