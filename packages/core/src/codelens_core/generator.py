"""Build the configured review generator."""

from __future__ import annotations

import logging

from codelens_core.config import require_api_key
from codelens_core.errors import ConfigError
from codelens_core.providers.anthropic import AnthropicGenerator
from codelens_core.providers.base import BaseGenerator
from codelens_core.providers.openai import OpenAIGenerator, OpenRouterGenerator

logger = logging.getLogger(__name__)

_PROVIDERS: dict[str, type[BaseGenerator]] = {
    "openrouter": OpenRouterGenerator,
    "openai": OpenAIGenerator,
    "anthropic": AnthropicGenerator,
}


def get_generator(config: dict) -> BaseGenerator:
    """Instantiate the provider named by ``config["provider"]``.

    Raises ConfigError for an unknown provider or a missing API key.
    """
    provider = config.get("provider")
    cls = _PROVIDERS.get(provider)
    if cls is None:
        raise ConfigError(f"Unknown model provider: {provider!r}. Choose one of: {', '.join(_PROVIDERS)}.")
    api_key = require_api_key(config)
    generator = cls(
        api_key=api_key,
        model=config.get("model"),
        temperature=config.get("temperature"),
        max_tokens=config.get("max_tokens"),
        timeout=float(config.get("timeout") or 60),
    )
    logger.info("Using %s with model %s", cls.__name__, generator.model)
    return generator
