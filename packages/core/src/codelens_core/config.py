import os
from pathlib import Path
from typing import Optional

import yaml

from codelens_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "provider": "openrouter",
    "model": None,  # None = provider default
    "temperature": 0.3,
    "max_tokens": 800,
    "timeout": 60,  # seconds; bounds the generator call since nothing else cancels it
    "store_url": "sqlite:///.codelens.db",
    "host": "127.0.0.1",
    "port": 5002,
    "server_url": "http://localhost:5002",
}

# provider name -> environment variable holding its API key
API_KEY_ENV = {
    "openrouter": "OPENROUTER_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

# environment variable -> config key; applied after the config file
_ENV_OVERRIDES = {
    "CODELENS_STORE_URL": "store_url",
    "CODELENS_SERVER_URL": "server_url",
    "PORT": "port",
}


def load_config(config_path: str = ".codelens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codelens.yml in the current directory
      3. Environment variables (CODELENS_STORE_URL, CODELENS_SERVER_URL, PORT)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a YAML mapping.")
        config.update(file_config)

    for env_var, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    try:
        config["port"] = int(config["port"])
    except (TypeError, ValueError):
        raise ConfigError(f"port must be an integer, got {config['port']!r}.")

    # Resolve credentials from environment variables
    config["openrouter_api_key"] = os.environ.get("OPENROUTER_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def require_api_key(config: dict) -> str:
    """Return the API key for the configured provider.

    Raises ConfigError when the provider is unknown or its key is not set, so
    the server refuses to start instead of failing on the first request.
    """
    provider = config.get("provider")
    env_var = API_KEY_ENV.get(provider)
    if env_var is None:
        raise ConfigError(f"Unknown provider: {provider!r}. Choose one of: {', '.join(API_KEY_ENV)}.")
    key = config.get(f"{provider}_api_key")
    if not key:
        raise ConfigError(f"{env_var} environment variable is not set.")
    return key
