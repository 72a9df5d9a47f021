"""
Provider selection from configuration.
"""

from __future__ import annotations

import os
from typing import Any, Mapping

from commitai.llm.anthropic_provider import AnthropicProvider
from commitai.llm.base import BaseProvider, LLMError
from commitai.llm.ollama_client import OllamaProvider
from commitai.llm.openai_provider import OpenAIProvider


PROVIDERS = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "ollama": OllamaProvider,
}

_KEY_ENV = {
    "openai": ("openai_api_key", "OPENAI_API_KEY"),
    "anthropic": ("anthropic_api_key", "ANTHROPIC_API_KEY"),
}


def resolve_api_key(provider: str, config: Mapping[str, Any]) -> str:
    """Pick the API key: generic ``api_key``, provider key, then environment."""
    if config.get("api_key"):
        return str(config["api_key"])
    config_key, env_var = _KEY_ENV.get(provider, (None, None))
    if config_key and config.get(config_key):
        return str(config[config_key])
    if env_var:
        return os.environ.get(env_var, "")
    return ""


def create_provider(config: Mapping[str, Any]) -> BaseProvider:
    """Instantiate the provider named by ``config["provider"]``.

    Raises
    ------
    LLMError
        If the provider name is unknown.
    """
    name = str(config.get("provider") or "").lower()
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise LLMError(
            f"Unknown provider: {name or '(none)'}. "
            f"Supported providers: {', '.join(PROVIDERS)}"
        )
    kwargs: dict = {
        "model": config.get("model"),
        "api_key": resolve_api_key(name, config),
        "base_url": config.get("base_url"),
        "request_timeout": float(config.get("request_timeout") or 60),
        "max_tokens": config.get("max_tokens"),
    }
    if provider_cls is OllamaProvider and config.get("port") is not None:
        kwargs["port"] = int(config["port"])
    return provider_cls(**kwargs)
