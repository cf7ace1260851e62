"""Provider factory and defaults."""

from __future__ import annotations

import os
from typing import Dict

from .base import ChatProvider
from .gemini import GeminiProvider
from .types import GenerationConfig, LLMResponse, Message

PROVIDER_DEFAULTS: Dict[str, Dict[str, str]] = {
    "gemini": {"env_key": "GEMINI_API_KEY", "model": "gemini-1.5-flash"},
}


def create_provider(provider: str, api_key: str, model: str = "") -> ChatProvider:
    provider_name = (provider or "gemini").lower()
    if provider_name not in PROVIDER_DEFAULTS:
        raise ValueError(f"Unsupported provider: {provider}")

    api_key = resolve_api_key(provider_name, api_key)
    return GeminiProvider(api_key=api_key, model=model or PROVIDER_DEFAULTS[provider_name]["model"])


def resolve_api_key(provider: str, api_key: str) -> str:
    """Pick the key for ``provider``: its env var first, then the configured value.

    A configured ``${VAR}`` placeholder is looked up in the environment; an
    unresolved placeholder counts as missing.
    """
    env_key = PROVIDER_DEFAULTS.get(provider, PROVIDER_DEFAULTS["gemini"])["env_key"]
    configured = (api_key or "").strip()
    if configured.startswith("${") and configured.endswith("}"):
        configured = os.environ.get(configured[2:-1], "")
    key = os.environ.get(env_key, "") or configured
    if not key:
        raise ValueError(f"{env_key} not set. Export it or add gemini.api_key to config/config.local.yaml")
    return key


__all__ = [
    "ChatProvider",
    "GeminiProvider",
    "GenerationConfig",
    "LLMResponse",
    "Message",
    "PROVIDER_DEFAULTS",
    "create_provider",
    "resolve_api_key",
]
