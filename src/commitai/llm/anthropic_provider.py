"""
Anthropic messages provider.
"""

from __future__ import annotations

from typing import Any, Dict, List

from commitai.llm.base import BaseProvider, LLMError


ANTHROPIC_VERSION = "2023-06-01"

DEFAULT_ANTHROPIC_MODELS = [
    "claude-3-5-sonnet-latest",
    "claude-3-5-haiku-latest",
    "claude-3-opus-latest",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
]


class AnthropicProvider(BaseProvider):
    """Provider for the Anthropic ``/messages`` endpoint."""

    name = "Anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    default_model = "claude-3-haiku-20240307"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["anthropic-version"] = ANTHROPIC_VERSION
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def complete(self, system: str, user: str) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens or 1024,
            "temperature": 0.3,
            "system": system,
            "messages": [{"role": "user", "content": user}],
        }
        data = self._post("/messages", payload)
        try:
            blocks = data["content"]
            text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
        except (KeyError, TypeError, AttributeError) as exc:
            raise LLMError("Unexpected response structure from Anthropic") from exc
        if not text:
            raise LLMError("Anthropic returned no text content")
        return text

    def list_models(self) -> List[str]:
        return list(DEFAULT_ANTHROPIC_MODELS)
