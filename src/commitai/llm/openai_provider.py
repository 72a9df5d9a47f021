"""
OpenAI chat-completions provider.
"""

from __future__ import annotations

from typing import Any, Dict, List

from commitai.llm.base import BaseProvider, LLMError


DEFAULT_OPENAI_MODELS = ["gpt-4o-mini", "gpt-4o", "gpt-3.5-turbo"]


class OpenAIProvider(BaseProvider):
    """Provider for the OpenAI ``/chat/completions`` endpoint."""

    name = "OpenAI"
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o-mini"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def complete(self, system: str, user: str) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {"type": "json_object"},
            "temperature": 0.3,
        }
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        data = self._post("/chat/completions", payload)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("Unexpected response structure from OpenAI") from exc
        if not isinstance(content, str):
            raise LLMError("OpenAI returned no message content")
        return content

    def list_models(self) -> List[str]:
        """Return available GPT models, GPT-4 family first."""
        data = self._get("/models")
        try:
            ids = [entry["id"] for entry in data["data"]]
        except (KeyError, TypeError) as exc:
            raise LLMError("Unexpected response structure from OpenAI") from exc
        chat_models = sorted((i for i in ids if "gpt" in i), reverse=True)
        chat_models.sort(key=lambda model_id: "gpt-4" not in model_id)
        return chat_models or list(DEFAULT_OPENAI_MODELS)
