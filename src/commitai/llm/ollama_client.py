"""
Client for interacting with an Ollama LLM server.

This provider wraps the Ollama ``/api/generate`` endpoint. The system
prompt and the diff are sent as a single prompt with ``format: json`` so
the model answers with a proposal document.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from commitai.llm.base import BaseProvider, LLMError, strip_thinking_tags


DEFAULT_OLLAMA_MODELS = ["llama3", "qwen2.5-coder", "mistral"]


class OllamaProvider(BaseProvider):
    """Provider for a local or remote Ollama server.

    Parameters
    ----------
    port : int, optional
        Port number of the Ollama server. Appended to ``base_url``.
    """

    name = "Ollama"
    default_base_url = "http://localhost"
    default_model = "llama3"

    def __init__(self, *args: Any, port: Optional[int] = 11434, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.port = port

    def _endpoint(self) -> str:
        if self.port:
            return f"{self.base_url}:{self.port}/api/generate"
        return f"{self.base_url}/api/generate"

    def complete(self, system: str, user: str) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "system": system,
            "prompt": user,
            "format": "json",
            "stream": False,
        }
        if self.max_tokens is not None:
            payload["options"] = {"num_predict": self.max_tokens}
        data = self._request("POST", self._endpoint(), payload)
        # /api/generate answers with 'response'; /api/chat style servers
        # put the text under 'message'
        if isinstance(data, dict) and "response" in data:
            return strip_thinking_tags(str(data.get("response", "")))
        if isinstance(data, dict) and isinstance(data.get("message"), dict):
            return strip_thinking_tags(str(data["message"].get("content", "")))
        raise LLMError("Unexpected response structure from Ollama")

    def list_models(self) -> List[str]:
        return list(DEFAULT_OLLAMA_MODELS)
