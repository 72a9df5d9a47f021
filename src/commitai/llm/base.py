"""
Shared pieces of the reasoning-service providers.

Every provider talks to an HTTP API with :mod:`requests`, sends the same
system prompt asking for JSON commit proposals, and returns the raw text
of the model's answer. Errors of any kind (connection, HTTP status,
undecodable body, unexpected structure) are raised as :class:`LLMError`.
Failed calls are not retried.
"""

from __future__ import annotations

import json
import logging
import re
from textwrap import dedent
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LLMError(Exception):
    """Raised when communication with the reasoning service fails."""

    pass


SYSTEM_PROMPT = dedent(
    """
    You are a helpful assistant that generates git commit messages from diffs.
    Analyze the provided git diff and generate appropriate commit messages.

    Return a JSON object with a "commits" array where each entry has:
    - "message": a concise, descriptive commit message following conventional commit format
    - "files": array of file paths that should be included in this commit

    Group related changes together. If there are multiple logical changes, create multiple commit objects.
    Deleted files must be listed in the commit that removes them.

    Example output:
    {
      "commits": [
        {
          "message": "feat: add user authentication module",
          "files": ["src/auth.js", "src/middleware/auth.js"]
        },
        {
          "message": "fix: correct typo in documentation",
          "files": ["README.md"]
        }
      ]
    }

    Focus on clarity and following git commit best practices.
    """
).strip()

USER_PROMPT = (
    "Please analyze this git diff and generate appropriate commit messages. "
    "Return ONLY valid JSON:\n\n{diff}"
)

_JSON_OPENER = re.compile(r"[\[{]")


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks such as ``<think>...</think>`` from a response.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    """
    thinking_patterns = [
        r"<think>.*?</think>",
        r"<thinking>.*?</thinking>",
        r"<thought>.*?</thought>",
        r"<reasoning>.*?</reasoning>",
    ]
    result = text
    for pattern in thinking_patterns:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


def extract_json_text(text: str) -> str:
    """Return the JSON object or array embedded in ``text``.

    Models sometimes wrap their JSON in prose. The first complete JSON
    value starting at a ``{`` or ``[`` is returned, so trailing prose is
    dropped even when it contains brackets of its own. If nothing
    decodes, the span from the first opener to the last matching closer
    is returned (or the stripped text when there is no such span) and
    left for the proposal normalizer to reject.
    """
    text = strip_thinking_tags(text)
    decoder = json.JSONDecoder()
    for match in _JSON_OPENER.finditer(text):
        try:
            _value, end = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        return text[match.start() : end]

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return text
    return text[start : end + 1]


class BaseProvider:
    """Base class for reasoning-service providers.

    Parameters
    ----------
    model : str
        Model identifier understood by the provider.
    api_key : str, optional
        Credential sent with each request.
    base_url : str, optional
        API root. Each provider has its own default.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests.
    max_tokens : int, optional
        Upper bound on generated tokens, if the provider supports one.
    """

    name = "base"
    default_base_url = ""
    default_model = ""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        request_timeout: float = 60.0,
        max_tokens: Optional[int] = None,
    ) -> None:
        self.model = model or self.default_model
        self.api_key = api_key or ""
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.request_timeout = request_timeout
        self.max_tokens = max_tokens

    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def user_prompt(self, diff: str) -> str:
        return USER_PROMPT.format(diff=diff)

    def complete(self, system: str, user: str) -> str:
        """Send one system/user exchange and return the model's text."""
        raise NotImplementedError("complete must be implemented by subclass")

    def generate(self, diff: str) -> str:
        """Ask the model for commit proposals and return the JSON text."""
        raw = self.complete(self.system_prompt(), self.user_prompt(diff))
        return extract_json_text(raw)

    def list_models(self) -> List[str]:
        return [self.default_model]

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def _request(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("Sending %s request to %s provider at %s", method, self.name, url)
        try:
            response = requests.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to %s: %s", self.name, exc)
            raise LLMError(f"{self.name} API error: {exc}") from exc
        if response.status_code != 200:
            logger.error(
                "%s returned non-200 status %s: %s", self.name, response.status_code, response.text
            )
            raise LLMError(
                f"{self.name} API error: status {response.status_code}: {response.text}"
            )
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse %s response: %s", self.name, exc)
            raise LLMError(f"Failed to parse {self.name} response") from exc

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        return self._request("POST", f"{self.base_url}{path}", payload)

    def _get(self, path: str) -> Any:
        return self._request("GET", f"{self.base_url}{path}")
