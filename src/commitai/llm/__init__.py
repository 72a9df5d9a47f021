"""
Reasoning-service integration for commitai.

This package contains the HTTP providers (OpenAI, Anthropic, Ollama)
that turn diff text into commit proposals, the :func:`create_provider`
factory, and the :class:`ProposalGenerator` which feeds provider output
through the grouping engine.
"""

from .anthropic_provider import AnthropicProvider  # noqa: F401
from .base import BaseProvider, LLMError, strip_thinking_tags  # noqa: F401
from .factory import PROVIDERS, create_provider  # noqa: F401
from .ollama_client import OllamaProvider  # noqa: F401
from .openai_provider import OpenAIProvider  # noqa: F401
from .proposal_generator import ProposalGenerator  # noqa: F401
