"""
Commit proposal generation using a reasoning service.

The :class:`ProposalGenerator` sends diff text to a provider, then runs
the answer through the proposal normalizer and the grouping engine so
that callers always receive non-overlapping :class:`MergedGroup` objects.
"""

from __future__ import annotations

import logging
from typing import List

from commitai.grouping.group_model import MergedGroup
from commitai.grouping.merger import group_document
from commitai.llm.base import BaseProvider


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class ProposalGenerator:
    """Generate merged commit groups from a diff."""

    def __init__(self, provider: BaseProvider) -> None:
        self.provider = provider

    def generate(self, diff: str) -> List[MergedGroup]:
        """Ask the provider for proposals and merge them.

        Raises
        ------
        ValueError
            If ``diff`` is not a non-empty string.
        LLMError
            If the provider call fails.
        InvalidInput
            If the provider's answer is not a proposal document.
        EmptyBatch
            If the answer contains no usable proposals.
        """
        if not isinstance(diff, str):
            raise ValueError("Diff must be a string")
        if not diff.strip():
            raise ValueError("No diff content provided")

        logger.debug("Requesting proposals from %s (model %s)", self.provider.name, self.provider.model)
        text = self.provider.generate(diff)
        groups = group_document(text)
        logger.debug("Provider answer reduced to %d group(s)", len(groups))
        return groups
