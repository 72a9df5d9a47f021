"""
Grouping logic for commit proposals.

This package normalizes raw proposals from the reasoning service and
merges overlapping ones into non-overlapping commit groups. See
:mod:`commitai.grouping.normalizer` and :mod:`commitai.grouping.merger`.
"""

from .group_model import MergedGroup, Proposal  # noqa: F401
from .merger import DisjointSet, group_document, merge_proposals  # noqa: F401
from .normalizer import (  # noqa: F401
    EmptyBatch,
    InvalidInput,
    ProposalError,
    normalize_proposals,
    require_proposals,
)
