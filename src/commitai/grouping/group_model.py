"""
Data models for commit grouping.

A :class:`Proposal` is one candidate commit as returned by the reasoning
service after normalization. A :class:`MergedGroup` is the reconciled,
non-overlapping commit unit produced by the grouping engine and consumed
by the execution orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple


def unique_paths(paths: Iterable[str]) -> Tuple[str, ...]:
    """Return ``paths`` without duplicates, keeping first-seen order."""
    return tuple(dict.fromkeys(paths))


@dataclass(frozen=True)
class Proposal:
    """A single candidate commit.

    Attributes
    ----------
    files : Tuple[str, ...]
        Paths touched by the proposal, unique and in first-seen order.
    messages : Tuple[str, ...]
        Commit messages proposed for the files. A plain ``message`` from
        the reasoning service becomes a one-element tuple.
    """

    files: Tuple[str, ...]
    messages: Tuple[str, ...]


@dataclass(frozen=True)
class MergedGroup:
    """A reconciled commit unit.

    Attributes
    ----------
    files : Tuple[str, ...]
        Non-empty set of paths owned by this group. No path appears in
        more than one group of a partition.
    messages : Tuple[str, ...]
        Non-empty list of messages, ordered by originating proposal.
    """

    files: Tuple[str, ...]
    messages: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.files:
            raise ValueError("MergedGroup requires at least one file")
        if not self.messages:
            raise ValueError("MergedGroup requires at least one message")

    @property
    def primary_message(self) -> str:
        return self.messages[0]

    def to_dict(self) -> Dict[str, Any]:
        return {"files": list(self.files), "messages": list(self.messages)}
