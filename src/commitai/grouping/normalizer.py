"""
Normalization of raw commit proposals.

The reasoning service is asked for JSON but is free to answer with a
single commit object, a bare list of commit objects, or an object that
wraps the list under ``commits``. Each entry may carry either a single
``message`` or a ``messages`` list. This module turns all of these shapes
into an ordered list of :class:`Proposal` objects and drops entries that
cannot become a commit (no message, no files).

Only a document that cannot be read as an object or list at all is an
error (:class:`InvalidInput`); individual bad entries are logged and
skipped.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Sequence, Tuple

from commitai.grouping.group_model import Proposal, unique_paths


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


_CODE_FENCE = re.compile(r"^```[\w-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


class ProposalError(Exception):
    """Base class for errors that abort a batch before grouping."""

    pass


class InvalidInput(ProposalError):
    """Raised when the proposal document cannot be parsed into an object or list."""

    pass


class EmptyBatch(ProposalError):
    """Raised when no usable proposals remain after normalization."""

    pass


def load_document(raw: Any) -> Any:
    """Parse ``raw`` into a JSON object or list.

    ``str`` and ``bytes`` are decoded as JSON (a surrounding Markdown code
    fence is tolerated). Already parsed ``dict``/``list`` values are
    returned unchanged.

    Raises
    ------
    InvalidInput
        If the text is not JSON or the top-level value is not an object
        or a list.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Input is not valid UTF-8: {exc}") from exc
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidInput("Input is empty")
        fenced = _CODE_FENCE.match(text)
        if fenced:
            text = fenced.group(1).strip()
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Invalid JSON input: {exc}") from exc
    if not isinstance(raw, (dict, list)):
        raise InvalidInput(
            f"Expected a JSON object or list, got {type(raw).__name__}"
        )
    return raw


def _entries(document: Any) -> List[Any]:
    if isinstance(document, list):
        return document
    if "commits" in document:
        commits = document["commits"]
        if not isinstance(commits, list):
            raise InvalidInput("'commits' must be a list")
        return commits
    return [document]


def _text_items(value: Any) -> Tuple[str, ...]:
    """Return the non-blank strings in ``value`` exactly as given."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item.strip())


def _entry_messages(entry: dict) -> Tuple[str, ...]:
    messages = _text_items(entry.get("messages")) or _text_items(entry.get("message"))
    return tuple(message.strip() for message in messages)


def normalize_entry(entry: Any, position: int = 0) -> Optional[Proposal]:
    """Normalize a single raw entry, or return ``None`` if it must be dropped."""
    if not isinstance(entry, dict):
        logger.warning("Skipping proposal #%d: not an object", position)
        return None
    messages = _entry_messages(entry)
    if not messages:
        logger.warning("Skipping proposal #%d: no message", position)
        return None
    files = unique_paths(_text_items(entry.get("files")))
    if not files:
        logger.warning(
            "Skipping proposal #%d with messages %r: no files specified",
            position,
            list(messages),
        )
        return None
    return Proposal(files=files, messages=messages)


def normalize_proposals(raw: Any) -> List[Proposal]:
    """Turn a raw proposal document into an ordered list of proposals.

    Parameters
    ----------
    raw : Any
        JSON text, bytes, or an already parsed object/list.

    Returns
    -------
    List[Proposal]
        Valid proposals in input order. May be empty.

    Raises
    ------
    InvalidInput
        If the document itself is malformed.
    """
    document = load_document(raw)
    proposals: List[Proposal] = []
    for position, entry in enumerate(_entries(document)):
        proposal = normalize_entry(entry, position)
        if proposal is not None:
            proposals.append(proposal)
    logger.debug("Normalized %d proposal(s)", len(proposals))
    return proposals


def require_proposals(proposals: Sequence[Proposal]) -> List[Proposal]:
    """Return ``proposals`` as a list, raising :class:`EmptyBatch` if there are none."""
    if not proposals:
        raise EmptyBatch("No commits found in input")
    return list(proposals)
