"""
Diff extraction utilities.

This module builds the text handed to the reasoning service. When reading
from Git, staged changes are preferred; if nothing is staged the unstaged
working tree changes are used instead. The text includes the porcelain
status, a per-kind file summary, the name-status listing and the diff
itself, so that deletions (which have no content diff) are still visible.
"""

from __future__ import annotations

import logging
from typing import IO, Dict, List, Union

from commitai.vcs.git_client import FileChange, GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class NoChangesError(GitError):
    """Raised when the repository has neither staged nor unstaged changes."""

    pass


def _summarize(changes: List[FileChange], staged: bool) -> str:
    """Render ``Deleted/Added/Modified files`` blocks for one side of the index."""
    buckets: Dict[str, List[str]] = {"deleted": [], "added": [], "modified": []}
    for change in changes:
        code = change.index_status if staged else change.worktree_status
        if change.status in buckets and code == change.status[0].upper():
            buckets[change.status].append(change.path)

    suffix = "" if staged else " (unstaged)"
    parts = []
    for kind in ("deleted", "added", "modified"):
        if buckets[kind]:
            listing = "\n".join(f"  - {path}" for path in buckets[kind])
            parts.append(f"{kind.capitalize()} files{suffix}:\n{listing}\n\n")
    return "".join(parts)


def extract_diff_context(client: GitClient) -> str:
    """Collect status and diff text for the reasoning service.

    Parameters
    ----------
    client : GitClient
        Client bound to the repository to inspect.

    Returns
    -------
    str
        Combined status/diff description.

    Raises
    ------
    NoChangesError
        If there is nothing staged and nothing changed in the working tree.
    GitError
        If any Git command fails.
    """
    status = client.get_status()
    changes = client.get_changes()
    staged_diff = client.get_diff(staged=True)

    if staged_diff.strip():
        summary = _summarize(changes, staged=True)
        name_status = client.get_name_status(staged=True)
        return (
            f"Git Status:\n{status}\n\n{summary}"
            f"Git Diff Name Status (Staged):\n{name_status}\n\n"
            f"Git Diff (Staged):\n{staged_diff}"
        )

    staged_deletions = [c.path for c in changes if c.index_status == "D"]
    if staged_deletions:
        summary = _summarize(changes, staged=True)
        name_status = client.get_name_status(staged=True)
        return (
            f"Git Status:\n{status}\n\n{summary}"
            f"Git Diff Name Status (Staged):\n{name_status}\n\n"
            "Note: Only file deletions are staged (no content diff available)"
        )

    unstaged_diff = client.get_diff(staged=False)
    unstaged_deletions = [c.path for c in changes if c.worktree_status == "D"]
    if not unstaged_diff.strip() and not unstaged_deletions:
        raise NoChangesError(
            'No changes detected. Please stage your changes with "git add" '
            "or make some changes first."
        )

    logger.warning("No staged changes found; using unstaged changes instead")
    summary = _summarize(changes, staged=False)
    name_status = client.get_name_status(staged=False)
    return (
        f"Git Status:\n{status}\n\n{summary}"
        f"Git Diff Name Status (Unstaged):\n{name_status}\n\n"
        f"Git Diff (Unstaged):\n{unstaged_diff}"
    )


def read_diff_stream(stream: IO[Union[str, bytes]]) -> str:
    """Read a whole diff from a text or binary stream such as stdin."""
    data = stream.read()
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
