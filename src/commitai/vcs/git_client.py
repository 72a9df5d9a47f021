"""
Git client implementation for commitai.

This module wraps the Git operations required by the commit assistant:
reading status and diffs for the reasoning service, staging single
paths, and committing a set of paths. Git is treated as an opaque
backend; every call goes through :meth:`GitClient._run` so that unit
tests can mock it easily.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass
class FileChange:
    """Representation of a single entry of ``git status --porcelain``."""

    path: str
    index_status: str
    worktree_status: str
    status: str  # deleted, added, modified, renamed, untracked or unknown


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def _classify_status(index_status: str, worktree_status: str) -> str:
    codes = (index_status, worktree_status)
    if "D" in codes:
        return "deleted"
    if "A" in codes:
        return "added"
    if "M" in codes:
        return "modified"
    if "R" in codes:
        return "renamed"
    if codes == ("?", "?"):
        return "untracked"
    return "unknown"


class GitClient:
    """Client for interacting with a Git repository.

    Parameters
    ----------
    repo_root : Path
        Working directory for every Git invocation.
    git_path : str, optional
        Git executable to run. Defaults to ``git`` on ``PATH``.
    """

    def __init__(self, repo_root: Path, git_path: str = "git") -> None:
        self.repo_root = repo_root
        self.git_path = git_path or "git"

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If Git cannot be started, or the command exits with a non-zero
            status when ``check`` is True.
        """
        full_cmd = [self.git_path] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Unable to run Git executable '%s': %s", self.git_path, exc)
            raise GitError(f"Unable to run '{self.git_path}': {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(
                result.stderr.strip()
                or result.stdout.strip()
                or f"'{' '.join(full_cmd)}' exited with status {result.returncode}"
            )
        return result

    # ------------------------------------------------------------------
    # Status and diffs
    # ------------------------------------------------------------------
    def get_status(self) -> str:
        """Return the raw ``git status --porcelain`` output."""
        return self._run(["status", "--porcelain"]).stdout

    def get_changes(self) -> List[FileChange]:
        """Parse ``git status --porcelain`` into :class:`FileChange` entries.

        Untracked files are included with status ``untracked``; renamed
        entries keep Git's ``old -> new`` notation in ``path``.
        """
        changes: List[FileChange] = []
        for line in self.get_status().splitlines():
            # XY + space + path
            if len(line) < 3:
                continue
            index_status, worktree_status = line[0], line[1]
            changes.append(
                FileChange(
                    path=line[3:],
                    index_status=index_status,
                    worktree_status=worktree_status,
                    status=_classify_status(index_status, worktree_status),
                )
            )
        return changes

    def get_diff(self, staged: bool = False) -> str:
        """Return the unified diff of staged or unstaged changes."""
        args = ["diff", "--staged"] if staged else ["diff"]
        return self._run(args).stdout

    def get_name_status(self, staged: bool = False) -> str:
        """Return ``git diff --name-status`` for staged or unstaged changes."""
        args = ["diff", "--staged", "--name-status"] if staged else ["diff", "--name-status"]
        return self._run(args).stdout

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_path(self, path: str) -> str:
        """Stage one path, whatever kind of change it carries.

        ``git add --all`` records additions, modifications and deletions
        alike, so no status lookup is needed first.
        """
        return self._run(["add", "--all", "--", path]).stdout

    def _commit_args(self, message: str, files: Sequence[str]) -> List[str]:
        return ["commit", "-m", message, "--", *files]

    def planned_commit_command(self, message: str, files: Sequence[str]) -> str:
        """Return the commit command line that :meth:`commit` would run."""
        return shlex.join([self.git_path, *self._commit_args(message, files)])

    def commit(self, message: str, files: Sequence[str]) -> str:
        """Commit ``files`` with ``message`` and return Git's output.

        Only the listed paths are committed even if other paths are
        staged in the index.
        """
        return self._run(self._commit_args(message, files)).stdout
