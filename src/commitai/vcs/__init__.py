"""
Version control system (VCS) integration.

This package contains the Git client used both as the diff source for
the reasoning service and as the backend that stages and commits each
merged group.
"""

from .git_client import FileChange, GitClient, GitError  # noqa: F401
