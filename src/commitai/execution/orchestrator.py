"""
Execution of merged commit groups against the Git backend.

Each :class:`MergedGroup` becomes at most one commit. Groups are handled
strictly one after another because every commit mutates the same index
and history. Per group the orchestrator walks the states::

    PENDING -> (CONFIRMING) -> STAGING -> COMMITTING -> SUCCESS
                    |              |           |
                    v              v           v
                 SKIPPED         FAILED      FAILED

A declined confirmation leaves the repository untouched for that group.
A backend error while staging or committing marks the group ``FAILED``
and processing continues with the next group. Paths that were staged
before a failed commit are *not* unstaged, and groups committed earlier
in the batch are never rolled back.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from commitai.grouping.group_model import MergedGroup
from commitai.vcs.git_client import GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DECLINED = "declined"

Confirmation = Callable[[str, List[str], str], bool]


class CommitBackend(Protocol):
    def stage_path(self, path: str) -> str: ...

    def commit(self, message: str, files: Sequence[str]) -> str: ...

    def planned_commit_command(self, message: str, files: Sequence[str]) -> str: ...


class GroupState(enum.Enum):
    PENDING = "pending"
    CONFIRMING = "confirming"
    STAGING = "staging"
    COMMITTING = "committing"
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class OutcomeStatus(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class GroupExecutionFailure(Exception):
    """Raised when staging or committing a group fails.

    Never escapes :meth:`CommitOrchestrator.execute_group`; it is turned
    into a ``FAILED`` outcome.
    """

    def __init__(self, state: GroupState, detail: str) -> None:
        super().__init__(detail)
        self.state = state
        self.detail = detail


@dataclass(frozen=True)
class CommitOutcome:
    """Result of attempting to realize one group."""

    group: MergedGroup
    status: OutcomeStatus
    detail: str

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


@dataclass(frozen=True)
class BatchSummary:
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0

    @property
    def has_failures(self) -> bool:
        """True if at least one group failed. Skipped groups do not count."""
        return self.failed_count > 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[CommitOutcome]) -> "BatchSummary":
        statuses = [outcome.status for outcome in outcomes]
        return cls(
            success_count=statuses.count(OutcomeStatus.SUCCESS),
            failed_count=statuses.count(OutcomeStatus.FAILED),
            skipped_count=statuses.count(OutcomeStatus.SKIPPED),
        )


@dataclass
class BatchResult:
    outcomes: List[CommitOutcome] = field(default_factory=list)

    @property
    def summary(self) -> BatchSummary:
        return BatchSummary.from_outcomes(self.outcomes)


def build_commit_message(group: MergedGroup) -> str:
    """Render the commit message for ``group``.

    The first message is the subject; any further messages follow on
    their own lines as ``- `` bullet items.
    """
    message = group.primary_message
    extra = group.messages[1:]
    if extra:
        message += "\n" + "\n".join(f"- {m}" for m in extra)
    return message


class CommitOrchestrator:
    """Apply merged groups to a backend one at a time.

    Parameters
    ----------
    backend : CommitBackend
        Object providing ``stage_path``, ``commit`` and
        ``planned_commit_command`` (normally a :class:`GitClient`).
    confirm : Confirmation, optional
        Called with ``(message, files, planned_command)`` before a group
        is applied. Returning ``False`` skips the group. When omitted,
        every group proceeds.
    """

    def __init__(self, backend: CommitBackend, confirm: Optional[Confirmation] = None) -> None:
        self.backend = backend
        self.confirm = confirm

    def _transition(self, group: MergedGroup, state: GroupState) -> GroupState:
        logger.debug("Group %r -> %s", group.primary_message, state.value)
        return state

    def _apply(self, group: MergedGroup, message: str) -> str:
        files = list(group.files)
        state = self._transition(group, GroupState.STAGING)
        try:
            for path in files:
                self.backend.stage_path(path)
            state = self._transition(group, GroupState.COMMITTING)
            return self.backend.commit(message, files)
        except GitError as exc:
            raise GroupExecutionFailure(state, str(exc)) from exc

    def execute_group(self, group: MergedGroup) -> CommitOutcome:
        """Confirm, stage and commit one group, returning its outcome."""
        self._transition(group, GroupState.PENDING)
        message = build_commit_message(group)
        files = list(group.files)

        if self.confirm is not None:
            self._transition(group, GroupState.CONFIRMING)
            planned = self.backend.planned_commit_command(message, files)
            if not self.confirm(message, files, planned):
                self._transition(group, GroupState.SKIPPED)
                logger.info("Skipped group %r: %s", group.primary_message, DECLINED)
                return CommitOutcome(group=group, status=OutcomeStatus.SKIPPED, detail=DECLINED)

        try:
            output = self._apply(group, message)
        except GroupExecutionFailure as failure:
            self._transition(group, GroupState.FAILED)
            logger.warning(
                "Group %r failed while %s: %s",
                group.primary_message,
                failure.state.value,
                failure.detail,
            )
            return CommitOutcome(group=group, status=OutcomeStatus.FAILED, detail=failure.detail)

        self._transition(group, GroupState.SUCCESS)
        logger.info("Committed group %r (%d file(s))", group.primary_message, len(files))
        return CommitOutcome(group=group, status=OutcomeStatus.SUCCESS, detail=output)

    def execute(self, groups: Sequence[MergedGroup]) -> BatchResult:
        """Execute ``groups`` in order. Every group yields exactly one outcome."""
        result = BatchResult()
        for group in groups:
            result.outcomes.append(self.execute_group(group))
        summary = result.summary
        logger.info(
            "Batch finished: %d successful, %d failed, %d skipped",
            summary.success_count,
            summary.failed_count,
            summary.skipped_count,
        )
        return result
