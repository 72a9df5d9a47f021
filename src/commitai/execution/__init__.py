"""
Execution of merged commit groups.

See :mod:`commitai.execution.orchestrator`.
"""

from .orchestrator import (  # noqa: F401
    BatchResult,
    BatchSummary,
    CommitOrchestrator,
    CommitOutcome,
    GroupExecutionFailure,
    OutcomeStatus,
    build_commit_message,
)
