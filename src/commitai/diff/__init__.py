"""
Utilities for obtaining the diff text sent to the reasoning service.

See :mod:`commitai.diff.diff_extractor`.
"""

from .diff_extractor import NoChangesError, extract_diff_context, read_diff_stream  # noqa: F401
