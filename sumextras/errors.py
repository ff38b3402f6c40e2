"""
Exceptions raised by sumextras.

Statistical test failures (e.g. a single-level grouping column) are not
wrapped: they reach the caller as the original scipy exception.
"""


class SumExtrasError(Exception):
    """Base exception for sumextras."""


class MissingDictionaryError(SumExtrasError):
    """Raised when a labeling operation has no dictionary to work from."""


class UnsupportedTableKindError(SumExtrasError, TypeError):
    """Raised when a table is neither a standard nor a survey summary table."""
