"""Layouts Exceptions

Custom exceptions for layout stack resolution.
"""

from __future__ import annotations


class LayoutsError(Exception):
    """Base exception for all layouts errors."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class LayoutConfigError(LayoutsError):
    """Raised when delimiter, tag or flag options are malformed."""

    pass


class LayoutCycleError(LayoutConfigError):
    """Raised when parent layout references loop back on themselves."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Layout cycle detected: {' -> '.join(cycle)}")
