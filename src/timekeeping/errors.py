#!/usr/bin/env python3
"""
Error types raised by timekeeping operations.
"""


class TimekeepingError(Exception):
    """
    Base class for expected, user-facing timekeeping failures.
    """


class MalformedDate(TimekeepingError):
    def __init__(self, text: str) -> None:
        super().__init__(
            f"Invalid date format: {text!r}. Please use MM.DD or YYYY.MM.DD."
        )
        self.text = text


class MissingRequiredArgument(TimekeepingError):
    def __init__(self, name: str, message: str = "") -> None:
        super().__init__(message or f"--{name} is required.")
        self.name = name


class InvalidPeriod(TimekeepingError):
    def __init__(self, month: int) -> None:
        super().__init__(
            f"Invalid month: {month}. Please specify a month between 1 and 12."
        )
        self.month = month


class StoreUnavailable(TimekeepingError):
    """
    Raised when the time log document cannot be read or written.
    """
