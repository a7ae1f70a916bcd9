"""
logkit exceptions.
"""

from __future__ import annotations


class LogkitError(Exception):
    """Base class for errors raised by logkit."""


class LoggedError(LogkitError):
    """Wraps a non-exception value passed as the error of an ERROR/FATAL entry.

    The wrapped value is kept on `value`; the message is its `str()`.
    """

    def __init__(self, value: object) -> None:
        super().__init__(str(value))
        self.value = value
