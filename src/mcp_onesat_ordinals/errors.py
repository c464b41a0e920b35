"""Exceptions raised by the library.

Scanning never raises for script content it cannot classify; these are
reserved for caller misuse and for codec failures.
"""


class OrdinalError(Exception):
    """Base class for library errors."""


class BadArgumentError(OrdinalError, ValueError):
    """An argument provided is invalid."""

    def __init__(self, message: str):
        super().__init__(f"Bad argument: {message}")


class ScriptDecodeError(OrdinalError, ValueError):
    """Script bytes could not be decoded into operations."""


class TransactionDecodeError(BadArgumentError):
    """Raw transaction bytes could not be decoded."""
