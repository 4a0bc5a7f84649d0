"""Exceptions for viewstore."""

from __future__ import annotations


class ViewStoreError(Exception):
    """Base class for every error raised by viewstore."""


class ConfigurationError(ViewStoreError, ValueError):
    """Raised before any tool call when settings or arguments are unusable.

    Covers a missing/invalid tool or view path and missing required
    arguments such as an empty label.  Never retried.
    """


class ToolError(ViewStoreError):
    """Raised when the external tool exits non-zero or cannot be launched.

    The message is the tool's collected output lines followed by its
    standard error with line breaks removed.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        arguments: tuple[str, ...] = (),
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.arguments = tuple(arguments)
        self.returncode = returncode
        self.stderr = stderr


class ToolTimeoutError(ToolError):
    """Raised when the tool outlives the configured timeout and is killed."""


class NotAvailableError(ViewStoreError):
    """Raised by :meth:`~viewstore.ViewStore.validate_connection`.

    Wraps any underlying failure so the host can report the provider as
    unavailable rather than as a failed operation.
    """
