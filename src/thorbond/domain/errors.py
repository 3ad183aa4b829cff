"""Error taxonomy for the bonding engine."""

from __future__ import annotations


class ThorBondError(RuntimeError):
    """Base class for every error raised by thorbond."""


class ValidationError(ThorBondError, ValueError):
    """Raised when input to an encode/validate call violates a constraint.

    ``field`` names the offending parameter so callers can point at it.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotInitializedError(ThorBondError):
    """Raised when a read is attempted before the engine has loaded its actions."""


class FetchError(ThorBondError):
    """Raised when the indexer or node-state service cannot be read."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvariantViolation(ThorBondError):  # noqa: N818
    """Raised when request and registry streams disagree (e.g. an unknown node)."""


class WalletError(ThorBondError):
    """Raised when the wallet is unavailable or rejects a transfer.

    ``error`` carries the wallet's own error object unmodified.
    """

    def __init__(self, message: str, *, error: object | None = None) -> None:
        super().__init__(message)
        self.error = error


__all__ = [
    "FetchError",
    "InvariantViolation",
    "NotInitializedError",
    "ThorBondError",
    "ValidationError",
    "WalletError",
]
