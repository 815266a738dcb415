from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    transport = "transport"
    decoding = "decoding"
    application = "application"


class SyncError(Exception):
    """A remote call or source read that did not succeed."""

    def __init__(self, message: str, kind: FailureKind = FailureKind.application) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        return self.message


class SourceUnavailable(SyncError):
    """The menu spreadsheet could not be fetched or read."""
