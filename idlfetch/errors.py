"""
Error Kinds for idlfetch.

Every failure in the fetch → decode → write flow is reported as an
IdlError tagged with exactly one ErrorKind. The set is closed: callers
branch on ``error.kind`` rather than on message text.

Kinds are grouped into categories so a caller can tell network,
format and storage failures apart without listing every kind:

    address  — ADDRESS_FORMAT
    network  — TRANSPORT, NOT_FOUND, NOT_EXECUTABLE
    format   — TOO_SHORT, WRONG_DISCRIMINATOR, TRUNCATED, MALFORMED_DOCUMENT
    storage  — IO
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Closed set of failure kinds."""
    ADDRESS_FORMAT = "address_format"
    TRANSPORT = "transport"
    NOT_FOUND = "not_found"
    NOT_EXECUTABLE = "not_executable"
    TOO_SHORT = "too_short"
    WRONG_DISCRIMINATOR = "wrong_discriminator"
    TRUNCATED = "truncated"
    MALFORMED_DOCUMENT = "malformed_document"
    IO = "io"

    @property
    def category(self) -> str:
        return _CATEGORIES[self]


_CATEGORIES = {
    ErrorKind.ADDRESS_FORMAT: "address",
    ErrorKind.TRANSPORT: "network",
    ErrorKind.NOT_FOUND: "network",
    ErrorKind.NOT_EXECUTABLE: "network",
    ErrorKind.TOO_SHORT: "format",
    ErrorKind.WRONG_DISCRIMINATOR: "format",
    ErrorKind.TRUNCATED: "format",
    ErrorKind.MALFORMED_DOCUMENT: "format",
    ErrorKind.IO: "storage",
}


class IdlError(Exception):
    """
    Raised when any stage of IDL retrieval fails.

    Attributes:
        kind: The ErrorKind that was matched
        reason: Human-readable description
        address: Account address involved, if any
        cause: Underlying exception, if any
        details: Structured values describing the failure
            (e.g. ``length`` and ``required`` for size checks)
    """

    def __init__(
        self,
        kind: ErrorKind,
        reason: str,
        address: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **details: Any,
    ):
        self.kind = kind
        self.reason = reason
        self.address = address
        self.cause = cause
        self.details = details
        super().__init__(f"[{kind.value}] {reason}")

    @property
    def category(self) -> str:
        return self.kind.category
