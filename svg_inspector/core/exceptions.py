from __future__ import annotations

"""Exception classes for the document engine.

None of these are fatal to a session: :class:`ParseError` is recovered by
treating the document as absent and :class:`InvalidOperation` is turned into a
no-op result by the services.
"""

from typing import Optional


class SvgInspectorError(Exception):
    """Base exception for all engine errors."""


class ParseError(SvgInspectorError):
    """Raised when document text is not well-formed markup.

    Carries the parser position when one is known.
    """

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.cause = cause

    def __str__(self) -> str:
        if self.line is not None:
            return f"{super().__str__()} (line {self.line}, column {self.column or 0})"
        return super().__str__()


class InvalidOperation(SvgInspectorError):
    """Raised by tree primitives when asked for an impossible structural edit."""
