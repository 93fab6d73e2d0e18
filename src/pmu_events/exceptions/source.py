"""Input-related exceptions: unreadable files, malformed JSON, bad structure."""

from pathlib import Path
from typing import Optional, Union

from .base import PmuEventsError


class SourceError(PmuEventsError):
    """Base class for errors about the event file itself."""
    pass


class SourceUnavailableError(SourceError):
    """Raised when no event file could be resolved or read."""

    def __init__(self, path: Optional[Union[str, Path]], reason: str):
        shown = str(path) if path is not None else "<default>"
        super().__init__(
            f"Cannot read event file: {shown}",
            details={"path": shown, "reason": reason},
        )
        self.path = path
        self.reason = reason


class TokenizeError(SourceError):
    """Raised when the event file is not well-formed JSON."""

    def __init__(self, reason: str, line: int):
        super().__init__(f"Malformed JSON at line {line}: {reason}")
        self.reason = reason
        self.line = line


class StructureError(SourceError):
    """Raised when the JSON does not have the event-list shape.

    The message follows the ``file:line: expected X, got Y`` form used by
    compiler-style diagnostics so editors can jump to the offending token.
    """

    def __init__(self, filename: str, line: int, expected: str, got: str):
        super().__init__(f"{filename}:{line}: {expected}, got {got}")
        self.filename = filename
        self.line = line
        self.expected = expected
        self.got = got
