# gradestyle/errors.py
"""
Error types for the gradestyle scoring pipeline.

Error hierarchy
───────────────
::

    GradeStyleError (base)
    ├── AnalysisError          - the analysed repository could not be read
    │   └── SourceParseError   - a source file could not be scanned (fatal)
    ├── ConfigurationError     - unknown mode/category, bad thresholds (fatal)
    ├── ViolationReportError   - unreadable detector output (fatal)
    └── UnknownRuleError       - rule identifier with no violation kind

Error codes
───────────
Each error carries a code of the form ``GS-NNNN``:

  - 0001-0999: source analysis
  - 1000-1999: configuration
  - 2000-2999: detector reports
  - 9000-9999: internal

A member access whose target cannot be classified is *not* an error: it is
reported as a :class:`ResolutionFailure` value inside
:class:`gradestyle.static_access.Resolution`.  Keeping it out of this
hierarchy means nothing can catch it by accident alongside a parse failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from pathlib import Path
from typing import Optional, Union


@unique
class ErrorPhase(Enum):
    """Pipeline phase in which an error was raised."""
    ANALYSIS = "analysis"
    CONFIGURATION = "configuration"
    REPORT = "report"
    INTERNAL = "internal"


class ErrorCode:
    """A structured ``GS-NNNN`` error code."""

    __slots__ = ("number", "phase", "summary")

    def __init__(self, number: int, phase: ErrorPhase, summary: str) -> None:
        self.number = number
        self.phase = phase
        self.summary = summary

    @property
    def code(self) -> str:
        return f"GS-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code}, {self.phase.value}, {self.summary!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCode):
            return NotImplemented
        return self.number == other.number

    def __hash__(self) -> int:
        return hash(self.number)


class ErrorCodes:
    """Predefined error codes."""

    # ── analysis (0001-0999) ────────────────────────────────────────────
    INVALID_TOKEN = ErrorCode(1, ErrorPhase.ANALYSIS, "invalid token")
    UNEXPECTED_TOKEN = ErrorCode(2, ErrorPhase.ANALYSIS, "unexpected token")
    UNEXPECTED_EOF = ErrorCode(3, ErrorPhase.ANALYSIS, "unexpected end of file")
    UNREADABLE_SOURCE = ErrorCode(4, ErrorPhase.ANALYSIS, "unreadable source file")
    MISSING_REPOSITORY = ErrorCode(5, ErrorPhase.ANALYSIS, "repository not found")

    # ── configuration (1000-1999) ───────────────────────────────────────
    UNKNOWN_MODE = ErrorCode(1000, ErrorPhase.CONFIGURATION, "unknown scoring mode")
    UNKNOWN_CATEGORY = ErrorCode(1001, ErrorPhase.CONFIGURATION, "unknown category")
    INVALID_THRESHOLDS = ErrorCode(1002, ErrorPhase.CONFIGURATION, "invalid thresholds")
    DUPLICATE_CATEGORY = ErrorCode(1003, ErrorPhase.CONFIGURATION, "duplicate category")
    MALFORMED_CONFIG = ErrorCode(1004, ErrorPhase.CONFIGURATION, "malformed configuration")

    # ── detector reports (2000-2999) ────────────────────────────────────
    MALFORMED_REPORT = ErrorCode(2000, ErrorPhase.REPORT, "malformed violation report")
    UNKNOWN_RULE = ErrorCode(2001, ErrorPhase.REPORT, "unknown rule identifier")

    # ── internal (9000-9999) ────────────────────────────────────────────
    INTERNAL_ERROR = ErrorCode(9000, ErrorPhase.INTERNAL, "internal error")


class GradeStyleError(Exception):
    """Base exception for all gradestyle errors."""

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class AnalysisError(GradeStyleError):
    """The repository under analysis could not be processed."""

    default_code = ErrorCodes.UNREADABLE_SOURCE


class SourceParseError(AnalysisError):
    """A source file could not be scanned.  Always fatal to the pass."""

    default_code = ErrorCodes.UNEXPECTED_TOKEN

    def __init__(
        self,
        message: str,
        path: Union[str, Path, None] = None,
        line: int = 0,
        code: Optional[ErrorCode] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.line = line
        where = ""
        if self.path is not None:
            where = f"{self.path}:{line}: " if line else f"{self.path}: "
        elif line:
            where = f"line {line}: "
        super().__init__(f"{where}{message}", code)


class ConfigurationError(GradeStyleError):
    """Scoring configuration is invalid or references something unknown."""

    default_code = ErrorCodes.MALFORMED_CONFIG


class ViolationReportError(GradeStyleError):
    """A detector report could not be read."""

    default_code = ErrorCodes.MALFORMED_REPORT


class UnknownRuleError(GradeStyleError, KeyError):
    """A rule identifier does not name any violation kind."""

    default_code = ErrorCodes.UNKNOWN_RULE

    def __init__(self, rule: str) -> None:
        self.rule = rule
        super().__init__(f"no violation kind for rule {rule!r}")

    # KeyError.__str__ would repr() the message
    def __str__(self) -> str:
        return GradeStyleError.__str__(self)


@dataclass(frozen=True)
class ResolutionFailure:
    """Why a member access could not be classified as static or not."""
    reason: str
    name: str = ""
    line: int = 0

    def __str__(self) -> str:
        loc = f" (line {self.line})" if self.line else ""
        return f"cannot resolve {self.name!r}{loc}: {self.reason}"
