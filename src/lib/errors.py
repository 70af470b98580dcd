"""
Error taxonomy for the scan and parse stages

Scanner and Parser batch their diagnostics: individual ScanError/ParseError
instances are collected while the stage keeps going, and the stage raises a
single ScanFailed/ParseFailed carrying the whole list at the end.
"""

from enum import Enum
from typing import Any, List, Optional


class ScanErrorKind(Enum):
    """Scanner diagnostics"""
    INCOMPLETE = "incomplete"
    INVALID_MACRO = "invalid_macro"
    NESTING_TOO_DEEP = "nesting_too_deep"


class ParseErrorKind(Enum):
    """Parser diagnostics"""
    INVALID_FRONTMATTER = "invalid_frontmatter"
    TOO_MANY_TOPICS = "too_many_topics"
    INVALID_MESSAGE_TYPE = "invalid_message_type"
    INVALID_NESTING_LEVEL = "invalid_nesting_level"
    COULD_NOT_FIND_END_TOKEN = "could_not_find_end_token"
    UNEXPECTED_TOKEN = "unexpected_token"
    INVALID_MACRO = "invalid_macro"
    NESTING_TOO_DEEP = "nesting_too_deep"


class ZetaError(Exception):
    """
    A diagnostic tied to a source position

    Attributes:
        kind: Diagnostic category (ScanErrorKind or ParseErrorKind)
        row: 1-based source row
        col: 1-based source column
        detail: Kind-specific payload (delimiter, topic list, type word...)
    """

    def __init__(self, kind: Enum, row: int, col: int, detail: Any = None) -> None:
        self.kind = kind
        self.row = row
        self.col = col
        self.detail = detail
        super().__init__(self.message_format())

    def description(self) -> str:
        return self.kind.value.replace("_", " ").capitalize() + "."

    def message_format(self) -> str:
        return f"{self.description()}\n --> row: {self.row}, column: {self.col}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZetaError):
            return NotImplemented
        return (type(self), self.kind, self.row, self.col, self.detail) == (
            type(other),
            other.kind,
            other.row,
            other.col,
            other.detail,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.row, self.col))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, row={self.row}, col={self.col}, detail={self.detail!r})"


class ScanError(ZetaError):
    """
    Scanner diagnostic

    INCOMPLETE carries the missing delimiter as detail.
    """

    kind: ScanErrorKind

    @property
    def delimiter(self) -> Optional[str]:
        return self.detail if self.kind is ScanErrorKind.INCOMPLETE else None

    def description(self) -> str:
        if self.kind is ScanErrorKind.INCOMPLETE:
            return f"Incomplete {self.detail!r}."
        if self.kind is ScanErrorKind.INVALID_MACRO:
            return "Invalid macro."
        return f"Macro nesting deeper than {self.detail}."


class ParseError(ZetaError):
    """
    Parser diagnostic

    Detail by kind:
        INVALID_FRONTMATTER: deserializer message
        TOO_MANY_TOPICS: the offending topic list
        INVALID_MESSAGE_TYPE: the rejected type word
        INVALID_NESTING_LEVEL: (level, enclosing level)
        UNEXPECTED_TOKEN: level of the stray closing fence
        NESTING_TOO_DEEP: the configured maximum
    """

    kind: ParseErrorKind

    def description(self) -> str:
        if self.kind is ParseErrorKind.INVALID_FRONTMATTER:
            return f"Invalid frontmatter: {self.detail}"
        if self.kind is ParseErrorKind.TOO_MANY_TOPICS:
            return f"Too many topics ({len(self.detail)}): {', '.join(self.detail)}"
        if self.kind is ParseErrorKind.INVALID_MESSAGE_TYPE:
            return f"Invalid message type {self.detail!r} (expected info, warn or alert)."
        if self.kind is ParseErrorKind.INVALID_NESTING_LEVEL:
            level, enclosing = self.detail
            return f"Block level {level} must be lower than its enclosing block level {enclosing}."
        if self.kind is ParseErrorKind.COULD_NOT_FIND_END_TOKEN:
            return "Could not find the closing ':::' of this block."
        if self.kind is ParseErrorKind.UNEXPECTED_TOKEN:
            return "Unexpected closing ':::' with no open block."
        if self.kind is ParseErrorKind.INVALID_MACRO:
            return "Invalid macro."
        return f"Nesting deeper than {self.detail}."


class ScanFailed(Exception):
    """Raised by the Scanner when any diagnostic was collected"""

    def __init__(self, errors: List[ScanError]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} scan error(s)")


class ParseFailed(Exception):
    """Raised by the Parser when any diagnostic was collected"""

    def __init__(self, errors: List[ParseError]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} parse error(s)")
