"""
Scanner-specific data models

Type-safe structures for scanner bookkeeping.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CursorMark:
    """
    A saved scanner position

    Captured before a construct is consumed so the Scanner can flush the
    text preceding it, tag the resulting token with its start position,
    or restore the cursor after a failed lookahead.

    Attributes:
        index: Character offset into the scanner's source
        row: 1-based row at that offset
        col: 1-based column at that offset

    Example:
        For source "ab![x](y)" with the cursor on "!":
        CursorMark(index=2, row=1, col=3)
    """
    index: int
    row: int
    col: int
