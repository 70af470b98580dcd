"""
Token data model

The Scanner's output vocabulary. Each token is a classified lexical span
(one of the variant dataclasses below) tagged with the source position of
its first character.

The leaf variants (Text, Url, Image, LinkCard, InlineFootnote, Footnote)
pass through the Parser unchanged and are shared with the element tree.
Block markers (MessageBegin, DetailsBegin, MessageOrDetailsEnd) and
MacroToken exist only at the token stage.
"""

from dataclasses import dataclass
from typing import List, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .document import Macro


@dataclass(frozen=True)
class Text:
    """Untyped text run, copied verbatim to every platform"""
    text: str


@dataclass(frozen=True)
class Url:
    """Bare URL at the start of a line (http:// or https://)"""
    url: str


@dataclass(frozen=True)
class Image:
    """Image reference: ![alt](url)"""
    alt: str
    url: str


@dataclass(frozen=True)
class LinkCard:
    """Embedded link card: @[card_type](url)"""
    card_type: str
    url: str


@dataclass(frozen=True)
class InlineFootnote:
    """Inline footnote: ^[content]"""
    content: str


@dataclass(frozen=True)
class Footnote:
    """Footnote reference: [^identifier] (not a definition)"""
    identifier: str


@dataclass(frozen=True)
class MessageBegin:
    """
    Opening fence of a message block

    Attributes:
        level: Number of colons beyond the base three (":::" is level 0)
        type: Raw message type word (validated by the Parser)
    """
    level: int
    type: str


@dataclass(frozen=True)
class DetailsBegin:
    """Opening fence of a details block: :::details title"""
    level: int
    title: str


@dataclass(frozen=True)
class MessageOrDetailsEnd:
    """Bare closing fence of a message or details block"""
    level: int


@dataclass(frozen=True)
class MacroToken:
    """Platform-specific content, tokenized separately for each platform"""
    macro: "Macro[List[Token]]"


TokenType = Union[
    Text,
    Url,
    Image,
    LinkCard,
    InlineFootnote,
    Footnote,
    MessageBegin,
    DetailsBegin,
    MessageOrDetailsEnd,
    MacroToken,
]

# Variants the Parser copies into the element tree as-is
PASSTHROUGH_TYPES = (Text, Url, Image, LinkCard, InlineFootnote, Footnote)


@dataclass(frozen=True)
class Token:
    """
    A scanned token with its source position

    Attributes:
        token_type: The token variant and its payload
        row: 1-based source row of the first character
        col: 1-based source column of the first character
    """
    token_type: TokenType
    row: int
    col: int
