"""
Element data model

The Parser's output: a tree of elements. Leaf variants are the token
classes themselves; blocks hold a nested body instead of begin/end
markers, and macros hold per-platform element streams.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Union, TYPE_CHECKING

from .tokens import Text, Url, Image, LinkCard, InlineFootnote, Footnote

if TYPE_CHECKING:
    from .document import Macro


class MessageType(Enum):
    """Closed set of message block kinds"""
    INFO = "info"
    WARN = "warn"
    ALERT = "alert"


@dataclass(frozen=True)
class Message:
    """:::message block with its parsed body"""
    level: int
    msg_type: MessageType
    body: List["Element"] = field(default_factory=list)


@dataclass(frozen=True)
class Details:
    """:::details block (collapsible section) with its parsed body"""
    level: int
    title: str
    body: List["Element"] = field(default_factory=list)


@dataclass(frozen=True)
class MacroElement:
    """Platform-specific content, parsed separately for each platform"""
    macro: "Macro[List[Element]]"


Element = Union[
    Text,
    Url,
    Image,
    LinkCard,
    InlineFootnote,
    Footnote,
    Message,
    Details,
    MacroElement,
]

# Every element class a Compiler must handle
ELEMENT_TYPES = (
    Text,
    Url,
    Image,
    LinkCard,
    InlineFootnote,
    Footnote,
    Message,
    Details,
    MacroElement,
)
