"""
Models package for zeta

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .tokens import (
    Token,
    TokenType,
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
)
from .elements import Element, ELEMENT_TYPES, Message, Details, MacroElement, MessageType
from .document import MarkdownDoc, Macro, Platform, TokenizedDocument, ParsedDocument
from .frontmatter import Frontmatter, QiitaFrontmatter, ZennFrontmatter, MacroSource, MAX_TOPICS
from .scanner import CursorMark

__all__ = [
    "ProgramState",
    "pipeline",
    "Token",
    "TokenType",
    "Text",
    "Url",
    "Image",
    "LinkCard",
    "InlineFootnote",
    "Footnote",
    "MessageBegin",
    "DetailsBegin",
    "MessageOrDetailsEnd",
    "MacroToken",
    "Element",
    "ELEMENT_TYPES",
    "Message",
    "Details",
    "MacroElement",
    "MessageType",
    "MarkdownDoc",
    "Macro",
    "Platform",
    "TokenizedDocument",
    "ParsedDocument",
    "Frontmatter",
    "QiitaFrontmatter",
    "ZennFrontmatter",
    "MacroSource",
    "MAX_TOPICS",
    "CursorMark",
]
