"""
Document containers shared across pipeline stages

MarkdownDoc[F, E] carries a frontmatter value and an element sequence:
    - TokenizedDocument: raw frontmatter text + Token stream (Scanner output)
    - ParsedDocument: Frontmatter model + Element tree (Parser output)

Macro[T] is the per-platform pair carried by macro constructs; the same
logical value is reshaped from raw strings to token streams to element
streams as it moves through the pipeline.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token
    from .elements import Element
    from .frontmatter import Frontmatter


F = TypeVar("F")
E = TypeVar("E")
T = TypeVar("T")


class Platform(str, Enum):
    """Target publishing platforms"""
    ZENN = "zenn"
    QIITA = "qiita"


@dataclass
class MarkdownDoc(Generic[F, E]):
    """
    A document at one pipeline stage

    Attributes:
        frontmatter: Metadata in the stage's representation
        elements: Ordered body items in the stage's representation
    """
    frontmatter: F
    elements: List[E] = field(default_factory=list)


@dataclass(frozen=True)
class Macro(Generic[T]):
    """
    Parallel content variants, one per platform

    Attributes:
        zenn: Content compiled for Zenn
        qiita: Content compiled for Qiita
    """
    zenn: T
    qiita: T

    def for_platform(self, platform: Platform) -> T:
        """Return the variant for the given platform"""
        if platform is Platform.ZENN:
            return self.zenn
        return self.qiita


TokenizedDocument = MarkdownDoc[str, "Token"]
ParsedDocument = MarkdownDoc["Frontmatter", "Element"]
