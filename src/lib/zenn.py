"""
Zenn compiler

Zeta source is a superset of Zenn markdown, so most elements are written
back in their source form. Message and details fences are regenerated
from the block level.
"""

from ..models.tokens import Image, LinkCard, InlineFootnote
from ..models.elements import Message, Details, MessageType
from ..models.document import Platform
from ..models.frontmatter import Frontmatter, ZennFrontmatter
from .compiler import PlatformCompiler


def fence_make(level: int) -> str:
    """Fence for a block of the given level (level 0 is ':::')"""
    return ":::" + ":" * level


class ZennCompiler(PlatformCompiler):
    """Compiler for the Zenn platform"""

    platform = Platform.ZENN

    def handlers_register(self) -> None:
        super().handlers_register()
        self.handlers[Image] = lambda element: f"![{element.alt}]({element.url})"
        self.handlers[LinkCard] = lambda element: f"@[{element.card_type}]({element.url})"
        self.handlers[InlineFootnote] = lambda element: f"^[{element.content}]"
        self.handlers[Message] = self.message_compile
        self.handlers[Details] = self.details_compile

    def subCompiler_make(self) -> "ZennCompiler":
        return ZennCompiler()

    def frontmatter_compile(self, frontmatter: Frontmatter) -> str:
        metadata = ZennFrontmatter(
            title=frontmatter.title,
            emoji=frontmatter.emoji,
            type=frontmatter.type,
            topics=list(frontmatter.topics),
            published=frontmatter.published,
        )
        return self.metadata_render(metadata)

    def message_compile(self, element: Message) -> str:
        # Zenn only distinguishes alert; info and warn share the plain style
        label = "message alert" if element.msg_type is MessageType.ALERT else "message"
        fence = fence_make(element.level)
        return f"{fence}{label}\n{self.block_compile(element.body)}{fence}"

    def details_compile(self, element: Details) -> str:
        fence = fence_make(element.level)
        return f"{fence}details {element.title}\n{self.block_compile(element.body)}{fence}"
