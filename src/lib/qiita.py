"""
Qiita compiler

Renders a ParsedDocument as a Qiita CLI article:
- :::message blocks become :::note blocks
- :::details blocks become <details> HTML
- Inline footnotes become numbered references with definitions appended
  to the end of the enclosing body
- Local image paths are rewritten through an ImageResolver
- Metadata assigned by Qiita (id, updated_at, ...) is carried over from the
  previously generated article
"""

from typing import Dict, Iterable, List, Optional, Set

import yaml
from pydantic import ValidationError

from ..config import appsettings
from ..models.tokens import Image, LinkCard, InlineFootnote, Footnote
from ..models.elements import Element, Message, Details, MacroElement
from ..models.document import Platform
from ..models.frontmatter import Frontmatter, QiitaFrontmatter
from .compiler import PlatformCompiler, SEPARATOR
from .resolver import ImageResolver
from .log import LOG, WARN


def qiitaFrontmatter_read(text: str) -> Optional[QiitaFrontmatter]:
    """
    Read the metadata block of a previously generated Qiita article

    Args:
        text: Full contents of the article file

    Returns:
        Its metadata, or None if the file has no readable metadata block
    """
    if not text.startswith(SEPARATOR):
        return None

    end = text.find("\n" + SEPARATOR, len(SEPARATOR) - 1)
    if end == -1:
        return None

    try:
        data = yaml.safe_load(text[len(SEPARATOR):end + 1])
        return QiitaFrontmatter.model_validate(data or {})
    except (yaml.YAMLError, ValidationError) as error:
        WARN(f"Ignoring unreadable Qiita metadata: {error}")
        return None


def footnotes_collect(elements: Iterable[Element]) -> Set[str]:
    """
    Identifiers of manual footnote references in one rendering scope

    Macros render into the enclosing scope and are searched; message and
    details bodies are separate scopes and are not.
    """
    identifiers: Set[str] = set()
    for element in elements:
        if isinstance(element, Footnote):
            identifiers.add(element.identifier)
        elif isinstance(element, MacroElement):
            identifiers |= footnotes_collect(element.macro.qiita)
    return identifiers


class QiitaCompiler(PlatformCompiler):
    """
    Compiler for the Qiita platform

    Example:
        >>> compiler = QiitaCompiler()
        >>> compiler.ast_compile([Message(0, MessageType.ALERT, [Text("Hello\\n")])])
        ':::note alert\\nHello\\n:::'
    """

    platform = Platform.QIITA

    def __init__(
        self,
        existing: Optional[QiitaFrontmatter] = None,
        resolver: Optional[ImageResolver] = None,
        image_prefix: Optional[str] = None,
    ) -> None:
        """
        Args:
            existing: Metadata of the previously generated article, if any
            resolver: Rewrites local image paths; None leaves them unchanged
            image_prefix: Path prefix marking local images (defaults to settings)
        """
        self.existing = existing
        self.resolver = resolver
        self.image_prefix = appsettings.image_prefix if image_prefix is None else image_prefix
        self.manual_footnotes: Set[str] = set()
        self.inline_footnotes: Dict[str, str] = {}
        super().__init__()

    def handlers_register(self) -> None:
        super().handlers_register()
        self.handlers[Image] = self.image_compile
        self.handlers[LinkCard] = lambda element: f"\n{element.url}\n"
        self.handlers[InlineFootnote] = self.inlineFootnote_compile
        self.handlers[Message] = self.message_compile
        self.handlers[Details] = self.details_compile

    def state_reset(self) -> None:
        self.manual_footnotes = set()
        self.inline_footnotes = {}

    def subCompiler_make(self) -> "QiitaCompiler":
        return QiitaCompiler(resolver=self.resolver, image_prefix=self.image_prefix)

    def frontmatter_compile(self, frontmatter: Frontmatter) -> str:
        """
        Merge source metadata with the previous Qiita metadata

        title, tags and ignorePublish come from the source; the remaining
        fields are owned by Qiita and kept from the previous article.
        """
        existing = self.existing or QiitaFrontmatter()
        metadata = QiitaFrontmatter(
            title=frontmatter.title,
            tags=list(frontmatter.topics),
            private=existing.private,
            updated_at=existing.updated_at,
            id=existing.id,
            organization_url_name=existing.organization_url_name,
            slide=existing.slide,
            ignorePublish=not frontmatter.published,
        )
        return self.updatedAt_quote(self.metadata_render(metadata))

    @staticmethod
    def updatedAt_quote(rendered: str) -> str:
        """Qiita CLI expects updated_at as a quoted string"""
        lines = rendered.split("\n")
        for index, line in enumerate(lines):
            if line.startswith("updated_at:"):
                value = line[len("updated_at:"):].strip()
                if not value.endswith(("'", '"')):
                    lines[index] = f"updated_at: '{value}'"
                break
        return "\n".join(lines)

    def body_compile(self, elements: List[Element]) -> str:
        """Render a body followed by the definitions of its inline footnotes"""
        self.manual_footnotes |= footnotes_collect(elements)
        body = self.ast_compile(elements)
        for name, content in self.inline_footnotes.items():
            body += f"\n[^{name}]: {content}\n"
        return body

    def inlineFootnote_compile(self, element: InlineFootnote) -> str:
        """Replace ^[content] with a reference to a fresh numbered footnote"""
        index = len(self.inline_footnotes) + 1
        name = appsettings.inlineFootnote_name(index)
        while name in self.inline_footnotes or name in self.manual_footnotes:
            index += 1
            name = appsettings.inlineFootnote_name(index)

        self.inline_footnotes[name] = element.content
        LOG(f"Inline footnote {name}", level=3)
        return f"[^{name}]"

    def image_compile(self, element: Image) -> str:
        url = element.url
        if self.image_prefix and url.startswith(self.image_prefix):
            url = self.imagePath_resolve(url)
        return f"![{element.alt}]({url})"

    def imagePath_resolve(self, path: str) -> str:
        if self.resolver is None:
            WARN(f"No image resolver; keeping local image path {path}")
            return path

        resolution = self.resolver.resolve(path)
        if not resolution.resolved:
            WARN(f"Could not resolve image path {path}; keeping it unchanged")
        return resolution.url

    def message_compile(self, element: Message) -> str:
        return f":::note {element.msg_type.value}\n{self.block_compile(element.body)}:::"

    def details_compile(self, element: Details) -> str:
        return (
            f"<details><summary>{element.title}</summary>\n\n"
            f"{self.block_compile(element.body)}</details>\n"
        )
