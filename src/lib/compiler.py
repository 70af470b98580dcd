"""
Compiler base for zeta element trees

Shared machinery of the platform compilers: a registry mapping every
element class to a handler, recursive rendering, and frontmatter
serialization. Platform compilers (qiita.py, zenn.py) register their own
handlers on top of the shared ones.
"""

from typing import Any, Callable, Dict, List

import yaml
from pydantic import BaseModel

from ..models.tokens import Text, Url, Footnote
from ..models.elements import ELEMENT_TYPES, Element, MacroElement
from ..models.document import ParsedDocument, Platform
from ..models.frontmatter import Frontmatter
from .log import LOG


SEPARATOR = "---\n"

# Keep long titles on one line when dumping YAML
YAML_WIDTH = 4096


class PlatformCompiler:
    """
    Renders a ParsedDocument into one platform's markdown

    Responsibilities:
    - Map each element class to a handler (every class must be covered)
    - Render element sequences recursively
    - Render nested block bodies with a fresh compiler instance
    - Serialize the platform frontmatter

    Subclasses set `platform`, implement frontmatter_compile() and
    subCompiler_make(), and extend handlers_register().
    """

    platform: Platform

    def __init__(self) -> None:
        """Build the handler registry and check that it is exhaustive"""
        self.handlers: Dict[type, Callable[[Any], str]] = {}
        self.handlers_register()

        missing = [cls.__name__ for cls in ELEMENT_TYPES if cls not in self.handlers]
        if missing:
            raise TypeError(f"{type(self).__name__} has no handler for: {', '.join(missing)}")

    def handlers_register(self) -> None:
        """Register handlers shared by all platforms"""
        self.handlers[Text] = lambda element: element.text
        self.handlers[Url] = lambda element: f"\n{element.url}\n"
        self.handlers[Footnote] = lambda element: f"[^{element.identifier}]"
        self.handlers[MacroElement] = self.macro_compile

    def compile(self, document: ParsedDocument) -> str:
        """
        Compile a parsed document to platform text

        Returns:
            Metadata block followed by the rendered body
        """
        LOG(f"Compiling for {self.platform.value}...", level=2)
        self.state_reset()
        return self.frontmatter_compile(document.frontmatter) + self.body_compile(document.elements)

    def state_reset(self) -> None:
        """Clear per-compile accumulated state (none by default)"""

    def frontmatter_compile(self, frontmatter: Frontmatter) -> str:
        raise NotImplementedError

    def subCompiler_make(self) -> "PlatformCompiler":
        """Fresh compiler for the body of a nested block"""
        raise NotImplementedError

    def body_compile(self, elements: List[Element]) -> str:
        """Render a complete body (a document, or a block's contents)"""
        return self.ast_compile(elements)

    def ast_compile(self, elements: List[Element]) -> str:
        """Render a sequence of elements in the current scope"""
        return "".join(self.node_compile(element) for element in elements)

    def node_compile(self, element: Element) -> str:
        handler = self.handlers.get(type(element))
        if handler is None:
            raise TypeError(f"Unhandled element type: {type(element).__name__}")
        return handler(element)

    def block_compile(self, body: List[Element]) -> str:
        """
        Render a nested block body with a fresh compiler

        Per-compile state (e.g. Qiita's inline footnote table) starts empty
        inside the block and is not visible to the enclosing scope.
        """
        return self.subCompiler_make().body_compile(body)

    def macro_compile(self, element: MacroElement) -> str:
        """Render this platform's variant of a macro in the current scope"""
        return self.ast_compile(element.macro.for_platform(self.platform))

    def metadata_render(self, metadata: BaseModel) -> str:
        """Serialize a metadata model as a --- delimited YAML block"""
        text = yaml.safe_dump(
            metadata.model_dump(mode="json"),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=YAML_WIDTH,
        )
        return f"{SEPARATOR}{text}{SEPARATOR}"
