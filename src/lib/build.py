"""
Build orchestration

Runs a source document through the whole pipeline (scan, parse, compile)
for every platform it targets.
"""

from typing import Dict, Optional

from ..models.document import ParsedDocument, Platform
from ..models.frontmatter import QiitaFrontmatter
from .compiler import PlatformCompiler
from .parser import parse
from .qiita import QiitaCompiler
from .resolver import ImageResolver
from .scanner import scan
from .zenn import ZennCompiler


def compiler_make(
    platform: Platform,
    existing: Optional[QiitaFrontmatter] = None,
    resolver: Optional[ImageResolver] = None,
) -> PlatformCompiler:
    """Compiler for one platform"""
    if platform is Platform.QIITA:
        return QiitaCompiler(existing=existing, resolver=resolver)
    return ZennCompiler()


def document_compile(
    document: ParsedDocument,
    existing: Optional[QiitaFrontmatter] = None,
    resolver: Optional[ImageResolver] = None,
) -> Dict[Platform, str]:
    """
    Compile a parsed document for each platform it targets

    Args:
        document: Parser output
        existing: Metadata of the previously generated Qiita article
        resolver: Image resolver for Qiita

    Returns:
        Rendered text keyed by platform (frontmatter `only` limits the keys)
    """
    return {
        platform: compiler_make(platform, existing, resolver).compile(document)
        for platform in document.frontmatter.platforms()
    }


def document_build(
    source: str,
    existing: Optional[QiitaFrontmatter] = None,
    resolver: Optional[ImageResolver] = None,
) -> Dict[Platform, str]:
    """
    Scan, parse and compile a zeta source document

    Example:
        >>> source = "---\\ntitle: T\\nemoji: E\\ntype: tech\\ntopics: []\\npublished: true\\nonly: zenn\\n---\\nHi ^[x]"
        >>> document_build(source)[Platform.ZENN].endswith("---\\nHi ^[x]")
        True

    Raises:
        ScanFailed: If the source cannot be tokenized
        ParseFailed: If the tokens do not form a valid document
    """
    return document_compile(parse(scan(source)), existing, resolver)
