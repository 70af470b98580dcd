"""
zeta - Write once, publish to Zenn and Qiita

Compiler library: scanner, parser, and the per-platform compilers.
"""

__version__ = "0.1.0"

from .errors import ScanError, ParseError, ScanFailed, ParseFailed, ScanErrorKind, ParseErrorKind
from .scanner import Scanner, scan
from .parser import Parser, parse
from .qiita import QiitaCompiler, qiitaFrontmatter_read
from .zenn import ZennCompiler
from .resolver import GitRepositoryResolver, ImageResolver, Resolution
from .build import document_build, document_compile
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "ScanError",
    "ParseError",
    "ScanFailed",
    "ParseFailed",
    "ScanErrorKind",
    "ParseErrorKind",
    "Scanner",
    "scan",
    "Parser",
    "parse",
    "QiitaCompiler",
    "qiitaFrontmatter_read",
    "ZennCompiler",
    "GitRepositoryResolver",
    "ImageResolver",
    "Resolution",
    "document_build",
    "document_compile",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
