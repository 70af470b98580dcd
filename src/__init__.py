"""
zeta - Write once, publish to Zenn and Qiita

A compiler from one zeta markdown article to Zenn and Qiita markdown.
"""

__version__ = "0.1.0"

from .lib import document_build, scan, parse, QiitaCompiler, ZennCompiler, LOG, state_connectToLogger

__all__ = [
    "document_build",
    "scan",
    "parse",
    "QiitaCompiler",
    "ZennCompiler",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
