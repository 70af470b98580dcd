"""
Loguru output for zeta.

Progress messages go through LOG(), which compares its level against the
verbosity of the ProgramState bound to the current context. Library code
can therefore log freely: with no bound state (tests, document_build()
called as a library) LOG() prints nothing.

Soft failures, where the build continues with a degraded value, go
through WARN() and are always shown.

Usage:
    state_connectToLogger(state)
    LOG("Scanning source...", level=1)
    LOG("Token at 3:7: Footnote(identifier='1')", level=3)
    WARN("Could not resolve image path /images/a.png; keeping it unchanged")
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar("program_state", default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module: <8}</cyan>:<cyan>{function: <20}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """Bind a ProgramState (anything with .verbosity) to the current context"""
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit message when the bound state's verbosity is at least level.

    Levels: 1 progress, 2 paths and counts, 3 per-token tracing.
    """
    state = _program_state.get()
    if state is not None and getattr(state, "verbosity", 0) >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """Report a soft failure regardless of verbosity"""
    logger.opt(depth=1).warning(message, **kwargs)
