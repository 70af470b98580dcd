"""
Build state and stage composition

ProgramState is the record handed from one CLI build stage to the next;
pipeline() threads a state through a sequence of stages.
"""

from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from dataclasses import dataclass, field, fields


PS = TypeVar("PS", bound="ProgramState")

Stage = Callable[["ProgramState"], "ProgramState"]


@dataclass
class ProgramState:
    """
    Everything one article build knows, accumulated stage by stage.

    Stage outputs:
        - env_check: inputSourceFile, qiitaOutputFile, zennOutputFile, envOK
        - source_scan: tokenizedSource
        - source_parse: parsedSource
        - platforms_compile: compiledOutputs
        - outputs_write: writtenFiles

    Attributes:
        inputdir: Directory holding zeta sources
        outputdir: Project root receiving public/ and articles/
        verbosity: LOG() threshold (0 silences progress output)
        article: Source file stem, shared by all output files
        envOK: Paths were resolved
        inputSourceFile: The zeta source of the article
        qiitaOutputFile: Qiita article, also read back for prior metadata
        zennOutputFile: Zenn article
        tokenizedSource: TokenizedDocument from the Scanner
        parsedSource: ParsedDocument from the Parser
        compiledOutputs: Rendered article text keyed by Platform
        writtenFiles: Files written, in platform order
    """

    # From the command line
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    article: str = field(default="")

    # Filled in by the stages
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    qiitaOutputFile: Path = field(default=Path("/"))
    zennOutputFile: Path = field(default=Path("/"))
    tokenizedSource: Optional[Any] = field(default=None)
    parsedSource: Optional[Any] = field(default=None)
    compiledOutputs: Optional[Dict[Any, str]] = field(default=None)
    writtenFiles: Optional[List[Path]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Build the initial state from parsed CLI options.

        Options that do not name a state field (e.g. the version flag) are
        dropped.
        """
        known = {f.name for f in fields(cls)}
        arguments = {name: value for name, value in vars(options).items() if name in known}
        return cls(**{**arguments, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy, so each stage returns a new state"""
        return type(self)(**self.__dict__)


def pipeline(initial_state: ProgramState, *stages: Stage) -> ProgramState:
    """
    Run stages in order, feeding each the state returned by the previous one.

    Example:
        pipeline(state, env_check, source_scan, source_parse)
        # same as source_parse(source_scan(env_check(state)))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
