#!/usr/bin/env python3
"""
zeta - Write once, publish to Zenn and Qiita

Compiles a zeta markdown article into the dialects of two Japanese
technical publishing platforms. Zeta is Zenn markdown plus a few
extensions (<macro> blocks with per-platform content); the Qiita
rendering rewrites the Zenn-only constructs.

The command line is a ChRIS plugin (chris_plugin), which supplies the
inputdir/outputdir positionals and invokes main() with parsed options.

Pipeline:
    source.md → Scanner → Parser → QiitaCompiler → public/NAME.md
                                 → ZennCompiler  → articles/NAME.md

Usage:
    zeta inputdir/ outputdir/ --article NAME

    Reads inputdir/NAME.md and writes outputdir/public/NAME.md (Qiita CLI)
    and outputdir/articles/NAME.md (Zenn CLI). Metadata Qiita assigned to
    an already published article is read back from outputdir/public/NAME.md.

Examples:
    # Build one article in the current project
    zeta zeta/ . --article my-first-article

    # Verbose output
    zeta zeta/ . --article my-first-article -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    __version__,
    LOG,
    state_connectToLogger,
    scan,
    parse,
    document_compile,
    qiitaFrontmatter_read,
    GitRepositoryResolver,
    ScanFailed,
    ParseFailed,
)
from .models import ProgramState, Platform, pipeline


DISPLAY_TITLE = r"""
           _
   _______| |_ __ _
  |_  / _ \ __/ _` |
   / /  __/ || (_| |
  /___\___|\__\__,_|

  Write once, publish to Zenn and Qiita
"""

# Define CLI arguments
parser = ArgumentParser(
    description="zeta - compile one markdown article for Zenn and Qiita",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--article", required=True, type=str, help="Article name (inputdir/NAME.md)"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the zeta source
            - qiitaOutputFile: Path of the Qiita article
            - zennOutputFile: Path of the Zenn article
            - envOK: True if environment is valid

    Exits:
        1 if the source file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / f"{state.article}.md"

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.qiitaOutputFile = state.outputdir / appsettings.qiita_dir / f"{state.article}.md"
    state.zennOutputFile = state.outputdir / appsettings.zenn_dir / f"{state.article}.md"
    LOG(f"Qiita output: {state.qiitaOutputFile}", level=2)
    LOG(f"Zenn output: {state.zennOutputFile}", level=2)

    state.envOK = True
    return state


def errors_print(errors) -> None:
    """Print every diagnostic of a failed stage to stderr"""
    for error in errors:
        print(f"Error: {error}", file=sys.stderr)


def source_scan(inputstate: ProgramState) -> ProgramState:
    """
    Read and tokenize the zeta source file.

    Returns:
        ProgramState with added field:
            - tokenizedSource: TokenizedDocument

    Exits:
        1 if the file cannot be read or any scan error is found
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Scanning source...", level=1)
    try:
        state.tokenizedSource = scan(source)
    except ScanFailed as failure:
        errors_print(failure.errors)
        sys.exit(1)
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Parse the token stream into an element tree.

    Returns:
        ProgramState with added field:
            - parsedSource: ParsedDocument

    Exits:
        1 if any parse error is found
    """

    state = inputstate.copy()

    LOG("Parsing tokens...", level=1)
    try:
        state.parsedSource = parse(state.tokenizedSource)
    except ParseFailed as failure:
        errors_print(failure.errors)
        sys.exit(1)
    return state


def platforms_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the parsed document for its target platforms.

    Previously published Qiita metadata is merged into the new Qiita
    frontmatter so Qiita keeps recognising the article.

    Returns:
        ProgramState with added field:
            - compiledOutputs: Dict[Platform, str]
    """

    state = inputstate.copy()

    existing = None
    if state.qiitaOutputFile.exists():
        LOG(f"Reading Qiita metadata from {state.qiitaOutputFile}", level=2)
        existing = qiitaFrontmatter_read(state.qiitaOutputFile.read_text(encoding="utf-8"))

    resolver = GitRepositoryResolver.from_settings(appsettings, cwd=state.outputdir)

    LOG("Compiling...", level=1)
    state.compiledOutputs = document_compile(state.parsedSource, existing=existing, resolver=resolver)
    return state


def outputs_write(inputstate: ProgramState) -> ProgramState:
    """
    Write each platform rendering to its output directory.

    Returns:
        ProgramState with added field:
            - writtenFiles: List[Path]
    """

    state = inputstate.copy()

    targets = {
        Platform.QIITA: state.qiitaOutputFile,
        Platform.ZENN: state.zennOutputFile,
    }

    state.writtenFiles = []
    for platform, text in state.compiledOutputs.items():
        target: Path = targets[platform]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        state.writtenFiles.append(target)
        LOG(f"Wrote {platform.value} article: {target}", level=2)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display build results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if nothing was written
    """
    state: ProgramState = inputstate.copy()
    if not state.writtenFiles:
        print("Error: Build produced no output", file=sys.stderr)
        sys.exit(1)

    LOG(f"\n✓ Built {state.article}", level=1)
    for path in state.writtenFiles:
        LOG(f"  Output: {path}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="zeta - Zenn and Qiita article compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - build one zeta article for Zenn and Qiita.

    Orchestrates the build pipeline:
        1. env_check: Resolve source and output paths
        2. source_scan: Read and tokenize the source
        3. source_parse: Build the element tree
        4. platforms_compile: Render each target platform
        5. outputs_write: Write the renderings
        6. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - article: str - Article name
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing zeta sources
        outputdir: Project directory receiving public/ and articles/

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(
        state,
        env_check,
        source_scan,
        source_parse,
        platforms_compile,
        outputs_write,
        results_report,
    )


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
