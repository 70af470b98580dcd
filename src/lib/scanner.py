"""
Scanner for zeta markdown

Transforms raw source text into a flat, position-tagged token stream.

The scanner makes a single forward pass over the source, accumulating
untyped text in a buffer and flushing it as a Text token whenever a
recognised construct begins:

- ![alt](url)            → Image
- @[type](url)           → LinkCard
- ^[content]             → InlineFootnote
- [^id] (not [^id]:)     → Footnote
- <macro>yaml</macro>    → MacroToken (each platform re-scanned recursively)
- line-start http(s)://  → Url
- line-start :::message  → MessageBegin / :::details → DetailsBegin / ::: → MessageOrDetailsEnd

Code spans and fences are skipped verbatim so nothing inside them is
tokenized. Errors are collected rather than raised immediately: after an
unterminated span the scanner skips one character and keeps going, so a
single pass reports every problem.

Example:
    >>> document = Scanner("---\\ntitle: x\\n---\\nHi ^[note]").scan()
    >>> document.frontmatter
    'title: x\\n'
    >>> [token.token_type for token in document.elements]
    [Text(text='Hi '), InlineFootnote(content='note')]
"""

from typing import Callable, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..models.tokens import (
    Token,
    TokenType,
    Text,
    Url,
    Image,
    LinkCard,
    InlineFootnote,
    Footnote,
    MessageBegin,
    DetailsBegin,
    MessageOrDetailsEnd,
    MacroToken,
)
from ..models.document import Macro, MarkdownDoc, TokenizedDocument
from ..models.frontmatter import MacroSource
from ..models.scanner import CursorMark
from .errors import ScanError, ScanErrorKind, ScanFailed
from .log import LOG


SEPARATOR = "---\n"
# Closing separator on the last line of a file with no trailing line break
FINAL_SEPARATOR = "\n---"
MESSAGE_TAG = "message"
DETAILS_TAG = "details"
FENCE = ":::"
MACRO_OPEN = "<macro>"
MACRO_CLOSE = "</macro>"
URL_SCHEMES = ("https://", "http://")


class Scanner:
    """
    Tokenizer for zeta markdown

    Handles:
    - Frontmatter extraction (--- delimited block at the start)
    - Inline constructs (images, link cards, footnotes)
    - Line-start constructs (URLs, message/details fences)
    - Opaque code spans and fences
    - Recursive scanning of <macro> platform variants
    """

    def __init__(
        self,
        source: str,
        row: int = 1,
        col: int = 1,
        depth: int = 0,
        max_depth: Optional[int] = None,
    ) -> None:
        """
        Initialize scanner with source text

        Args:
            source: Text to tokenize
            row: Row of the first character (macro sub-scans inherit the
                 position of their enclosing macro)
            col: Column of the first character
            depth: Macro nesting depth of this scanner
            max_depth: Deepest macro nesting accepted (defaults to settings)

        Attributes:
            current: Cursor offset into source
            start: Mark where the pending text buffer begins
            row, col: Position of the character under the cursor
            last_row, last_col: Position of the last consumed character
            tokens: Tokens produced so far
            errors: Diagnostics collected so far
        """
        if max_depth is None:
            from ..config import appsettings
            max_depth = appsettings.max_depth

        self.source = source
        self.current = 0
        self.row = row
        self.col = col
        self.last_row = row
        self.last_col = col
        self.start = self.mark()
        self.depth = depth
        self.max_depth = max_depth
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []

    def scan(self) -> TokenizedDocument:
        """
        Scan a complete document: frontmatter block, then body

        Returns:
            TokenizedDocument with raw frontmatter text and the body tokens

        Raises:
            ScanFailed: If any diagnostic was collected (carries all of them)
        """
        frontmatter = self.frontmatter_scan()
        tokens = self.body_scan()
        LOG(f"Scanned {len(tokens)} top-level tokens", level=2)
        return MarkdownDoc(frontmatter=frontmatter, elements=tokens)

    def body_scan(self) -> List[Token]:
        """
        Scan from the cursor to the end of the source as a document body

        The first character counts as the start of a line, so a body (or a
        macro variant) may open with a block fence or a URL.

        Returns:
            List of tokens

        Raises:
            ScanFailed: If any diagnostic was collected
        """
        self.buffer_delete()
        self.step_run(self.lineStart_scan)

        while not self.end_is():
            self.step_run(self.char_scan)

        self.text_collect(self.mark())

        if self.errors:
            raise ScanFailed(self.errors)

        return self.tokens

    def step_run(self, step: Callable[[], None]) -> None:
        """Run one scanning step, recording its diagnostic instead of aborting"""
        try:
            step()
        except ScanError as error:
            LOG(f"Scan error at {error.row}:{error.col}: {error.description()}", level=3)
            self.errors.append(error)

    def frontmatter_scan(self) -> str:
        """
        Extract the raw frontmatter text between the leading separators

        Returns:
            Text between "---\\n" lines (the closing one may be a bare "---"
            ending the file), or "" when the document has no
            frontmatter or its closing separator is missing (the latter is
            recorded as Incomplete("---\\n"))
        """
        origin = self.mark()
        self.spaces_consume()

        if not self.string_expect(SEPARATOR):
            self.restore(origin)
            return ""

        if self.source.find(SEPARATOR, self.current) == -1 and self.source.endswith(FINAL_SEPARATOR):
            header = self.source[self.current:len(self.source) - len(FINAL_SEPARATOR) + 1]
            while not self.end_is():
                self.advance()
            return header

        try:
            header = self.span_extract(SEPARATOR)
        except ScanError as error:
            self.errors.append(error)
            return ""

        self.string_expect(SEPARATOR)
        return header

    def char_scan(self) -> None:
        """Dispatch on the character under the cursor"""
        char = self.peek()

        if char == "!" and self.keyword_matches("!["):
            self.image_scan()
        elif char == "@" and self.keyword_matches("@["):
            self.linkCard_scan()
        elif char == "^" and self.keyword_matches("^["):
            self.inlineFootnote_scan()
        elif char == "[" and self.keyword_matches("[^"):
            self.footnote_scan()
        elif char == "`":
            self.code_skip()
        elif char == "<" and self.keyword_matches(MACRO_OPEN):
            self.macro_scan()
        elif char == "\n":
            self.advance()
            self.lineStart_scan()
        else:
            self.advance()

    def image_scan(self) -> None:
        """Scan ![alt](url)"""
        begin = self.mark()
        link = self.labelledLink_extract("![")
        if link is None:
            return

        alt, url = link
        self.token_push(Image(alt=alt, url=url), begin)

    def linkCard_scan(self) -> None:
        """Scan @[card_type](url)"""
        begin = self.mark()
        link = self.labelledLink_extract("@[")
        if link is None:
            return

        card_type, url = link
        self.token_push(LinkCard(card_type=card_type, url=url), begin)

    def labelledLink_extract(self, opener: str) -> Optional[Tuple[str, str]]:
        """
        Consume opener + label + "](" + target + ")"

        Returns:
            (label, target), or None when "](" does not follow the label;
            the span is then left in the text buffer as ordinary text
        """
        self.string_expect(opener)
        label = self.span_extract("]")

        if not self.string_expect("]("):
            return None

        target = self.span_extract(")")
        self.string_expect(")")
        return label, target

    def inlineFootnote_scan(self) -> None:
        """Scan ^[content], allowing balanced brackets inside the content"""
        begin = self.mark()
        self.string_expect("^[")
        content = self.bracket_findMatching()
        self.string_expect("]")
        self.token_push(InlineFootnote(content=content), begin)

    def footnote_scan(self) -> None:
        """
        Scan a footnote reference [^id]

        A footnote definition ([^id]: ...) is left in the text buffer.
        """
        begin = self.mark()
        self.string_expect("[^")
        identifier = self.span_extract("]")
        self.string_expect("]")

        if self.keyword_matches(":"):
            return

        self.token_push(Footnote(identifier=identifier), begin)

    def code_skip(self) -> None:
        """
        Skip a code span or fence verbatim

        A run of N backticks is closed by the next run of N backticks
        (`code`, ``co`de``, ```fence```). The code stays in the text buffer.
        """
        run = 0
        while self.peek() == "`":
            self.advance()
            run += 1

        delimiter = "`" * run
        self.span_extract(delimiter)
        self.string_expect(delimiter)

    def macro_scan(self) -> None:
        """
        Scan <macro>...</macro> and tokenize each platform variant

        The body is a YAML mapping {zenn: str?, qiita: str?}. Each variant is
        scanned by a new Scanner one macro level deeper that starts at the
        position just after <macro>. Diagnostics of the variants are merged
        into this scanner's list and the macro itself is reported as
        InvalidMacro.
        """
        begin = self.mark()
        self.string_expect(MACRO_OPEN)
        body_mark = self.mark()
        body = self.span_extract(MACRO_CLOSE)
        self.string_expect(MACRO_CLOSE)

        if self.depth >= self.max_depth:
            raise ScanError(ScanErrorKind.NESTING_TOO_DEEP, begin.row, begin.col, self.max_depth)

        source = self.macroSource_load(body, begin)

        variants: List[List[Token]] = []
        failed = False
        for text in (source.zenn, source.qiita):
            scanner = Scanner(
                text or "",
                row=body_mark.row,
                col=body_mark.col,
                depth=self.depth + 1,
                max_depth=self.max_depth,
            )
            try:
                variants.append(scanner.body_scan())
            except ScanFailed as failure:
                self.errors.extend(failure.errors)
                failed = True

        if failed:
            raise ScanError(ScanErrorKind.INVALID_MACRO, begin.row, begin.col)

        zenn, qiita = variants
        self.token_push(MacroToken(macro=Macro(zenn=zenn, qiita=qiita)), begin)

    def macroSource_load(self, body: str, begin: CursorMark) -> MacroSource:
        """
        Deserialize a macro body

        Raises:
            ScanError: InvalidMacro at the macro position if the body is not
                       a mapping of optional strings
        """
        try:
            data = yaml.safe_load(body)
            return MacroSource.model_validate(data if data is not None else {})
        except (yaml.YAMLError, ValidationError) as error:
            LOG(f"Macro at {begin.row}:{begin.col} rejected: {error}", level=2)
            raise ScanError(ScanErrorKind.INVALID_MACRO, begin.row, begin.col) from error

    def lineStart_scan(self) -> None:
        """
        Recognise constructs that only exist at the start of a line

        Leading spaces are skipped. A block opening fence consumes its line
        break, so the following line is examined as well.
        """
        while True:
            self.spaces_consume()

            if any(self.keyword_matches(scheme) for scheme in URL_SCHEMES):
                self.url_scan()
                return

            if not self.keyword_matches(FENCE):
                return

            if not self.fence_scan():
                return

    def url_scan(self) -> None:
        """Scan a bare URL up to the next whitespace"""
        begin = self.mark()
        while not self.end_is() and not self.peek().isspace():
            self.advance()

        self.token_push(Url(url=self.source[begin.index:self.current]), begin)

    def fence_scan(self) -> bool:
        """
        Scan a ::: fence line

        Colons beyond the first three give the block level. The keyword
        "message" (followed by the type word) or "details" (followed by the
        title) opens a block; anything else is a closing fence and the rest
        of its line stays text.

        Returns:
            True if an opening fence consumed its line break
        """
        begin = self.mark()
        self.string_expect(FENCE)

        level = 0
        while self.peek() == ":":
            self.advance()
            level += 1

        if self.string_expect(MESSAGE_TAG):
            self.spaces_consume()
            token_type: TokenType = MessageBegin(level=level, type=self.line_extract().rstrip())
        elif self.string_expect(DETAILS_TAG):
            self.spaces_consume()
            token_type = DetailsBegin(level=level, title=self.line_extract().rstrip())
        else:
            self.token_push(MessageOrDetailsEnd(level=level), begin)
            return False

        line_break = self.string_expect("\n")
        self.token_push(token_type, begin)
        return line_break

    def line_extract(self) -> str:
        """Consume up to (not including) the next line break or end of input"""
        begin = self.current
        while not self.end_is() and self.peek() != "\n":
            self.advance()
        return self.source[begin:self.current]

    def span_extract(self, delimiter: str) -> str:
        """
        Consume up to (not including) the next occurrence of delimiter

        Args:
            delimiter: Closing delimiter to look for

        Returns:
            Text between the cursor and the delimiter

        Raises:
            ScanError: Incomplete(delimiter), positioned at the last character
                       of the opening marker, if the delimiter never occurs.
                       The cursor is left one character past the opener so
                       scanning can resume.
        """
        opener_row, opener_col = self.last_row, self.last_col
        begin = self.current
        found = self.source.find(delimiter, begin)

        if found == -1:
            if not self.end_is():
                self.advance()
            raise ScanError(ScanErrorKind.INCOMPLETE, opener_row, opener_col, delimiter)

        while self.current < found:
            self.advance()

        return self.source[begin:found]

    def bracket_findMatching(self) -> str:
        """
        Consume up to the "]" matching an already consumed "["

        Depth tracking: [1 see [2 a ]1 b ]0

        Raises:
            ScanError: Incomplete("]") if EOF is reached first
        """
        opener_row, opener_col = self.last_row, self.last_col
        begin = self.current
        depth = 1
        pos = begin

        while pos < len(self.source):
            if self.source[pos] == "[":
                depth += 1
            elif self.source[pos] == "]":
                depth -= 1
                if depth == 0:
                    break
            pos += 1

        if depth != 0:
            if not self.end_is():
                self.advance()
            raise ScanError(ScanErrorKind.INCOMPLETE, opener_row, opener_col, "]")

        while self.current < pos:
            self.advance()

        return self.source[begin:pos]

    def token_push(self, token_type: TokenType, begin: CursorMark) -> None:
        """Flush the text before begin, then emit token_type at begin"""
        self.text_collect(begin)
        self.tokens.append(Token(token_type=token_type, row=begin.row, col=begin.col))
        LOG(f"Token at {begin.row}:{begin.col}: {token_type}", level=3)
        self.buffer_delete()

    def text_collect(self, until: CursorMark) -> None:
        """Emit the buffered text up to until as a Text token (if non-empty)"""
        text = self.source[self.start.index:until.index]
        if text:
            self.tokens.append(Token(token_type=Text(text=text), row=self.start.row, col=self.start.col))

    def buffer_delete(self) -> None:
        """Start a new text buffer at the cursor"""
        self.start = self.mark()

    def mark(self) -> CursorMark:
        return CursorMark(index=self.current, row=self.row, col=self.col)

    def restore(self, mark: CursorMark) -> None:
        self.current = mark.index
        self.row = mark.row
        self.col = mark.col

    def advance(self) -> str:
        """Consume one character, updating row/column"""
        char = self.source[self.current]
        self.last_row, self.last_col = self.row, self.col
        self.current += 1

        if char == "\n":
            self.row += 1
            self.col = 1
        else:
            self.col += 1

        return char

    def peek(self) -> Optional[str]:
        if self.end_is():
            return None
        return self.source[self.current]

    def end_is(self) -> bool:
        return self.current >= len(self.source)

    def keyword_matches(self, keyword: str) -> bool:
        return self.source.startswith(keyword, self.current)

    def string_expect(self, string: str) -> bool:
        """Consume string if it is under the cursor"""
        if not self.keyword_matches(string):
            return False

        for _ in range(len(string)):
            self.advance()
        return True

    def spaces_consume(self) -> None:
        while self.peek() == " ":
            self.advance()


def scan(source: str) -> TokenizedDocument:
    """
    Tokenize a zeta markdown document

    CRLF line breaks are read as LF; columns are unaffected since the
    dropped carriage return ends its line.

    Raises:
        ScanFailed: With every diagnostic found in the document
    """
    return Scanner(source.replace("\r\n", "\n")).scan()
