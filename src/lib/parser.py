"""
Parser for zeta token streams

Transforms a TokenizedDocument into a ParsedDocument: the frontmatter text
is deserialized and validated, and the flat token stream is folded into a
tree where message/details blocks own their bodies.

Key features:
- Recursive descent over begin/end fence tokens
- Nesting stack enforcing strictly decreasing block levels
- Independent re-parsing of each macro variant by a fresh Parser
- Error accumulation: every diagnostic of the document is reported at once
- Explicit depth limit for blocks and macros

Example:
    >>> from zeta.lib.scanner import scan
    >>> header = "title: T\\nemoji: E\\ntype: tech\\ntopics: []\\npublished: false\\n"
    >>> document = parse(scan("---\\n" + header + "---\\n:::message alert\\nHello\\n:::"))
    >>> document.elements
    [Message(level=0, msg_type=<MessageType.ALERT: 'alert'>, body=[Text(text='Hello\\n')])]
"""

from typing import List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..models.tokens import (
    Token,
    PASSTHROUGH_TYPES,
    MessageBegin,
    DetailsBegin,
    MessageOrDetailsEnd,
    MacroToken,
)
from ..models.elements import Element, Message, Details, MacroElement, MessageType
from ..models.document import Macro, MarkdownDoc, ParsedDocument, TokenizedDocument
from ..models.frontmatter import Frontmatter, MAX_TOPICS
from .errors import ParseError, ParseErrorKind, ParseFailed
from .log import LOG


# The frontmatter text starts on the line after the opening "---"
FRONTMATTER_FIRST_ROW = 2


def frontmatter_parse(text: str) -> Tuple[Frontmatter, List[ParseError]]:
    """
    Deserialize and validate the frontmatter block

    Args:
        text: Raw frontmatter text (between the separators)

    Returns:
        (frontmatter, errors). On any deserialization failure the
        frontmatter is Frontmatter.default() so the body can still be
        parsed; errors then holds InvalidFrontMatter. A valid block with
        more than MAX_TOPICS topics is returned with TooManyTopics.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as error:
        mark = getattr(error, "problem_mark", None)
        row, col = (1, 1) if mark is None else (mark.line + FRONTMATTER_FIRST_ROW, mark.column + 1)
        problem = getattr(error, "problem", None) or str(error)
        return Frontmatter.default(), [ParseError(ParseErrorKind.INVALID_FRONTMATTER, row, col, problem)]

    if not isinstance(data, dict):
        found = "nothing" if data is None else type(data).__name__
        return Frontmatter.default(), [
            ParseError(ParseErrorKind.INVALID_FRONTMATTER, 1, 1, f"expected a mapping, got {found}")
        ]

    try:
        frontmatter = Frontmatter.model_validate(data)
    except ValidationError as error:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}"
            for detail in error.errors()
        )
        return Frontmatter.default(), [ParseError(ParseErrorKind.INVALID_FRONTMATTER, 1, 1, problems)]

    if len(frontmatter.topics) > MAX_TOPICS:
        return frontmatter, [
            ParseError(ParseErrorKind.TOO_MANY_TOPICS, 1, 1, list(frontmatter.topics))
        ]

    return frontmatter, []


class Parser:
    """
    Parser for a zeta token stream (document body or macro variant)

    Each instance owns its cursor, nesting stack and error list; macro
    variants are parsed by new instances so no state is shared between
    recursion levels.
    """

    def __init__(self, tokens: List[Token], depth: int = 0, max_depth: Optional[int] = None) -> None:
        """
        Initialize parser with a token stream

        Args:
            tokens: Tokens to parse
            depth: Nesting depth at which this stream sits (macro recursion)
            max_depth: Deepest block/macro nesting accepted (defaults to settings)

        Attributes:
            position: Index of the next token
            levels: Nesting stack of the open blocks' levels
            errors: Diagnostics collected so far
        """
        if max_depth is None:
            from ..config import appsettings
            max_depth = appsettings.max_depth

        self.tokens = tokens
        self.position = 0
        self.depth = depth
        self.max_depth = max_depth
        self.levels: List[int] = []
        self.errors: List[ParseError] = []

    def parse(self) -> List[Element]:
        """
        Parse the whole stream into elements

        Returns:
            Element tree of the stream

        Raises:
            ParseFailed: If any diagnostic was collected
        """
        elements, _ = self.elements_parse(closing_level=None)

        if self.errors:
            raise ParseFailed(self.errors)

        return elements

    def elements_parse(self, closing_level: Optional[int]) -> Tuple[List[Element], bool]:
        """
        Parse tokens until the closing fence of the current block

        Args:
            closing_level: Level of the fence closing the current block, or
                           None at the top of the stream

        Returns:
            (elements, closed) where closed tells whether the closing fence
            was found (and consumed) before the stream ran out
        """
        elements: List[Element] = []

        while self.position < len(self.tokens):
            token = self.tokens[self.position]
            self.position += 1
            token_type = token.token_type

            if isinstance(token_type, PASSTHROUGH_TYPES):
                elements.append(token_type)
            elif isinstance(token_type, MessageOrDetailsEnd):
                if closing_level is not None and token_type.level == closing_level:
                    return elements, True
                self.errors.append(
                    ParseError(ParseErrorKind.UNEXPECTED_TOKEN, token.row, token.col, token_type.level)
                )
            elif isinstance(token_type, MessageBegin):
                message = self.message_parse(token, token_type)
                if message is not None:
                    elements.append(message)
            elif isinstance(token_type, DetailsBegin):
                details = self.details_parse(token, token_type)
                if details is not None:
                    elements.append(details)
            elif isinstance(token_type, MacroToken):
                elements.append(self.macro_parse(token, token_type))
            else:
                raise TypeError(f"Unhandled token type: {type(token_type).__name__}")

        return elements, False

    def message_parse(self, token: Token, begin: MessageBegin) -> Optional[Message]:
        """Parse a message block whose begin token was just consumed"""
        try:
            msg_type = MessageType(begin.type)
        except ValueError:
            self.errors.append(
                ParseError(ParseErrorKind.INVALID_MESSAGE_TYPE, token.row, token.col, begin.type)
            )
            msg_type = MessageType.INFO

        body = self.block_parse(token, begin.level)
        if body is None:
            return None
        return Message(level=begin.level, msg_type=msg_type, body=body)

    def details_parse(self, token: Token, begin: DetailsBegin) -> Optional[Details]:
        """Parse a details block whose begin token was just consumed"""
        body = self.block_parse(token, begin.level)
        if body is None:
            return None
        return Details(level=begin.level, title=begin.title, body=body)

    def block_parse(self, token: Token, level: int) -> Optional[List[Element]]:
        """
        Parse a block body up to the closing fence of the given level

        Pushes level on the nesting stack for the duration of the body.

        Returns:
            The body, or None if the block was too deep and skipped
        """
        if self.levels and level >= self.levels[-1]:
            self.errors.append(
                ParseError(
                    ParseErrorKind.INVALID_NESTING_LEVEL,
                    token.row,
                    token.col,
                    (level, self.levels[-1]),
                )
            )

        if self.depth + len(self.levels) >= self.max_depth:
            self.errors.append(
                ParseError(ParseErrorKind.NESTING_TOO_DEEP, token.row, token.col, self.max_depth)
            )
            self.block_skip(level)
            return None

        self.levels.append(level)
        body, closed = self.elements_parse(closing_level=level)
        self.levels.pop()

        if not closed:
            self.errors.append(ParseError(ParseErrorKind.COULD_NOT_FIND_END_TOKEN, token.row, token.col))

        return body

    def block_skip(self, level: int) -> None:
        """Advance past the closing fence of the given level without recursing"""
        while self.position < len(self.tokens):
            token_type = self.tokens[self.position].token_type
            self.position += 1
            if isinstance(token_type, MessageOrDetailsEnd) and token_type.level == level:
                return

    def macro_parse(self, token: Token, macro_token: MacroToken) -> MacroElement:
        """
        Parse each platform variant of a macro as a standalone body

        Sub-parse diagnostics are merged into this parser's list and the
        macro is additionally reported as InvalidMacro.
        """
        variants: List[List[Element]] = []
        failed = False

        if self.depth + len(self.levels) >= self.max_depth:
            self.errors.append(
                ParseError(ParseErrorKind.NESTING_TOO_DEEP, token.row, token.col, self.max_depth)
            )
            return MacroElement(macro=Macro(zenn=[], qiita=[]))

        for tokens in (macro_token.macro.zenn, macro_token.macro.qiita):
            parser = Parser(tokens, depth=self.depth + len(self.levels) + 1, max_depth=self.max_depth)
            try:
                variants.append(parser.parse())
            except ParseFailed as failure:
                self.errors.extend(failure.errors)
                variants.append([])
                failed = True

        if failed:
            self.errors.append(ParseError(ParseErrorKind.INVALID_MACRO, token.row, token.col))

        zenn, qiita = variants
        return MacroElement(macro=Macro(zenn=zenn, qiita=qiita))


def parse(document: TokenizedDocument) -> ParsedDocument:
    """
    Parse a tokenized document

    Frontmatter diagnostics do not stop the body from being parsed, so
    both kinds of problems are reported together.

    Raises:
        ParseFailed: With every diagnostic found in the document
    """
    frontmatter, errors = frontmatter_parse(document.frontmatter)

    elements: List[Element] = []
    try:
        elements = Parser(document.elements).parse()
    except ParseFailed as failure:
        errors.extend(failure.errors)

    if errors:
        raise ParseFailed(errors)

    LOG(f"Parsed {len(elements)} top-level elements", level=2)
    return MarkdownDoc(frontmatter=frontmatter, elements=elements)
