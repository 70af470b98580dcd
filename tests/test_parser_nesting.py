"""
Parser nesting tests

Tests block nesting levels, unbalanced fences, depth limits and macros.
"""

import pytest

from zeta.lib.scanner import Scanner, scan
from zeta.lib.parser import Parser, parse
from zeta.lib.errors import ParseError, ParseErrorKind, ParseFailed
from zeta.models.tokens import Text, LinkCard, Url
from zeta.models.elements import Message, Details, MacroElement, MessageType


HEADER = "---\ntitle: T\nemoji: E\ntype: tech\ntopics: []\npublished: false\n---\n"
BODY_ROW = 8


def elements_of(body):
    return parse(scan(HEADER + body)).elements


def parse_errors(body):
    with pytest.raises(ParseFailed) as failure:
        parse(scan(HEADER + body))
    return failure.value.errors


class TestNesting:
    """Test nested blocks"""

    def test_nested_blocks(self):
        """An inner block must use a lower level"""
        source = "::::details Outer\n:::message warn\ninner\n:::\n::::"
        assert elements_of(source) == [
            Details(
                level=1,
                title="Outer",
                body=[
                    Message(level=0, msg_type=MessageType.WARN, body=[Text("inner\n")]),
                    Text("\n"),
                ],
            )
        ]

    def test_three_levels(self):
        """Levels strictly decrease inward"""
        source = ":::::message info\n::::details A\n:::details B\nx\n:::\n::::\n:::::"
        [outer] = elements_of(source)
        [middle, _] = outer.body
        [inner, _] = middle.body
        assert (outer.level, middle.level, inner.level) == (2, 1, 0)
        assert inner.body == [Text("x\n")]

    def test_same_level_nesting_rejected(self):
        """An inner block at the enclosing level is an error"""
        errors = parse_errors(":::details A\n:::message info\nx\n:::\n:::")
        assert errors == [
            ParseError(ParseErrorKind.INVALID_NESTING_LEVEL, BODY_ROW + 1, 1, (0, 0))
        ]

    def test_higher_level_nesting_rejected(self):
        """An inner block above the enclosing level is an error"""
        errors = parse_errors(":::details A\n::::message info\nx\n::::\n:::")
        assert [error.kind for error in errors] == [ParseErrorKind.INVALID_NESTING_LEVEL]


class TestUnbalancedFences:
    """Test missing and stray closing fences"""

    def test_unclosed_block(self):
        """A block without its closing fence is reported at its opening fence"""
        assert parse_errors(":::message info\nx") == [
            ParseError(ParseErrorKind.COULD_NOT_FIND_END_TOKEN, BODY_ROW, 1)
        ]

    def test_closing_fence_of_wrong_level(self):
        """A closing fence of another level does not close the block"""
        errors = parse_errors("::::message info\nx\n:::")
        assert [error.kind for error in errors] == [
            ParseErrorKind.UNEXPECTED_TOKEN,
            ParseErrorKind.COULD_NOT_FIND_END_TOKEN,
        ]

    def test_stray_closing_fence(self):
        """A closing fence with no open block is unexpected"""
        assert parse_errors("x\n:::") == [
            ParseError(ParseErrorKind.UNEXPECTED_TOKEN, BODY_ROW + 1, 1, 0)
        ]

    def test_all_errors_collected(self):
        """Parsing continues past errors"""
        errors = parse_errors(":::\n:::message bogus\nx\n:::")
        assert [error.kind for error in errors] == [
            ParseErrorKind.UNEXPECTED_TOKEN,
            ParseErrorKind.INVALID_MESSAGE_TYPE,
        ]


class TestDepthLimit:
    """Test the nesting depth limit"""

    def test_too_deep_block_rejected(self):
        """A block beyond max_depth is reported and skipped"""
        tokens = Scanner("::::message info\n:::message info\nx\n:::\n::::").body_scan()
        with pytest.raises(ParseFailed) as failure:
            Parser(tokens, max_depth=1).parse()
        assert [error.kind for error in failure.value.errors] == [ParseErrorKind.NESTING_TOO_DEEP]

    def test_within_limit(self):
        """Nesting up to max_depth is accepted"""
        tokens = Scanner("::::message info\n:::message info\nx\n:::\n::::").body_scan()
        [outer] = Parser(tokens, max_depth=2).parse()
        assert isinstance(outer.body[0], Message)


class TestMacro:
    """Test macro variants"""

    def test_macro_variants_parsed(self):
        """Each variant becomes its own element stream"""
        source = "<macro>\nzenn: \"@[card](https://a.b)\"\nqiita: |\n  :::message info\n  x\n  :::\n</macro>"
        [macro] = elements_of(source)
        assert isinstance(macro, MacroElement)
        assert macro.macro.zenn == [LinkCard(card_type="card", url="https://a.b")]
        assert macro.macro.qiita == [
            Message(level=0, msg_type=MessageType.INFO, body=[Text("x\n")]),
            Text("\n"),
        ]

    def test_macro_url_variant(self):
        """A variant starting with a URL yields a Url element"""
        [macro] = elements_of("<macro>\nqiita: https://a.b\n</macro>")
        assert macro.macro.qiita == [Url(url="https://a.b")]
        assert macro.macro.zenn == []

    def test_invalid_macro_variant(self):
        """A variant with an unclosed block makes the macro invalid"""
        errors = parse_errors("<macro>\nqiita: |\n  :::message info\n  x\n</macro>")
        assert [error.kind for error in errors] == [
            ParseErrorKind.COULD_NOT_FIND_END_TOKEN,
            ParseErrorKind.INVALID_MACRO,
        ]
        assert (errors[-1].row, errors[-1].col) == (BODY_ROW, 1)
