"""
Frontmatter parsing tests

Tests deserialization and validation of the source metadata block.
"""

import pytest

from zeta.lib.scanner import scan
from zeta.lib.parser import parse, frontmatter_parse
from zeta.lib.errors import ParseErrorKind, ParseFailed
from zeta.models.document import Platform
from zeta.models.frontmatter import Frontmatter


HEADER = "title: Hello\nemoji: 🐱\ntype: tech\ntopics: [python, rust]\npublished: true\n"


def parse_errors(source):
    with pytest.raises(ParseFailed) as failure:
        parse(scan(source))
    return failure.value.errors


class TestValidFrontmatter:
    """Test well-formed metadata"""

    def test_fields(self):
        """All fields are read"""
        document = parse(scan(f"---\n{HEADER}---\nbody"))
        frontmatter = document.frontmatter
        assert frontmatter.title == "Hello"
        assert frontmatter.emoji == "🐱"
        assert frontmatter.type == "tech"
        assert frontmatter.topics == ["python", "rust"]
        assert frontmatter.published is True
        assert frontmatter.only is None

    def test_both_platforms_by_default(self):
        """Without only, both platforms are built"""
        frontmatter, errors = frontmatter_parse(HEADER)
        assert errors == []
        assert frontmatter.platforms() == [Platform.QIITA, Platform.ZENN]

    @pytest.mark.parametrize("value", ["zenn", "Zenn", "ZENN"])
    def test_only_platform(self, value):
        """only restricts the build to one platform, case-insensitively"""
        frontmatter, errors = frontmatter_parse(HEADER + f"only: {value}\n")
        assert errors == []
        assert frontmatter.platforms() == [Platform.ZENN]

    def test_five_topics_allowed(self):
        """Five topics is the maximum"""
        header = HEADER.replace("[python, rust]", "[a, b, c, d, e]")
        frontmatter, errors = frontmatter_parse(header)
        assert errors == []
        assert len(frontmatter.topics) == 5


class TestInvalidFrontmatter:
    """Test metadata errors"""

    def test_missing_frontmatter(self):
        """A document without metadata is rejected"""
        errors = parse_errors("Hello")
        assert [error.kind for error in errors] == [ParseErrorKind.INVALID_FRONTMATTER]

    def test_missing_field(self):
        """Required fields must be present"""
        errors = parse_errors("---\ntitle: T\n---\n")
        assert [error.kind for error in errors] == [ParseErrorKind.INVALID_FRONTMATTER]
        assert (errors[0].row, errors[0].col) == (1, 1)

    def test_yaml_syntax_error(self):
        """Malformed YAML is InvalidFrontMatter"""
        frontmatter, errors = frontmatter_parse("title: [unclosed\n")
        assert [error.kind for error in errors] == [ParseErrorKind.INVALID_FRONTMATTER]
        assert frontmatter == Frontmatter.default()

    def test_too_many_topics(self):
        """More than five topics is rejected with the topic list"""
        header = HEADER.replace("[python, rust]", "[a, b, c, d, e, f]")
        errors = parse_errors(f"---\n{header}---\n")
        assert [error.kind for error in errors] == [ParseErrorKind.TOO_MANY_TOPICS]
        assert errors[0].detail == ["a", "b", "c", "d", "e", "f"]

    def test_unknown_platform(self):
        """only must name a platform"""
        frontmatter, errors = frontmatter_parse(HEADER + "only: hatena\n")
        assert [error.kind for error in errors] == [ParseErrorKind.INVALID_FRONTMATTER]

    def test_body_errors_reported_with_frontmatter_errors(self):
        """Frontmatter errors do not hide body errors"""
        errors = parse_errors("---\ntitle: T\n---\nx\n:::")
        assert [error.kind for error in errors] == [
            ParseErrorKind.INVALID_FRONTMATTER,
            ParseErrorKind.UNEXPECTED_TOKEN,
        ]
