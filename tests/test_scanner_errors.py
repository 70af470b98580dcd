"""
Scanner error tests

Tests that unterminated constructs and invalid macros are reported with
their positions, and that scanning continues so all errors are reported.
"""

import pytest

from zeta.lib.scanner import Scanner, scan
from zeta.lib.errors import ScanError, ScanErrorKind, ScanFailed


def scan_errors(source, **kwargs):
    """Errors collected while scanning a body"""
    with pytest.raises(ScanFailed) as failure:
        Scanner(source, **kwargs).body_scan()
    return failure.value.errors


class TestIncomplete:
    """Test unterminated spans"""

    def test_unterminated_image_target(self):
        """Missing ) is reported at the opening parenthesis"""
        assert scan_errors("![alt](http://x") == [
            ScanError(ScanErrorKind.INCOMPLETE, 1, 7, ")")
        ]

    def test_unterminated_inline_footnote(self):
        """Missing ] is reported at the opening bracket"""
        errors = scan_errors("^[unclosed")
        assert errors == [ScanError(ScanErrorKind.INCOMPLETE, 1, 2, "]")]
        assert errors[0].delimiter == "]"

    def test_unterminated_code_span(self):
        """A lone backtick needs its closing backtick"""
        assert scan_errors("`code") == [ScanError(ScanErrorKind.INCOMPLETE, 1, 1, "`")]

    def test_unterminated_frontmatter(self):
        """Missing closing separator is reported after the opening one"""
        with pytest.raises(ScanFailed) as failure:
            scan("---\ntitle: x\n")
        assert failure.value.errors[0] == ScanError(ScanErrorKind.INCOMPLETE, 1, 4, "---\n")

    def test_all_errors_are_collected(self):
        """Scanning resumes after an error"""
        assert scan_errors("^[a\n![b](c") == [
            ScanError(ScanErrorKind.INCOMPLETE, 1, 2, "]"),
            ScanError(ScanErrorKind.INCOMPLETE, 2, 5, ")"),
        ]

    def test_error_message_has_position(self):
        """The rendered message points at row and column"""
        error = scan_errors("^[x")[0]
        assert str(error).endswith("\n --> row: 1, column: 2")


class TestMacroErrors:
    """Test invalid macro blocks"""

    def test_unterminated_macro(self):
        """Missing </macro> is Incomplete"""
        assert scan_errors("<macro>zenn: a") == [
            ScanError(ScanErrorKind.INCOMPLETE, 1, 7, "</macro>")
        ]

    def test_macro_body_not_a_mapping(self):
        """A YAML list is not a macro"""
        assert scan_errors("<macro>\n- a\n- b\n</macro>") == [
            ScanError(ScanErrorKind.INVALID_MACRO, 1, 1)
        ]

    def test_macro_value_not_a_string(self):
        """Platform values must be strings"""
        assert scan_errors("x <macro>zenn: 1</macro>") == [
            ScanError(ScanErrorKind.INVALID_MACRO, 1, 3)
        ]

    def test_macro_variant_error(self):
        """Errors inside a variant are reported along with InvalidMacro"""
        errors = scan_errors('<macro>\nzenn: "^[x"\n</macro>')
        kinds = [error.kind for error in errors]
        assert ScanErrorKind.INCOMPLETE in kinds
        assert errors[-1] == ScanError(ScanErrorKind.INVALID_MACRO, 1, 1)

    def test_macro_nesting_limit(self):
        """A macro beyond the depth limit is rejected"""
        assert scan_errors("<macro></macro>", depth=1, max_depth=1) == [
            ScanError(ScanErrorKind.NESTING_TOO_DEEP, 1, 1, 1)
        ]
