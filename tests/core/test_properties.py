"""
Unit tests for the properties parser.
"""

import pytest

from prereqkit.core.properties import (
    PropertiesError,
    load_properties,
    parse_properties,
)


class TestParseProperties:
    """Test parse_properties()."""

    def test_simple_entries(self):
        """Test key=value lines."""
        result = parse_properties("target=android-19\nandroid.library=true\n")
        assert result == {"target": "android-19", "android.library": "true"}

    def test_comments_and_blank_lines_ignored(self):
        """Test # and ! comments and blank lines are skipped."""
        text = "# generated\n\n! legacy comment\n   # indented comment\ntarget=android-21\n"
        assert parse_properties(text) == {"target": "android-21"}

    def test_colon_and_whitespace_separators(self):
        """Test ':' and whitespace act as separators."""
        result = parse_properties("a: 1\nb 2\nc   =   3\n")
        assert result == {"a": "1", "b": "2", "c": "3"}

    def test_value_keeps_trailing_whitespace(self):
        """Test trailing whitespace belongs to the value."""
        assert parse_properties("target=android-19  ")["target"] == "android-19  "

    def test_leading_whitespace_on_line_ignored(self):
        """Test indented entries parse normally."""
        assert parse_properties("    target=android-8")["target"] == "android-8"

    def test_continuation_lines(self):
        """Test trailing backslash joins the next line."""
        text = "target=android-\\\n    19\nother=x\n"
        assert parse_properties(text) == {"target": "android-19", "other": "x"}

    def test_escaped_backslash_is_not_continuation(self):
        """Test an even number of trailing backslashes ends the line."""
        text = "path=C:\\\\\nnext=1\n"
        assert parse_properties(text) == {"path": "C:\\", "next": "1"}

    def test_escapes_decoded(self):
        """Test standard escape sequences."""
        result = parse_properties("tab=a\\tb\nuni=\\u0041\\u00e9\neq=a\\=b\n")
        assert result == {"tab": "a\tb", "uni": "A\u00e9", "eq": "a=b"}

    def test_escaped_separator_in_key(self):
        """Test escaped '=' stays part of the key."""
        assert parse_properties("a\\=b=c") == {"a=b": "c"}

    def test_key_without_value(self):
        """Test a bare key maps to an empty string."""
        assert parse_properties("target\n") == {"target": ""}

    def test_later_duplicate_wins(self):
        """Test later entries override earlier ones."""
        assert parse_properties("target=a\ntarget=b\n") == {"target": "b"}

    def test_windows_line_endings(self):
        """Test CRLF and CR line endings."""
        assert parse_properties("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}

    def test_comment_ending_in_backslash_does_not_continue(self):
        """Test comment lines never continue."""
        assert parse_properties("# comment \\\ntarget=x\n") == {"target": "x"}

    def test_malformed_unicode_escape(self):
        """Test broken \\u escape raises PropertiesError."""
        with pytest.raises(PropertiesError, match="Malformed"):
            parse_properties("target=\\u12G4\n")

    def test_truncated_unicode_escape(self):
        """Test \\u escape with too few digits raises PropertiesError."""
        with pytest.raises(PropertiesError):
            parse_properties("target=\\u12")

    def test_empty_text(self):
        """Test empty input gives empty mapping."""
        assert parse_properties("") == {}


class TestLoadProperties:
    """Test load_properties()."""

    def test_load_from_file(self, tmp_path):
        """Test reading a properties file."""
        path = tmp_path / "source.properties"
        path.write_text("Pkg.Revision=12.0\n")

        assert load_properties(path) == {"Pkg.Revision": "12.0"}

    def test_utf8_content(self, tmp_path):
        """Test UTF-8 files are read as written."""
        path = tmp_path / "project.properties"
        path.write_bytes("name=caf\u00e9\n".encode("utf-8"))

        assert load_properties(path)["name"] == "caf\u00e9"

    def test_latin1_content(self, tmp_path):
        """Test content that is not valid UTF-8 falls back to ISO-8859-1."""
        path = tmp_path / "project.properties"
        path.write_bytes(b"name=caf\xe9\n")

        assert load_properties(path)["name"] == "caf\u00e9"

    def test_missing_file(self, tmp_path):
        """Test missing file raises OSError."""
        with pytest.raises(OSError):
            load_properties(tmp_path / "missing.properties")
