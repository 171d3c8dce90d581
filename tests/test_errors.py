"""
Tests for parse error reporting.
"""

from backend.flooph.errors import FloophError, ParseError, ParseFailureCause


class TestParseFailureCause:
    """Tests for ParseFailureCause."""

    def test_line_and_column(self):
        """Test offsets are converted to 1-based line and column."""
        cause = ParseFailureCause.at("ab\ncd", 4, ["':'"])
        assert cause.line == 2
        assert cause.column == 2

    def test_default_message(self):
        """Test the message lists expected alternatives."""
        cause = ParseFailureCause.at("a &", 3, ["comparison", "negation"])
        assert cause.message == "Expected comparison or negation"

    def test_position_clamped(self):
        """Test positions beyond the text are clamped."""
        cause = ParseFailureCause.at("abc", 10, [])
        assert cause.position == 3
        assert cause.message == "Unexpected input"

    def test_describe_points_at_column(self):
        """Test the caret diagnostic."""
        cause = ParseFailureCause.at("a: 1\nb 2", 7, ["':'"])
        lines = cause.describe("a: 1\nb 2").split("\n")
        assert lines[1] == "  b 2"
        assert lines[2] == "    ^"

    def test_to_dict(self):
        """Test conversion to dictionary."""
        data = ParseFailureCause.at("x", 0, ["y"]).to_dict()
        assert data["line"] == 1
        assert data["expected"] == ["y"]


class TestParseError:
    """Tests for ParseError."""

    def test_is_flooph_error(self):
        """Test the error hierarchy."""
        error = ParseError("{?a}", "template", ParseFailureCause.at("{?a}", 4, []))
        assert isinstance(error, FloophError)
        assert "template" in str(error)
        assert error.describe().endswith("^")
