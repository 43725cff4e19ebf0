"""Tests for the tokenizer."""
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from safedsl.errors import LexError, SecurityError
from safedsl.syntax.tokenizer import tokenize
from safedsl.syntax.tokens import TokenType


def types(source, **kwargs):
    return [t.type for t in tokenize(source, **kwargs)]


def values(source, **kwargs):
    return [t.value for t in tokenize(source, **kwargs) if t.type is not TokenType.EOF]


class TestBasicTokens:
    """Identifiers, punctuation and literals."""

    def test_simple_call(self):
        """Test a call with a string argument."""
        assert types('text("hi")') == [
            TokenType.IDENTIFIER,
            TokenType.PUNCTUATION,
            TokenType.STRING,
            TokenType.PUNCTUATION,
            TokenType.EOF,
        ]
        assert values('text("hi")') == ["text", "(", "hi", ")"]

    def test_eof_always_last(self):
        """Test that even empty input ends with EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.EOF

    def test_keywords(self):
        """Test do/end keywords."""
        tokens = tokenize("div do end")
        assert tokens[1].type is TokenType.KEYWORD
        assert tokens[1].value == "do"
        assert tokens[2].type is TokenType.KEYWORD
        assert tokens[2].value == "end"

    def test_boolean_and_nil(self):
        """Test true/false/nil literals."""
        tokens = tokenize("true false nil")
        assert [t.type for t in tokens[:3]] == [TokenType.BOOLEAN, TokenType.BOOLEAN, TokenType.NIL]
        assert [t.value for t in tokens[:3]] == [True, False, None]

    def test_numbers(self):
        """Test integer, float, negative and separated numbers."""
        assert values("42 3.5 -2 1_000") == [42, 3.5, -2, 1000]
        assert isinstance(values("42")[0], int)
        assert isinstance(values("3.5")[0], float)

    def test_number_followed_by_method(self):
        """Test that a dot without digits ends the number."""
        assert types("3.times") == [
            TokenType.NUMBER,
            TokenType.PUNCTUATION,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]

    def test_invalid_number(self):
        """Test an identifier glued to a number."""
        with pytest.raises(LexError, match="invalid number"):
            tokenize("12abc")

    def test_number_too_long(self):
        """Test oversized number literals fail with LexError."""
        assert values("1" * 32) == [int("1" * 32)]
        with pytest.raises(LexError, match="number literal too long"):
            tokenize("text(" + "1" * 5000 + ")")
        with pytest.raises(LexError, match="number literal too long"):
            tokenize("1." + "5" * 40)

    def test_identifier_suffixes(self):
        """Test identifiers ending in ? or !."""
        assert values("valid? save!") == ["valid?", "save!"]


class TestSymbolsAndColons:
    """Colon disambiguation."""

    def test_named_argument_with_symbol(self):
        """Test key: :value."""
        tokens = tokenize("vstack(alignment: :center)")
        assert tokens[2].type is TokenType.IDENTIFIER
        assert tokens[3].type is TokenType.PUNCTUATION
        assert tokens[3].value == ":"
        assert tokens[4].type is TokenType.SYMBOL
        assert tokens[4].value == "center"

    def test_bare_symbol(self):
        """Test a symbol on its own."""
        tokens = tokenize(":leading")
        assert tokens[0].type is TokenType.SYMBOL
        assert tokens[0].value == "leading"


class TestStrings:
    """String literals."""

    def test_single_and_double_quotes(self):
        """Test both quote styles."""
        assert values("'a' \"b\"") == ["a", "b"]

    def test_escapes(self):
        """Test escape sequences."""
        assert values('"a\\nb\\t\\"c\\""') == ['a\nb\t"c"']

    def test_unknown_escape_kept(self):
        """Test that unknown escapes keep the character."""
        assert values('"\\q"') == ["q"]

    def test_no_interpolation(self):
        """Test that #{...} is plain text."""
        assert values('"#{system}"') == ["#{system}"]

    def test_metacharacters_inside_strings_are_text(self):
        """Test that a string may contain shell characters."""
        assert values('"a | b && `c`"') == ["a | b && `c`"]

    def test_unterminated_string(self):
        """Test unterminated string raises LexError."""
        with pytest.raises(LexError, match="unterminated string") as exc_info:
            tokenize('text("oops')
        assert exc_info.value.position.column == 6

    def test_unterminated_escape(self):
        """Test a trailing backslash."""
        with pytest.raises(LexError):
            tokenize('"abc\\')


class TestComments:
    """Line and block comments."""

    def test_line_comment_dropped(self):
        """Test comments are dropped by default."""
        assert values('# heading\ntext("a")') == ["text", "(", "a", ")"]

    def test_keep_comments(self):
        """Test keep_comments emits COMMENT tokens."""
        tokens = tokenize('# heading\ntext("a")', keep_comments=True)
        assert tokens[0].type is TokenType.COMMENT
        assert tokens[0].value == "heading"

    def test_block_comment(self):
        """Test =begin/=end block comments."""
        source = '=begin\nignored("x")\n=end\ntext("a")'
        assert values(source) == ["text", "(", "a", ")"]

    def test_unterminated_block_comment(self):
        """Test =begin without =end."""
        with pytest.raises(LexError, match="unterminated block comment"):
            tokenize("=begin\nnever closed")


class TestPositions:
    """Source positions."""

    def test_line_and_column(self):
        """Test positions across lines."""
        tokens = tokenize("a\n  b")
        assert tokens[0].position.line == 1
        assert tokens[0].position.column == 1
        assert tokens[1].position.line == 2
        assert tokens[1].position.column == 3
        assert tokens[1].position.offset == 4


class TestRejections:
    """Errors for characters outside the grammar."""

    def test_unexpected_character(self):
        """Test an unexpected character raises LexError."""
        with pytest.raises(LexError, match="unexpected character"):
            tokenize("text(@x)")

    def test_unexpected_before_newline(self):
        """Test that a newline after a bad character is not a security issue."""
        with pytest.raises(LexError):
            tokenize("@\n")

    @pytest.mark.parametrize("source", [
        "text(`ls`)",
        "text($(ls))",
        "a | b",
        "a && b",
    ])
    def test_shell_metacharacters(self, source):
        """Test shell sequences raise SecurityError."""
        with pytest.raises(SecurityError):
            tokenize(source)

    def test_single_ampersand(self):
        """Test a lone & is an ordinary lexical error."""
        with pytest.raises(LexError):
            tokenize("a & b")

    def test_max_length(self):
        """Test oversized input is rejected."""
        with pytest.raises(LexError, match="exceeds 10 characters"):
            tokenize('text("abcdefghij")', max_length=10)

    def test_non_string_source(self):
        """Test non-string input."""
        with pytest.raises(TypeError):
            tokenize(None)
