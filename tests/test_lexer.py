# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the Zeno lexer/tokenizer.
#
# Test coverage includes:
#   - Keywords, identifiers, integer and float literals
#   - String literals with escape sequences
#   - One- and two-character operators, delimiters
#   - Line and block comments (including an unterminated block comment)
#   - Line/column tracking
#   - Error conditions: illegal characters, unterminated strings
# =============================================================================

import pytest
from zeno.lexer import Lexer, Token, TokenType
from zeno.errors import UnterminatedStringError


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """
    Helper to tokenize and drop the trailing EOF token.
    Tests are focused on meaningful tokens, not the terminator.
    """
    tokens = Lexer(source, "<test>").tokenize()
    return [t for t in tokens if t.type != TokenType.EOF]


def types(source: str) -> list:
    """Helper returning just the token types."""
    return [t.type for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = Lexer("").tokenize()
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_whitespace_only(self):
        """Whitespace, including form feed, produces no tokens."""
        assert tokenize("  \t\r\n\x0c ") == []

    def test_let_statement(self):
        """A simple declaration lexes into the expected sequence."""
        tokens = tokenize("let x = 5;")
        assert [t.type for t in tokens] == [
            TokenType.LET,
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.INTEGER,
            TokenType.SEMICOLON,
        ]
        assert tokens[1].value == "x"
        assert tokens[3].value == 5

    def test_eof_repeats(self):
        """Once input is exhausted, next_token keeps returning EOF."""
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENTIFIER
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF

    def test_iteration_stops_after_eof(self):
        """Iterating a lexer yields tokens up to and including EOF."""
        tokens = list(Lexer("a b"))
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]


# =============================================================================
# Keyword and Identifier Tests
# =============================================================================

class TestKeywords:
    """Test reserved word recognition."""

    @pytest.mark.parametrize("word,token_type", [
        ("let", TokenType.LET),
        ("mut", TokenType.MUT),
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
        ("loop", TokenType.LOOP),
        ("while", TokenType.WHILE),
        ("for", TokenType.FOR),
        ("fn", TokenType.FN),
        ("return", TokenType.RETURN),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        ("print", TokenType.PRINT),
        ("println", TokenType.PRINTLN),
        ("break", TokenType.BREAK),
        ("continue", TokenType.CONTINUE),
    ])
    def test_keyword(self, word, token_type):
        """Every reserved word gets its own token type."""
        tokens = tokenize(word)
        assert len(tokens) == 1
        assert tokens[0].type == token_type
        assert tokens[0].is_keyword()

    def test_keyword_prefix_is_identifier(self):
        """Identifiers that merely start with a keyword are identifiers."""
        tokens = tokenize("letter iffy println2")
        assert all(t.type == TokenType.IDENTIFIER for t in tokens)
        assert [t.value for t in tokens] == ["letter", "iffy", "println2"]

    def test_keywords_are_case_sensitive(self):
        """Keyword matching is case sensitive."""
        assert types("Let WHILE") == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]

    def test_identifier_with_underscore_and_digits(self):
        """Identifiers may start with '_' and contain digits."""
        tokens = tokenize("_tmp1 x_2")
        assert [t.value for t in tokens] == ["_tmp1", "x_2"]
        assert not tokens[0].is_keyword()


# =============================================================================
# Number Literal Tests
# =============================================================================

class TestNumbers:
    """Test integer and float literal scanning."""

    def test_integer(self):
        """Integer literals carry their int value."""
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == 42

    def test_float_keeps_lexeme(self):
        """Float literals carry the raw lexeme for the parser to convert."""
        tokens = tokenize("3.14")
        assert tokens[0].type == TokenType.FLOAT
        assert tokens[0].value == "3.14"

    def test_trailing_dot_is_not_float(self):
        """A dot without following digits is not part of the number."""
        tokens = tokenize("1.")
        assert [t.type for t in tokens] == [TokenType.INTEGER, TokenType.ILLEGAL]
        assert tokens[1].value == "."

    def test_huge_integer_is_lexed(self):
        """Range checking happens in the parser, not the lexer."""
        tokens = tokenize("99999999999999999999")
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == 99999999999999999999

    def test_integer_beyond_conversion_limit(self):
        """Thousands of digits still lex to one INTEGER token and EOF."""
        tokens = Lexer("1" * 5000 + " + 2", "<test>").tokenize()
        assert [t.type for t in tokens] == [
            TokenType.INTEGER, TokenType.PLUS, TokenType.INTEGER, TokenType.EOF,
        ]
        assert tokens[3].location.column == 5005

    def test_negative_number_is_two_tokens(self):
        """A leading minus is an operator, not part of the literal."""
        assert types("-5") == [TokenType.MINUS, TokenType.INTEGER]


# =============================================================================
# String Literal Tests
# =============================================================================

class TestStrings:
    """Test string literal scanning and escapes."""

    def test_simple_string(self):
        """Plain strings keep their text without quotes."""
        tokens = tokenize('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"

    def test_empty_string(self):
        """An empty string literal is valid."""
        assert tokenize('""')[0].value == ""

    def test_escape_sequences(self):
        """The four supported escapes are decoded."""
        tokens = tokenize(r'"a\nb\tc\\d\"e"')
        assert tokens[0].value == 'a\nb\tc\\d"e'

    def test_unknown_escape_keeps_character(self):
        """An unknown escape yields the escaped character itself."""
        assert tokenize(r'"\q"')[0].value == "q"

    def test_unterminated_string_token(self):
        """next_token reports an unterminated string as ILLEGAL('\"')."""
        lexer = Lexer('"abc')
        token = lexer.next_token()
        assert token.type == TokenType.ILLEGAL
        assert token.value == '"'

    def test_unterminated_string_raises_from_tokenize(self):
        """tokenize() treats an unterminated string as fatal."""
        with pytest.raises(UnterminatedStringError) as exc_info:
            Lexer('print("abc', "t.zn").tokenize()
        assert "Unterminated string literal" in str(exc_info.value)
        assert exc_info.value.location.line == 1
        assert exc_info.value.location.column == 7


# =============================================================================
# Operator and Delimiter Tests
# =============================================================================

class TestOperators:
    """Test operator and delimiter recognition."""

    def test_single_char_operators(self):
        """Arithmetic operators and delimiters."""
        assert types("+ - * / % , ; : ( ) { }") == [
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
            TokenType.PERCENT,
            TokenType.COMMA,
            TokenType.SEMICOLON,
            TokenType.COLON,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RBRACE,
        ]

    def test_comparison_operators(self):
        """One- and two-character comparisons use maximal munch."""
        assert types("= == ! != < <= > >=") == [
            TokenType.ASSIGN,
            TokenType.EQ,
            TokenType.BANG,
            TokenType.NOT_EQ,
            TokenType.LT,
            TokenType.LTE,
            TokenType.GT,
            TokenType.GTE,
        ]

    def test_logical_operators(self):
        """&& and || are recognised."""
        assert types("a && b || c") == [
            TokenType.IDENTIFIER,
            TokenType.AND,
            TokenType.IDENTIFIER,
            TokenType.OR,
            TokenType.IDENTIFIER,
        ]

    def test_lone_ampersand_is_illegal(self):
        """A single & or | is not an operator."""
        tokens = tokenize("& |")
        assert [t.type for t in tokens] == [TokenType.ILLEGAL, TokenType.ILLEGAL]
        assert [t.value for t in tokens] == ["&", "|"]

    def test_adjacent_operators(self):
        """Operators without spaces are split correctly."""
        assert types("x<=-1") == [
            TokenType.IDENTIFIER,
            TokenType.LTE,
            TokenType.MINUS,
            TokenType.INTEGER,
        ]

    def test_illegal_character(self):
        """Unknown characters become ILLEGAL tokens and lexing continues."""
        tokens = tokenize("a @ b")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.ILLEGAL,
            TokenType.IDENTIFIER,
        ]
        assert tokens[1].value == "@"


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test comment skipping."""

    def test_line_comment(self):
        """Line comments run to end of line."""
        assert types("x // comment\ny") == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]

    def test_block_comment(self):
        """Block comments may span lines."""
        tokens = tokenize("a /* one\ntwo */ b")
        assert [t.value for t in tokens] == ["a", "b"]

    def test_consecutive_comments(self):
        """Several comments in a row are all skipped."""
        assert types("// a\n/* b */ // c\n/* d */ x") == [TokenType.IDENTIFIER]

    def test_block_comments_do_not_nest(self):
        """The first */ closes the comment."""
        tokens = tokenize("/* a /* b */ c */")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.STAR,
            TokenType.SLASH,
        ]

    def test_unterminated_block_comment_reaches_eof(self):
        """An unclosed block comment silently swallows the rest of the input."""
        lexer = Lexer("x /* unterminated")
        assert lexer.next_token().type == TokenType.IDENTIFIER
        assert lexer.next_token().type == TokenType.EOF

    def test_comments_do_not_change_tokens(self):
        """Removing comments leaves the token stream unchanged."""
        with_comments = "let x = 1; // one\n/* two */ print(x)"
        without = "let x = 1;\n print(x)"
        assert [(t.type, t.value) for t in tokenize(with_comments)] == [
            (t.type, t.value) for t in tokenize(without)
        ]

    def test_slash_alone_is_division(self):
        """A single slash is still the division operator."""
        assert types("a / b") == [
            TokenType.IDENTIFIER,
            TokenType.SLASH,
            TokenType.IDENTIFIER,
        ]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test line and column tracking."""

    def test_columns_on_first_line(self):
        """Columns are 1-indexed."""
        tokens = tokenize("let x = 5")
        assert [t.column for t in tokens] == [1, 5, 7, 9]
        assert all(t.line == 1 for t in tokens)

    def test_lines_and_columns_after_newline(self):
        """A newline bumps the line and resets the column."""
        tokens = tokenize("a\n  b\n\nc")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (4, 1)]

    def test_position_after_block_comment(self):
        """Lines inside block comments are counted."""
        tokens = tokenize("/* one\ntwo */ x")
        assert tokens[0].line == 2
        assert tokens[0].column == 8

    def test_token_location(self):
        """Tokens expose a SourceLocation with the filename."""
        token = Lexer("\n  y", "prog.zn").next_token()
        assert str(token.location) == "prog.zn:2:3"


# =============================================================================
# Token Formatting Tests
# =============================================================================

class TestTokenFormatting:
    """Test Token string representations."""

    def test_str_for_literal_tokens(self):
        """Literal tokens render with their value."""
        assert str(Token(TokenType.IDENTIFIER, "x")) == "IDENTIFIER('x')"
        assert str(Token(TokenType.INTEGER, 5)) == "INTEGER(5)"

    def test_str_for_plain_tokens(self):
        """Keywords and punctuation render as their type name."""
        assert str(Token(TokenType.LBRACE, "{")) == "LBRACE"
        assert str(Token(TokenType.EOF, None)) == "EOF"

    def test_repr_includes_position(self):
        """repr shows type, value and position for debugging."""
        assert repr(Token(TokenType.IDENTIFIER, "x", 3, 4)) == "Token(IDENTIFIER, 'x', 3:4)"
        assert repr(Token(TokenType.EOF, None, 1, 2)) == "Token(EOF, 1:2)"
