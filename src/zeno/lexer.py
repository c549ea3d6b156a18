"""
Zeno Lexer (Tokenizer)
======================

This module implements the lexer for the Zeno language. It converts
source text into a stream of tokens, pulled one at a time by the
parser through next_token().

Token Categories
----------------
- Keywords: let, mut, if, else, loop, while, for, fn, return,
  true, false, print, println, break, continue
- Identifiers: [A-Za-z_][A-Za-z0-9_]*
- Integers: one or more decimal digits
- Floats: digits '.' digits (kept as the raw lexeme)
- Strings: "double quoted"
- Operators: = + - * / % ! == != < <= > >= && ||
- Delimiters: , ; : ( ) { }

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (not nested; an unclosed comment runs
  silently to the end of the source)

Escape Sequences
----------------
\\n (newline), \\t (tab), \\\\ (backslash), \\" (double quote).
Any other escaped character is kept verbatim.

Example Usage
-------------
>>> from zeno.lexer import Lexer
>>> for token in Lexer('let x = 10;').tokenize():
...     print(token)
Token(LET, 'let', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(ASSIGN, '=', 1:7)
Token(INTEGER, 10, 1:9)
Token(SEMICOLON, ';', 1:11)
Token(EOF, 1:12)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto

from zeno.errors import SourceLocation, UnterminatedStringError

logger = logging.getLogger(__name__)

# Sentinel for "no more input"; a NUL in the source also ends the stream
EOF_CHAR = "\0"


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Zeno language.

    Keywords are distinguished from identifiers so the parser can
    dispatch on the type alone.
    """

    # === Meta ===
    EOF = auto()            # End of input
    ILLEGAL = auto()        # Unrecognized character (value holds it)

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable/function names
    INTEGER = auto()        # Integer literal (value is int)
    FLOAT = auto()          # Float literal (value is the raw lexeme)
    STRING = auto()         # String literal (value is post-escape text)

    # === Keywords ===
    LET = auto()            # let
    MUT = auto()            # mut
    IF = auto()             # if
    ELSE = auto()           # else
    LOOP = auto()           # loop
    WHILE = auto()          # while
    FOR = auto()            # for
    FN = auto()             # fn
    RETURN = auto()         # return
    TRUE = auto()           # true
    FALSE = auto()          # false
    PRINT = auto()          # print
    PRINTLN = auto()        # println
    BREAK = auto()          # break
    CONTINUE = auto()       # continue

    # === Operators ===
    ASSIGN = auto()         # =
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    PERCENT = auto()        # %
    BANG = auto()           # !
    EQ = auto()             # ==
    NOT_EQ = auto()         # !=
    LT = auto()             # <
    LTE = auto()            # <=
    GT = auto()             # >
    GTE = auto()            # >=
    AND = auto()            # &&
    OR = auto()             # ||

    # === Delimiters ===
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;
    COLON = auto()          # :
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }


# =============================================================================
# Keyword and Operator Tables
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "let": TokenType.LET,
    "mut": TokenType.MUT,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "loop": TokenType.LOOP,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "fn": TokenType.FN,
    "return": TokenType.RETURN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "print": TokenType.PRINT,
    "println": TokenType.PRINTLN,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
}

# Characters that always form a token on their own
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

# First character -> (single-char type, type when followed by '=')
COMPARISON_TOKENS: dict[str, tuple[TokenType, TokenType]] = {
    "=": (TokenType.ASSIGN, TokenType.EQ),
    "!": (TokenType.BANG, TokenType.NOT_EQ),
    "<": (TokenType.LT, TokenType.LTE),
    ">": (TokenType.GT, TokenType.GTE),
}

# Doubled characters: '&&' and '||'. A lone one is ILLEGAL.
DOUBLED_TOKENS: dict[str, TokenType] = {
    "&": TokenType.AND,
    "|": TokenType.OR,
}

# Token types whose value is part of their identity in messages
LITERAL_TYPES = frozenset({
    TokenType.IDENTIFIER,
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.ILLEGAL,
})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from Zeno source code.

    Attributes:
        type: The TokenType classification
        value: Payload (name, int value, raw float lexeme, string text,
               keyword/operator lexeme, illegal character, or None at EOF)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    def __str__(self) -> str:
        """Short form used inside parser error messages."""
        if self.type in LITERAL_TYPES:
            return f"{self.type.name}({self.value!r})"
        return self.type.name

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_keyword(self) -> bool:
        """Return True if this token is a reserved word."""
        return self.type in KEYWORDS.values()


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Zeno source code.

    The cursor is the classic three-part one: `position` indexes the
    current character, `read_position` the one after it, and `ch` holds
    the current character (EOF_CHAR past the end). Every token-producing
    path leaves the cursor on the character right after its lexeme.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.next_token()        # pull one token
        tokens = lexer.tokenize()         # or drain everything

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Matches Rust's u8::is_ascii_whitespace (no vertical tab)
    WHITESPACE = " \t\n\r\x0c"

    ESCAPE_SEQUENCES = {
        "n": "\n",
        "t": "\t",
        "\\": "\\",
        '"': '"',
    }

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer and read the first character.

        Args:
            source: The Zeno source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        self.position = 0
        self.read_position = 0
        self.ch = EOF_CHAR

        # Location of `ch`; starts one column left of the first character
        self._line = 1
        self._column = 0

        self._read_char()

    # =========================================================================
    # Public Interface
    # =========================================================================

    def next_token(self) -> Token:
        """
        Return the next token, or EOF (repeatedly) once input is exhausted.
        """
        self._skip_whitespace()
        while self._skip_comment():
            pass

        line, column = self._line, self._column
        ch = self.ch

        if ch == EOF_CHAR:
            return self._make_token(TokenType.EOF, None, line, column)

        if ch in COMPARISON_TOKENS:
            single, with_equals = COMPARISON_TOKENS[ch]
            if self._peek_char() == "=":
                self._read_char()
                self._read_char()
                return self._make_token(with_equals, ch + "=", line, column)
            self._read_char()
            return self._make_token(single, ch, line, column)

        if ch in DOUBLED_TOKENS:
            if self._peek_char() == ch:
                self._read_char()
                self._read_char()
                return self._make_token(DOUBLED_TOKENS[ch], ch * 2, line, column)
            self._read_char()
            return self._make_token(TokenType.ILLEGAL, ch, line, column)

        if ch in SINGLE_CHAR_TOKENS:
            self._read_char()
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, line, column)

        if ch == '"':
            return self._read_string(line, column)

        if ch in self.IDENT_START:
            return self._read_identifier(line, column)

        if ch in string.digits:
            return self._read_number(line, column)

        self._read_char()
        return self._make_token(TokenType.ILLEGAL, ch, line, column)

    def tokenize(self) -> list[Token]:
        """
        Drain the token stream into a list ending with EOF.

        Returns:
            All tokens, the last one being EOF

        Raises:
            UnterminatedStringError: If a string literal is never closed
        """
        tokens = []
        while True:
            token = self.next_token()
            if token.type == TokenType.ILLEGAL and token.value == '"':
                raise UnterminatedStringError(
                    token.location,
                    self._source_line(token.line),
                )
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        logger.debug(f"Tokenized {self.filename}: {len(tokens)} tokens")
        return tokens

    def __iter__(self):
        """Iterate over tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _read_char(self) -> None:
        """Advance the cursor by one character, tracking line and column."""
        if self.ch == "\n":
            self._line += 1
            self._column = 0

        if self.read_position >= len(self.source):
            self.ch = EOF_CHAR
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1
        self._column += 1

    def _peek_char(self) -> str:
        """Look at the character after `ch` without advancing."""
        if self.read_position >= len(self.source):
            return EOF_CHAR
        return self.source[self.read_position]

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        line: int,
        column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    def _source_line(self, line: int) -> str:
        """Return the text of a 1-indexed source line (for error context)."""
        lines = self.source.splitlines()
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return ""

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while self.ch in self.WHITESPACE:
            self._read_char()

    def _skip_comment(self) -> bool:
        """
        Skip one comment (and the whitespace after it) if one starts here.

        Returns:
            True if a comment was skipped, so the caller should try again
        """
        if self.ch == "/" and self._peek_char() == "/":
            while self.ch != "\n" and self.ch != EOF_CHAR:
                self._read_char()
            self._skip_whitespace()
            return True

        if self.ch == "/" and self._peek_char() == "*":
            self._read_char()  # consume /
            self._read_char()  # consume *
            while self.ch != EOF_CHAR:
                if self.ch == "*" and self._peek_char() == "/":
                    self._read_char()  # consume *
                    self._read_char()  # consume /
                    break
                self._read_char()
            self._skip_whitespace()
            return True

        return False

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _read_identifier(self, line: int, column: int) -> Token:
        """Scan an identifier, mapping reserved words to keyword tokens."""
        start = self.position
        while self.ch in self.IDENT_CHARS:
            self._read_char()
        name = self.source[start:self.position]

        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, line, column)

    def _read_number(self, line: int, column: int) -> Token:
        """
        Scan an integer or float literal.

        A '.' only belongs to the number when a digit follows it, so
        `1.` lexes as INTEGER(1) followed by ILLEGAL('.').
        """
        start = self.position
        while self.ch in string.digits:
            self._read_char()

        is_float = False
        if self.ch == "." and self._peek_char() in string.digits:
            is_float = True
            self._read_char()  # consume '.'
            while self.ch in string.digits:
                self._read_char()

        lexeme = self.source[start:self.position]
        if is_float:
            return self._make_token(TokenType.FLOAT, lexeme, line, column)
        try:
            value = int(lexeme)
        except ValueError:
            # Past the interpreter's digit limit; the parser rejects it as out of range
            value = lexeme
        return self._make_token(TokenType.INTEGER, value, line, column)

    def _read_string(self, line: int, column: int) -> Token:
        """
        Scan a double-quoted string literal.

        Returns ILLEGAL('"') if the source ends before the closing quote.
        """
        self._read_char()  # consume opening "

        chars = []
        while self.ch != '"':
            if self.ch == EOF_CHAR:
                return self._make_token(TokenType.ILLEGAL, '"', line, column)
            if self.ch == "\\":
                self._read_char()  # consume backslash
                if self.ch == EOF_CHAR:
                    return self._make_token(TokenType.ILLEGAL, '"', line, column)
                chars.append(self.ESCAPE_SEQUENCES.get(self.ch, self.ch))
            else:
                chars.append(self.ch)
            self._read_char()

        self._read_char()  # consume closing "
        return self._make_token(TokenType.STRING, "".join(chars), line, column)
