"""
Zeno Parser
===========

This module implements the Zeno parser: a recursive descent parser for
statements combined with a Pratt (precedence climbing) parser for
expressions. It pulls tokens from a Lexer one at a time and builds a
Program AST.

Grammar (Informal EBNF)
-----------------------
program     ::= statement*
statement   ::= let_decl | assign | if | while | loop | for
              | print | break | continue | expr_stmt | ';'
let_decl    ::= ('let' 'mut'? | 'mut') IDENT (':' IDENT)? '=' expr ';'?
assign      ::= IDENT '=' expr ';'?
if          ::= 'if' expr block ('else' 'if' expr block)* ('else' block)?
while       ::= 'while' expr block
loop        ::= 'loop' block
for         ::= 'for' stmt? ';' expr? ';' (assign | expr)? block
print       ::= ('print' | 'println') '(' expr ')' ';'?
break       ::= 'break' ';'?
continue    ::= 'continue' ';'?
expr_stmt   ::= expr ';'?
block       ::= '{' statement* '}'

Conditions take no surrounding parentheses; `if (x > 1) {` still parses
because `(x > 1)` is a grouped expression.

Expression Precedence (lowest to highest)
-----------------------------------------
1. LOWEST
2. OR            ||
3. AND           &&
4. EQUALS        == !=
5. LESSGREATER   < <= > >=
6. SUM           + -
7. PRODUCT       * / %
8. PREFIX        -x !x
9. CALL          f(args)

Cursor Discipline
-----------------
The parser keeps two tokens: `current_token` and `peek_token`. Every
production is entered with its first token current and returns with its
last token current. The statement loops (program and block) advance one
token after each statement.

Error Handling
--------------
A failed production records an error and returns None. The enclosing
production propagates None, and the statement loop skips one token and
tries again, so one pass reports every error it can recover from.
parse_program() raises ZenoParseError if anything was recorded.

Blocks and sub-expressions together nest at most MAX_NESTING_DEPTH levels
deep. Anything deeper is reported as a syntax error rather than exhausting
the interpreter stack.

Example Usage
-------------
>>> from zeno.lexer import Lexer
>>> from zeno.parser import Parser
>>> program = Parser(Lexer("let x = 1 + 2")).parse_program()
>>> program.statements[0].name
'x'
"""

import logging
from enum import IntEnum
from typing import Callable, Optional, Union

from zeno.ast import (
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    BooleanLiteral,
    Break,
    Call,
    Continue,
    Expression,
    ExprStatement,
    FloatLiteral,
    For,
    Identifier,
    If,
    IntegerLiteral,
    LetDecl,
    Loop,
    Print,
    Program,
    Statement,
    StringLiteral,
    UnaryOp,
    UnaryOperator,
    While,
)
from zeno.errors import ErrorCollector, ZenoParseError, ZenoSyntaxError
from zeno.lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

# Combined depth of nested blocks and sub-expressions
MAX_NESTING_DEPTH = 200


# =============================================================================
# Operator Precedence
# =============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    OR = 2
    AND = 3
    EQUALS = 4
    LESSGREATER = 5
    SUM = 6
    PRODUCT = 7
    PREFIX = 8
    CALL = 9


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.OR: Precedence.OR,
    TokenType.AND: Precedence.AND,
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.LTE: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.GTE: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.STAR: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.PERCENT: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

BINARY_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: BinaryOperator.PLUS,
    TokenType.MINUS: BinaryOperator.MINUS,
    TokenType.STAR: BinaryOperator.MULTIPLY,
    TokenType.SLASH: BinaryOperator.DIVIDE,
    TokenType.PERCENT: BinaryOperator.MODULO,
    TokenType.EQ: BinaryOperator.EQ,
    TokenType.NOT_EQ: BinaryOperator.NOT_EQ,
    TokenType.LT: BinaryOperator.LT,
    TokenType.LTE: BinaryOperator.LTE,
    TokenType.GT: BinaryOperator.GT,
    TokenType.GTE: BinaryOperator.GTE,
    TokenType.AND: BinaryOperator.AND,
    TokenType.OR: BinaryOperator.OR,
}

UNARY_OPERATORS: dict[TokenType, UnaryOperator] = {
    TokenType.BANG: UnaryOperator.NOT,
    TokenType.MINUS: UnaryOperator.NEGATE,
}

# Statements that may be followed by an optional ';'
SEMICOLON_TERMINATED = (LetDecl, Assignment, ExprStatement, Print, Break, Continue)

# Statements allowed in a for-loop initializer
FOR_INITIALIZERS = (LetDecl, Assignment, ExprStatement)


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Zeno parser producing a Program AST.

    Attributes:
        lexer: The token source (anything with a next_token() method)
        current_token: The token being examined
        peek_token: The token after current_token
    """

    def __init__(self, lexer: Lexer, source_lines: Optional[list[str]] = None):
        """
        Initialize the parser and fill the two-token window.

        Args:
            lexer: Lexer to pull tokens from
            source_lines: Original source lines for error context
        """
        self.lexer = lexer
        self.source_lines = source_lines
        if self.source_lines is None and hasattr(lexer, "source"):
            self.source_lines = lexer.source.splitlines()

        self._errors = ErrorCollector()
        self._depth = 0

        self._prefix_parsers: dict[TokenType, Callable[[], Optional[Expression]]] = {
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.FLOAT: self._parse_float_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
        }

        self.current_token: Token = Token(TokenType.EOF, None)
        self.peek_token: Token = Token(TokenType.EOF, None)
        self._next_token()
        self._next_token()

    @property
    def errors(self) -> list[str]:
        """The error messages recorded so far, in order."""
        return self._errors.messages()

    @property
    def diagnostics(self) -> list[ZenoSyntaxError]:
        """The recorded errors as ZenoSyntaxError objects with locations."""
        return list(self._errors.errors)

    def parse_program(self) -> Program:
        """
        Parse tokens until EOF.

        Returns:
            The Program AST

        Raises:
            ZenoParseError: If any syntax error was recorded
        """
        program = Program(location=self.current_token.location)

        while not self._current_is(TokenType.EOF):
            statement = self._parse_statement()
            if statement is not None:
                program.statements.append(statement)
            self._next_token()

        if self._errors.has_errors():
            logger.debug(f"Parse failed with {self._errors.error_count()} error(s)")
            raise ZenoParseError(self._errors.errors)

        logger.debug(f"Parsed {len(program.statements)} top-level statements")
        return program

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _next_token(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def _current_is(self, token_type: TokenType) -> bool:
        return self.current_token.type == token_type

    def _peek_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: TokenType) -> bool:
        """
        Advance if the peek token has the given type, else record an error.

        Returns:
            True if the token matched and is now current
        """
        if self._peek_is(token_type):
            self._next_token()
            return True
        self._peek_error(token_type.name)
        return False

    def _expect_block_start(self, context: str) -> bool:
        """Like _expect_peek(LBRACE) but with a message naming the construct."""
        if self._peek_is(TokenType.LBRACE):
            self._next_token()
            return True
        self._error(
            f"Expected '{{' {context}, got {self.peek_token}",
            self.peek_token,
        )
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current_token.type, Precedence.LOWEST)

    # =========================================================================
    # Error Reporting
    # =========================================================================

    def _error(self, message: str, token: Optional[Token] = None) -> None:
        token = token or self.current_token
        location = token.location
        source_line = None
        if self.source_lines and 1 <= location.line <= len(self.source_lines):
            source_line = self.source_lines[location.line - 1]
        self._errors.add(ZenoSyntaxError(message, location, source_line=source_line))

    def _peek_error(self, expected: str) -> None:
        self._error(
            f"expected next token to be {expected}, got {self.peek_token} instead. "
            f"(current: {self.current_token})",
            self.peek_token,
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Optional[Statement]:
        """
        Parse one statement starting at the current token.

        Entry: current is the statement's first token.
        Exit: current is its last token (including an optional ';').
        Returns None for an empty statement or after an error.
        """
        token_type = self.current_token.type

        if token_type in (TokenType.LET, TokenType.MUT):
            statement = self._parse_let_statement()
        elif token_type == TokenType.IF:
            statement = self._parse_if_statement()
        elif token_type == TokenType.LOOP:
            statement = self._parse_loop_statement()
        elif token_type == TokenType.WHILE:
            statement = self._parse_while_statement()
        elif token_type == TokenType.FOR:
            statement = self._parse_for_statement()
        elif token_type in (TokenType.PRINT, TokenType.PRINTLN):
            statement = self._parse_print_statement()
        elif token_type == TokenType.BREAK:
            statement = Break(location=self.current_token.location)
        elif token_type == TokenType.CONTINUE:
            statement = Continue(location=self.current_token.location)
        elif token_type == TokenType.SEMICOLON:
            return None
        elif token_type == TokenType.IDENTIFIER and self._peek_is(TokenType.ASSIGN):
            statement = self._parse_assignment()
        else:
            statement = self._parse_expression_statement()

        if isinstance(statement, SEMICOLON_TERMINATED) and self._peek_is(TokenType.SEMICOLON):
            self._next_token()
        return statement

    def _parse_let_statement(self) -> Optional[LetDecl]:
        """
        Entry: current is 'let' or 'mut'.
        Exit: current is the last token of the initializer.
        """
        start = self.current_token
        mutable = start.type == TokenType.MUT
        if not mutable and self._peek_is(TokenType.MUT):
            # `let mut x` is the same declaration as `mut x`
            self._next_token()
            mutable = True

        if not self._expect_peek(TokenType.IDENTIFIER):
            return None
        name = self.current_token.value

        type_annotation = None
        if self._peek_is(TokenType.COLON):
            self._next_token()
            if not self._expect_peek(TokenType.IDENTIFIER):
                return None
            type_annotation = self.current_token.value

        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self._error(f"Expected expression after '=' for variable '{name}'")
            return None

        return LetDecl(
            name=name,
            type_annotation=type_annotation,
            mutable=mutable,
            value=value,
            location=start.location,
        )

    def _parse_assignment(self) -> Optional[Assignment]:
        """
        Entry: current is the target IDENTIFIER and peek is '='.
        Exit: current is the last token of the value.
        """
        start = self.current_token
        name = start.value
        self._next_token()  # now on '='
        self._next_token()  # now on first token of the value

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self._error(f"Expected expression after '=' for assignment to '{name}'")
            return None
        return Assignment(name=name, value=value, location=start.location)

    def _parse_expression_statement(self) -> Optional[ExprStatement]:
        start = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        return ExprStatement(expression=expression, location=start.location)

    def _parse_block(self) -> Optional[Block]:
        """
        Entry: current is '{'.
        Exit: current is the matching '}'.
        """
        if self._depth >= MAX_NESTING_DEPTH:
            self._error("Block nested too deeply")
            return None

        block = Block(location=self.current_token.location)
        self._next_token()

        self._depth += 1
        while not self._current_is(TokenType.RBRACE) and not self._current_is(TokenType.EOF):
            statement = self._parse_statement()
            if statement is not None:
                block.statements.append(statement)
            self._next_token()
        self._depth -= 1

        if not self._current_is(TokenType.RBRACE):
            self._error(f"Unterminated block: expected '}}', got {self.current_token}")
            return None
        return block

    def _parse_if_statement(self) -> Optional[If]:
        """
        Entry: current is 'if'.
        Exit: current is the '}' of the last block in the chain.
        """
        start = self.current_token
        self._next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_block_start("after if condition"):
            return None
        then_block = self._parse_block()
        if then_block is None:
            return None

        statement = If(condition=condition, then_block=then_block, location=start.location)

        while self._peek_is(TokenType.ELSE):
            self._next_token()  # now on 'else'

            if self._peek_is(TokenType.IF):
                self._next_token()  # now on 'if'
                self._next_token()  # now on first token of the condition
                else_if_condition = self.parse_expression(Precedence.LOWEST)
                if else_if_condition is None:
                    return None
                if not self._expect_block_start("after else if condition"):
                    return None
                else_if_block = self._parse_block()
                if else_if_block is None:
                    return None
                statement.else_if_blocks.append((else_if_condition, else_if_block))
            else:
                if not self._expect_block_start("for else block"):
                    return None
                statement.else_block = self._parse_block()
                if statement.else_block is None:
                    return None
                break

        return statement

    def _parse_loop_statement(self) -> Optional[Loop]:
        start = self.current_token
        if not self._expect_block_start("after 'loop'"):
            return None
        body = self._parse_block()
        if body is None:
            return None
        return Loop(body=body, location=start.location)

    def _parse_while_statement(self) -> Optional[While]:
        start = self.current_token
        self._next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_block_start("after while condition"):
            return None
        body = self._parse_block()
        if body is None:
            return None
        return While(condition=condition, body=body, location=start.location)

    def _parse_for_statement(self) -> Optional[For]:
        """
        Parse `for init? ; cond? ; step? { ... }`.

        Entry: current is 'for'.
        Exit: current is the '}' closing the body.

        The two header semicolons are mandatory. The initializer goes
        through _parse_statement, which may already have consumed the
        first ';' as its optional terminator.
        """
        start = self.current_token
        self._next_token()

        initializer = None
        if not self._current_is(TokenType.SEMICOLON):
            initializer = self._parse_statement()
            if initializer is None:
                return None
            if not isinstance(initializer, FOR_INITIALIZERS):
                self._error(
                    f"Invalid for loop initializer: {initializer.__class__.__name__}",
                    start,
                )
                return None
            if not self._current_is(TokenType.SEMICOLON):
                if not self._peek_is(TokenType.SEMICOLON):
                    self._error(
                        f"Expected ';' after for loop initializer, "
                        f"got {self.current_token} (peek: {self.peek_token})"
                    )
                    return None
                self._next_token()
        self._next_token()  # past the first ';'

        condition = None
        if not self._current_is(TokenType.SEMICOLON):
            condition = self.parse_expression(Precedence.LOWEST)
            if condition is None:
                return None
            if not self._peek_is(TokenType.SEMICOLON):
                self._error(
                    f"Expected ';' after for loop condition, "
                    f"got {self.current_token} (peek: {self.peek_token})"
                )
                return None
            self._next_token()
        self._next_token()  # past the second ';'

        increment: Optional[Union[Expression, Assignment]] = None
        if not self._current_is(TokenType.LBRACE):
            if self._current_is(TokenType.IDENTIFIER) and self._peek_is(TokenType.ASSIGN):
                increment = self._parse_assignment()
            else:
                increment = self.parse_expression(Precedence.LOWEST)
            if increment is None:
                return None
            if not self._peek_is(TokenType.LBRACE):
                self._error(
                    f"Expected '{{' for for-loop body, "
                    f"got {self.current_token} (peek: {self.peek_token})",
                    self.peek_token,
                )
                return None
            self._next_token()

        body = self._parse_block()
        if body is None:
            return None

        return For(
            initializer=initializer,
            condition=condition,
            increment=increment,
            body=body,
            location=start.location,
        )

    def _parse_print_statement(self) -> Optional[Print]:
        """
        Entry: current is 'print' or 'println'.
        Exit: current is the closing ')'.
        """
        start = self.current_token
        newline = start.type == TokenType.PRINTLN

        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        return Print(expression=expression, newline=newline, location=start.location)

    # =========================================================================
    # Expressions (Pratt parser)
    # =========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """
        Parse an expression whose operators all bind tighter than `precedence`.

        Entry: current is the expression's first token.
        Exit: current is its last token.
        """
        prefix = self._prefix_parsers.get(self.current_token.type)
        if prefix is None:
            self._error(
                f"No prefix parse function for {self.current_token} found. "
                f"Peek: {self.peek_token}"
            )
            return None
        if self._depth >= MAX_NESTING_DEPTH:
            self._error("Expression nested too deeply")
            return None

        self._depth += 1
        left = prefix()

        while not self._peek_is(TokenType.SEMICOLON) and precedence < self._peek_precedence():
            if left is None:
                break
            peek_type = self.peek_token.type
            self._next_token()
            if peek_type == TokenType.LPAREN:
                left = self._parse_call_expression(left)
            else:
                left = self._parse_infix_expression(left)

        self._depth -= 1
        return left

    def _parse_identifier(self) -> Identifier:
        return Identifier(name=self.current_token.value, location=self.current_token.location)

    def _parse_integer_literal(self) -> Optional[IntegerLiteral]:
        token = self.current_token
        if not isinstance(token.value, int) or not I64_MIN <= token.value <= I64_MAX:
            self._error(f"Could not parse integer string '{token.value}'")
            return None
        return IntegerLiteral(value=token.value, location=token.location)

    def _parse_float_literal(self) -> Optional[FloatLiteral]:
        token = self.current_token
        try:
            value = float(token.value)
        except (TypeError, ValueError):
            value = None
        if value is None or value in (float("inf"), float("-inf")) or value != value:
            self._error(f"Could not parse float string '{token.value}'")
            return None
        return FloatLiteral(value=value, location=token.location)

    def _parse_string_literal(self) -> StringLiteral:
        return StringLiteral(value=self.current_token.value, location=self.current_token.location)

    def _parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(
            value=self._current_is(TokenType.TRUE),
            location=self.current_token.location,
        )

    def _parse_prefix_expression(self) -> Optional[UnaryOp]:
        """
        Entry: current is '!' or '-'.
        Exit: current is the last token of the operand.
        """
        start = self.current_token
        operator = UNARY_OPERATORS[start.type]
        self._next_token()

        operand = self.parse_expression(Precedence.PREFIX)
        if operand is None:
            return None
        return UnaryOp(operator=operator, operand=operand, location=start.location)

    def _parse_infix_expression(self, left: Expression) -> Optional[BinaryOp]:
        """
        Entry: current is the binary operator.
        Exit: current is the last token of the right operand.
        """
        operator = BINARY_OPERATORS[self.current_token.type]
        precedence = self._current_precedence()
        self._next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return BinaryOp(left=left, operator=operator, right=right, location=left.location)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        """
        Entry: current is '('.
        Exit: current is the matching ')'.
        """
        self._next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_call_expression(self, callee: Expression) -> Optional[Call]:
        """
        Entry: current is the '(' after the callee.
        Exit: current is the closing ')'.
        """
        if not isinstance(callee, Identifier):
            self._error(f"Expected function name (identifier) for call, got {callee}")
            return None

        arguments: list[Expression] = []
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return Call(callee=callee.name, arguments=arguments, location=callee.location)

        self._next_token()
        argument = self.parse_expression(Precedence.LOWEST)
        if argument is None:
            return None
        arguments.append(argument)

        while self._peek_is(TokenType.COMMA):
            self._next_token()  # now on ','
            self._next_token()  # now on first token of the next argument
            argument = self.parse_expression(Precedence.LOWEST)
            if argument is None:
                return None
            arguments.append(argument)

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return Call(callee=callee.name, arguments=arguments, location=callee.location)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Parse Zeno source code into an AST.

    Raises:
        ZenoParseError: If the source has syntax errors
    """
    return Parser(Lexer(source, filename)).parse_program()
