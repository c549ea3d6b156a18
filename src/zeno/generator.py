"""
Rust Code Generator for Zeno
============================

This module lowers a Zeno Program AST into the source of a single Rust
program. All top-level statements become the body of `fn main()`.

Lowering Strategy
-----------------
The generator is a straight tree walk with no symbol table. Zeno and
Rust share most of their statement forms, so the lowering is nearly
one-to-one:

| Zeno                      | Rust                              |
|---------------------------|-----------------------------------|
| let x = e                 | let x = e;                        |
| mut x: int = e            | let mut x: i64 = e;               |
| x = e                     | x = e;                            |
| if c { } else if d { }    | if c { } else if d { }            |
| while c { }               | while c { }                       |
| loop { }                  | loop { }                          |
| for init; c; step { }     | init; while c { ...; step; }      |
| print(e) / println(e)     | print!("{}", e); / println!(...)  |

Expressions are emitted fully parenthesized, so Rust's own operator
precedence never matters: `1 + 2 * 3` becomes `(1_i64 + (2_i64 * 3_i64))`.

Literals carry explicit type suffixes (`_i64`, `_f64`) so that rustc
never has to infer a numeric type.

Type Mapping
------------
| Zeno     | Rust     |
|----------|----------|
| int      | i64      |
| float    | f64      |
| bool     | bool     |
| string   | String   |

Unknown type names are passed through unchanged and left for rustc to
judge.

Example output:
    fn main() {
        let mut i = 0_i64;
        while (i < 3_i64) {
            println!("{}", i);
            i = (i + 1_i64);
        }
    }
"""

import logging
from decimal import Decimal
from typing import Optional

from zeno.ast import (
    Assignment,
    BinaryOp,
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
    While,
)
from zeno.errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "    "

TYPE_MAP: dict[str, str] = {
    "int": "i64",
    "float": "f64",
    "bool": "bool",
    "string": "String",
}

# Characters with a short backslash escape in Rust string literals
RUST_ESCAPES: dict[str, str] = {
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "'": "\\'",
    '"': '\\"',
    "\\": "\\\\",
}


# =============================================================================
# Literal Helpers
# =============================================================================

def map_type(name: str) -> str:
    """Map a Zeno type name to its Rust spelling."""
    return TYPE_MAP.get(name, name)


def escape_rust_string(value: str) -> str:
    """
    Escape a string for a Rust "..." literal.

    Mirrors Rust's `str::escape_default`: short escapes for tab, CR, LF,
    quotes and backslash; printable ASCII as-is; everything else as
    `\\u{hex}`.
    """
    out = []
    for ch in value:
        if ch in RUST_ESCAPES:
            out.append(RUST_ESCAPES[ch])
        elif 0x20 <= ord(ch) <= 0x7E:
            out.append(ch)
        else:
            out.append(f"\\u{{{ord(ch):x}}}")
    return "".join(out)


def format_float(value: float) -> str:
    """
    Format a float as a Rust decimal literal body (without suffix).

    Integral values keep an explicit `.0`; exponent notation is
    expanded to plain positional digits.
    """
    if value == int(value):
        return f"{int(value)}.0"
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates Rust source from a Zeno AST.

    Attributes:
        indent: The string used for one level of indentation
    """

    def __init__(self, indent: str = DEFAULT_INDENT):
        self.indent = indent
        self._output: list[str] = []
        self._level = 0

    def generate(self, program: Program) -> str:
        """
        Generate a complete Rust program.

        Args:
            program: The root AST node

        Returns:
            Rust source text ending with a newline

        Raises:
            GenerationError: On a node type with no Rust lowering
        """
        self._output = []
        self._level = 0

        self._emit("fn main() {")
        self._level = 1
        for statement in program.statements:
            self._generate_statement(statement)
        self._level = 0
        self._emit("}")

        rust_source = "\n".join(self._output) + "\n"
        logger.debug(
            f"Generated {len(self._output)} lines of Rust "
            f"from {len(program.statements)} statements"
        )
        return rust_source

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, line: str) -> None:
        """Emit a line at the current indentation level."""
        self._output.append(f"{self.indent * self._level}{line}")

    def _generate_body(self, block: Block) -> None:
        """Emit a block's statements one level deeper (braces not included)."""
        self._level += 1
        for statement in block.statements:
            self._generate_statement(statement)
        self._level -= 1

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statement(self, stmt: Statement) -> None:
        """Generate code for any statement."""
        if isinstance(stmt, LetDecl):
            self._generate_let(stmt)
        elif isinstance(stmt, Assignment):
            self._emit(self._assignment_str(stmt))
        elif isinstance(stmt, ExprStatement):
            self._emit(f"{self._expr(stmt.expression)};")
        elif isinstance(stmt, If):
            self._generate_if(stmt)
        elif isinstance(stmt, While):
            self._emit(f"while {self._expr(stmt.condition)} {{")
            self._generate_body(stmt.body)
            self._emit("}")
        elif isinstance(stmt, Loop):
            self._emit("loop {")
            self._generate_body(stmt.body)
            self._emit("}")
        elif isinstance(stmt, For):
            self._generate_for(stmt)
        elif isinstance(stmt, Print):
            macro = "println!" if stmt.newline else "print!"
            self._emit(f'{macro}("{{}}", {self._expr(stmt.expression)});')
        elif isinstance(stmt, Break):
            self._emit("break;")
        elif isinstance(stmt, Continue):
            self._emit("continue;")
        else:
            raise GenerationError(
                f"Unsupported statement type: {stmt.__class__.__name__}",
                location=getattr(stmt, "location", None),
            )

    def _generate_let(self, stmt: LetDecl) -> None:
        keyword = "let mut" if stmt.mutable else "let"
        annotation = f": {map_type(stmt.type_annotation)}" if stmt.type_annotation else ""
        self._emit(f"{keyword} {stmt.name}{annotation} = {self._expr(stmt.value)};")

    def _assignment_str(self, stmt: Assignment) -> str:
        return f"{stmt.name} = {self._expr(stmt.value)};"

    def _generate_if(self, stmt: If) -> None:
        self._emit(f"if {self._expr(stmt.condition)} {{")
        self._generate_body(stmt.then_block)
        for condition, block in stmt.else_if_blocks:
            self._emit(f"}} else if {self._expr(condition)} {{")
            self._generate_body(block)
        if stmt.else_block is not None:
            self._emit("} else {")
            self._generate_body(stmt.else_block)
        self._emit("}")

    def _generate_for(self, stmt: For) -> None:
        """
        Desugar a C-style for loop into a while loop.

            for init; cond; step { body }

        becomes

            init
            while cond {
                body
                step;
            }

        The initializer is emitted at the for's own level, so a `let`
        there stays visible after the loop. A `continue` in the body
        skips the step, as the lowering is purely textual.
        """
        if stmt.initializer is not None:
            self._generate_statement(stmt.initializer)

        condition = self._expr(stmt.condition) if stmt.condition is not None else "true"
        self._emit(f"while {condition} {{")
        self._generate_body(stmt.body)

        if stmt.increment is not None:
            self._level += 1
            if isinstance(stmt.increment, Assignment):
                self._emit(self._assignment_str(stmt.increment))
            else:
                self._emit(f"{self._expr(stmt.increment)};")
            self._level -= 1

        self._emit("}")

    # =========================================================================
    # Expressions
    # =========================================================================

    def _expr(self, expr: Optional[Expression]) -> str:
        """Render an expression as Rust source text."""
        if isinstance(expr, IntegerLiteral):
            return f"{expr.value}_i64"
        if isinstance(expr, FloatLiteral):
            return f"{format_float(expr.value)}_f64"
        if isinstance(expr, StringLiteral):
            return f'"{escape_rust_string(expr.value)}"'
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryOp):
            # Left-associative chains nest on the left; walk that spine iteratively
            chain = []
            while isinstance(expr, BinaryOp):
                chain.append(expr)
                expr = expr.left
            text = self._expr(expr)
            for node in reversed(chain):
                text = f"({text} {node.operator.value} {self._expr(node.right)})"
            return text
        if isinstance(expr, UnaryOp):
            return f"({expr.operator.value}{self._expr(expr.operand)})"
        if isinstance(expr, Call):
            args = ", ".join(self._expr(arg) for arg in expr.arguments)
            return f"{expr.callee}({args})"
        raise GenerationError(
            f"Unsupported expression type: {expr.__class__.__name__}",
            location=getattr(expr, "location", None),
        )


def generate(program: Program, indent: str = DEFAULT_INDENT) -> str:
    """Generate Rust source for a program with a fresh CodeGenerator."""
    return CodeGenerator(indent).generate(program)
