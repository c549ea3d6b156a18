"""
Zeno Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types built by the Zeno parser and
consumed by the Rust code generator.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node containing the top-level statements
├── Block - brace-delimited statement list
├── Statements
│   ├── LetDecl - let/mut variable declaration
│   ├── Assignment - name = value
│   ├── ExprStatement - expression used as a statement
│   ├── If - if / else if / else chain
│   ├── While - while loop
│   ├── Loop - infinite loop
│   ├── For - C-style for loop (desugared at emission)
│   ├── Print - print(...) / println(...)
│   ├── Break - break statement
│   └── Continue - continue statement
└── Expressions
    ├── IntegerLiteral - 64-bit signed integer constant
    ├── FloatLiteral - 64-bit float constant
    ├── StringLiteral - string constant
    ├── BooleanLiteral - true / false
    ├── Identifier - variable reference
    ├── BinaryOp - binary operators
    ├── UnaryOp - unary operators (! and -)
    └── Call - call of a named function

Design Notes
------------
- All nodes are dataclasses; the tree has no back-pointers or sharing
- Each node stores its source location, excluded from equality so two
  parses of equivalent source compare equal
- Nodes are created by the parser and never mutated afterwards
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from zeno.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Program and Block
# =============================================================================

@dataclass
class Program(ASTNode):
    """
    Root node of the AST: the top-level statements, in source order.
    """
    statements: list[Statement] = field(default_factory=list)


@dataclass
class Block(ASTNode):
    """A `{ ... }` statement list. Empty statements contribute nothing."""
    statements: list[Statement] = field(default_factory=list)


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types; the value is the source (and Rust) spelling."""
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    AND = "&&"
    OR = "||"


class UnaryOperator(Enum):
    """Unary operator types."""
    NOT = "!"
    NEGATE = "-"


@dataclass
class IntegerLiteral(Expression):
    value: int = 0


@dataclass
class FloatLiteral(Expression):
    value: float = 0.0


@dataclass
class StringLiteral(Expression):
    value: str = ""


@dataclass
class BooleanLiteral(Expression):
    value: bool = False


@dataclass
class Identifier(Expression):
    name: str = ""


@dataclass
class BinaryOp(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        left: Left operand expression
        operator: The binary operator
        right: Right operand expression
    """
    left: Expression = None
    operator: BinaryOperator = None
    right: Expression = None


@dataclass
class UnaryOp(Expression):
    """
    Prefix operation expression (op operand).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator = None
    operand: Expression = None


@dataclass
class Call(Expression):
    """
    Function call. The callee is always a plain name.

    Attributes:
        callee: Name of the called function
        arguments: Argument expressions in source order
    """
    callee: str = ""
    arguments: list[Expression] = field(default_factory=list)


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class LetDecl(Statement):
    """
    Variable declaration.

    Represents declarations like:
        let x = 10
        mut total: int = 0;

    Attributes:
        name: Variable name
        type_annotation: Type name as written in the source, if any
        mutable: True for `mut` declarations (`let mut` in Rust)
        value: Initializer expression
    """
    name: str = ""
    type_annotation: Optional[str] = None
    mutable: bool = False
    value: Expression = None


@dataclass
class Assignment(Statement):
    """Assignment to an existing variable: name = value."""
    name: str = ""
    value: Expression = None


@dataclass
class ExprStatement(Statement):
    """Expression used as a statement, e.g. a bare call."""
    expression: Expression = None


@dataclass
class If(Statement):
    """
    If statement with optional else-if arms and else block.

    Attributes:
        condition: The condition expression
        then_block: Block executed if condition is true
        else_if_blocks: (condition, block) pairs in source order
        else_block: Optional final else block
    """
    condition: Expression = None
    then_block: Block = None
    else_if_blocks: list[tuple[Expression, Block]] = field(default_factory=list)
    else_block: Optional[Block] = None


@dataclass
class While(Statement):
    condition: Expression = None
    body: Block = None


@dataclass
class Loop(Statement):
    body: Block = None


@dataclass
class For(Statement):
    """
    C-style for loop.

    Attributes:
        initializer: LetDecl, Assignment or ExprStatement run once (optional)
        condition: Loop condition (absent means always true)
        increment: Expression or Assignment run after each iteration
        body: Loop body
    """
    initializer: Optional[Statement] = None
    condition: Optional[Expression] = None
    increment: Optional[Union[Expression, Assignment]] = None
    body: Block = None


@dataclass
class Print(Statement):
    """
    print(expr) or println(expr).

    Attributes:
        expression: The single value to print
        newline: True for println
    """
    expression: Expression = None
    newline: bool = False


@dataclass
class Break(Statement):
    pass


@dataclass
class Continue(Statement):
    pass


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node's class name to a `visit_<ClassName>` method,
    falling back to generic_visit which walks all child nodes.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_Call(self, node):
                self.calls += 1
                self.generic_visit(node)

        counter = CallCounter()
        counter.visit(program)
    """

    def visit(self, node: ASTNode):
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node, including those inside lists and pairs."""
        for value in node.__dict__.values():
            self._visit_value(value)

    def _visit_value(self, value) -> None:
        if isinstance(value, ASTNode):
            self.visit(value)
        elif isinstance(value, (list, tuple)):
            for item in value:
                self._visit_value(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging (`zenoc --ast`).

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _visit_nested(self, label: str, node: ASTNode) -> None:
        self._emit(label)
        self._indent()
        self.visit(node)
        self._dedent()

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_Block(self, node: Block):
        self._emit("Block")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_LetDecl(self, node: LetDecl):
        keyword = "Mut" if node.mutable else "Let"
        annotation = f": {node.type_annotation}" if node.type_annotation else ""
        self._emit(f"{keyword} {node.name}{annotation} = {self._expr_str(node.value)}")

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Assign {node.name} = {self._expr_str(node.value)}")

    def visit_ExprStatement(self, node: ExprStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_If(self, node: If):
        self._emit(f"If {self._expr_str(node.condition)}")
        self._indent()
        self._visit_nested("Then:", node.then_block)
        for condition, block in node.else_if_blocks:
            self._visit_nested(f"Else If {self._expr_str(condition)}:", block)
        if node.else_block is not None:
            self._visit_nested("Else:", node.else_block)
        self._dedent()

    def visit_While(self, node: While):
        self._emit(f"While {self._expr_str(node.condition)}")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_Loop(self, node: Loop):
        self._emit("Loop")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_For(self, node: For):
        self._emit("For")
        self._indent()
        if node.initializer is not None:
            self._visit_nested("Init:", node.initializer)
        self._emit(f"Cond: {self._expr_str(node.condition) if node.condition else 'true'}")
        if isinstance(node.increment, Assignment):
            self._visit_nested("Step:", node.increment)
        elif node.increment is not None:
            self._emit(f"Step: {self._expr_str(node.increment)}")
        self.visit(node.body)
        self._dedent()

    def visit_Print(self, node: Print):
        name = "Println" if node.newline else "Print"
        self._emit(f"{name} {self._expr_str(node.expression)}")

    def visit_Break(self, node: Break):
        self._emit("Break")

    def visit_Continue(self, node: Continue):
        self._emit("Continue")

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to a compact, fully parenthesized string."""
        if expr is None:
            return ""
        if isinstance(expr, IntegerLiteral):
            return str(expr.value)
        if isinstance(expr, FloatLiteral):
            return repr(expr.value)
        if isinstance(expr, StringLiteral):
            return f"{expr.value!r}"
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryOp):
            chain = []
            while isinstance(expr, BinaryOp):
                chain.append(expr)
                expr = expr.left
            text = self._expr_str(expr)
            for node in reversed(chain):
                text = f"({text} {node.operator.value} {self._expr_str(node.right)})"
            return text
        if isinstance(expr, UnaryOp):
            return f"({expr.operator.value}{self._expr_str(expr.operand)})"
        if isinstance(expr, Call):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{expr.callee}({args})"
        return f"<{expr.__class__.__name__}>"
