"""
Zeno - A Small Language Transpiled to Rust
==========================================

This package implements a transpiler for Zeno, a small imperative
language with 64-bit integers, floats, booleans and strings, structured
control flow and console output. Zeno programs are translated into a
single Rust `fn main()`, which rustc can then build into a native
executable.

Main Components
---------------
- **lexer**: Converts Zeno source into tokens
- **parser**: Builds the abstract syntax tree (Pratt expressions,
  recursive descent statements)
- **generator**: Emits Rust source from the AST
- **compiler**: Runs the three stages and collects diagnostics
- **toolchain**: Invokes rustc and runs the result
- **cli**: The zenoc command-line tool

Quick Start
-----------
Transpile a program:
    >>> from zeno import transpile
    >>> print(transpile("mut i = 0; while i < 3 { println(i); i = i + 1 }"))

Work with the stages directly:
    >>> from zeno import Lexer, Parser, CodeGenerator
    >>> program = Parser(Lexer("let x = 2 * 21")).parse_program()
    >>> rust = CodeGenerator().generate(program)

Or use the command-line tool:
    $ zenoc hello.zn -c -r

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from zeno.errors import (
    SourceLocation,
    ZenoError,
    ZenoLexerError,
    UnterminatedStringError,
    ZenoSyntaxError,
    ZenoParseError,
    GenerationError,
    ZenoCompilationError,
    ToolchainError,
)
from zeno.lexer import Lexer, Token, TokenType
from zeno.parser import Parser
from zeno.generator import CodeGenerator, generate
from zeno.compiler import (
    CompilerOptions,
    CompilerResult,
    ZenoCompiler,
    transpile,
    transpile_file,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "SourceLocation",
    "ZenoError",
    "ZenoLexerError",
    "UnterminatedStringError",
    "ZenoSyntaxError",
    "ZenoParseError",
    "GenerationError",
    "ZenoCompilationError",
    "ToolchainError",
    # Front end
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    # Back end
    "CodeGenerator",
    "generate",
    # Driver
    "CompilerOptions",
    "CompilerResult",
    "ZenoCompiler",
    "transpile",
    "transpile_file",
]
