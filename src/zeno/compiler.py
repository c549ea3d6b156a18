"""
Zeno Compiler Main Module
=========================

This module provides the main transpiler interface for Zeno.
It orchestrates the complete translation process:

    Source → Lex → Parse → Generate → Rust source

Compiling the Rust output to a native executable is a separate step,
see zeno.toolchain.

Usage
-----
Command line:
    $ zenoc hello.zn -c -r

Programmatic:
    >>> from zeno import transpile
    >>> rust = transpile('println("hi")')

Error Handling
--------------
Every failure is reported as a ZenoCompilationError whose message is
a ready-to-print report: the parser's errors are all listed, each with
its location, followed by a count line.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from zeno.ast import Program
from zeno.errors import (
    ErrorCollector,
    GenerationError,
    ZenoLexerError,
    ZenoParseError,
)
from zeno.generator import DEFAULT_INDENT, CodeGenerator
from zeno.lexer import Lexer, Token
from zeno.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        indent: Indentation unit of the generated Rust
        rustc: rustc executable used by the toolchain step
        opt_level: Value passed as `-C opt-level=N` to rustc
        timeout: Seconds to wait for rustc before giving up
    """
    indent: str = DEFAULT_INDENT
    rustc: str = "rustc"
    opt_level: int = 2
    timeout: float = 120.0


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        rust_source: Generated Rust code (if successful)
        ast: Abstract syntax tree (if parsing succeeded)
        token_count: Number of tokens lexed, EOF included
        tokens: The tokens themselves
        errors: List of error messages
    """
    filename: str = ""
    success: bool = False
    rust_source: str = ""
    ast: Optional[Program] = None
    token_count: int = 0
    tokens: list[Token] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class ZenoCompiler:
    """
    Zeno to Rust transpiler.

    Example:
        compiler = ZenoCompiler()
        result = compiler.compile_file("hello.zn")
        print(result.rust_source)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        self._errors = ErrorCollector()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Transpile Zeno source code to Rust.

        Args:
            source: Zeno source code string
            filename: Source filename for error messages

        Returns:
            CompilerResult containing the Rust source and diagnostics

        Raises:
            ZenoCompilationError: If lexing, parsing or generation fails
        """
        self._errors.clear()
        result = CompilerResult(filename=filename)

        try:
            # Stage 1: Lexical analysis (an unterminated string stops here)
            result.tokens = self._lex(source, filename)
            result.token_count = len(result.tokens)

            # Stage 2: Parsing
            result.ast = self._parse(source, filename)

            # Stage 3: Code generation
            result.rust_source = self._generate(result.ast)
            result.success = True

        except ZenoParseError as e:
            for diagnostic in e.diagnostics:
                self._errors.add(diagnostic)
        except (ZenoLexerError, GenerationError) as e:
            self._errors.add(e)

        result.errors = self._errors.messages()
        if self._errors.has_errors():
            logger.debug(f"{filename}: {self._errors.error_count()} error(s)")
        self._errors.raise_if_errors()

        return result

    def compile_file(self, filepath: Union[str, Path]) -> CompilerResult:
        """
        Transpile a Zeno source file to Rust.

        Raises:
            ZenoCompilationError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))

    def _lex(self, source: str, filename: str) -> list[Token]:
        return Lexer(source, filename).tokenize()

    def _parse(self, source: str, filename: str) -> Program:
        parser = Parser(Lexer(source, filename), source.splitlines())
        return parser.parse_program()

    def _generate(self, ast: Program) -> str:
        return CodeGenerator(self.options.indent).generate(ast)


# =============================================================================
# Convenience Functions
# =============================================================================

def transpile(source: str, filename: str = "<input>") -> str:
    """
    Transpile Zeno source code to Rust.

    This is the primary high-level interface.

    Args:
        source: Zeno source code
        filename: Source filename for error messages

    Returns:
        Generated Rust source

    Raises:
        ZenoCompilationError: If compilation fails

    Example:
        >>> print(transpile("let x = 1 + 2"))
        fn main() {
            let x = (1_i64 + 2_i64);
        }
        <BLANKLINE>
    """
    return ZenoCompiler().compile_source(source, filename).rust_source


def transpile_file(
    filepath: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
) -> str:
    """
    Transpile a Zeno source file to Rust.

    Args:
        filepath: Path to the Zeno source file
        output_path: Optional path to write the Rust output

    Returns:
        Generated Rust source

    Raises:
        ZenoCompilationError: If compilation fails
        FileNotFoundError: If source file not found
    """
    result = ZenoCompiler().compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.rust_source, encoding="utf-8")

    return result.rust_source


__all__ = [
    "CompilerOptions",
    "CompilerResult",
    "ZenoCompiler",
    "transpile",
    "transpile_file",
]
