"""
Zeno Error Hierarchy
====================

This module defines the exception hierarchy for the Zeno transpiler.
All exceptions inherit from ZenoError, allowing callers to catch every
transpiler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
ZenoError (base)
├── ZenoLexerError - lexical errors
│   └── UnterminatedStringError - missing closing quote
├── ZenoSyntaxError - a single parser error with its location
├── ZenoParseError - aggregate of all parser errors from one pass
├── GenerationError - impossible state while emitting Rust
├── ZenoCompilationError - pre-formatted multi-error report
└── ToolchainError - rustc invocation or executable run failed

Error Message Format
--------------------
Errors that carry a location follow this format:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing

Example:
    hello.zn:3:9: error: expected next token to be ASSIGN, got INTEGER(5) instead. (current: IDENTIFIER('x'))
        let x 5
              ^
"""

from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception
# =============================================================================

class ZenoError(Exception):
    """
    Base exception for all Zeno transpiler errors.

    Provides common formatting for error messages including source
    location tracking, source line context, and helpful hints.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            hello.zn:5:12: error: Unterminated string literal
                print("Hello);
                      ^
            hint: add closing '"' to complete the string
        """
        parts = []

        # Location prefix: filename:line:column: error: message
        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class ZenoLexerError(ZenoError):
    """
    Lexical error in Zeno source code.

    Most lexical problems are not fatal: the lexer emits an ILLEGAL
    token and the parser reports it. Only conditions that make the
    rest of the stream meaningless are raised directly.
    """
    pass


class UnterminatedStringError(ZenoLexerError):
    """
    Unterminated string literal.

    Raised by Lexer.tokenize() when a string literal reaches the end
    of the source before its closing quote.

    Example:
        println("hello    // Missing closing quote
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "Unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors (Parser)
# =============================================================================

class ZenoSyntaxError(ZenoError):
    """
    A single syntax error recorded by the parser.

    The parser does not raise these one at a time; it collects them
    and raises a ZenoParseError once the whole program was scanned.
    """
    pass


class ZenoParseError(ZenoError):
    """
    Aggregate of every syntax error found in one parse.

    Attributes:
        errors: The plain error messages, in the order they were found
        diagnostics: The ZenoSyntaxError objects, with locations
    """

    def __init__(self, diagnostics: List[ZenoSyntaxError]):
        self.diagnostics = list(diagnostics)
        self.errors = [d.message for d in self.diagnostics]
        count = len(self.errors)
        word = "error" if count == 1 else "errors"
        super().__init__(f"Parsing failed with {count} {word}")

    def _format_message(self) -> str:
        lines = [str(d) for d in self.diagnostics]
        lines.append(self.message)
        return "\n".join(lines)


# =============================================================================
# Generation Errors
# =============================================================================

class GenerationError(ZenoError):
    """
    Error while emitting Rust source.

    Every construct the parser can build has a Rust lowering, so this
    is only raised for node types the generator does not know.
    """

    def _format_message(self) -> str:
        return f"Generation Error: {self.message}"


# =============================================================================
# Driver and Toolchain Errors
# =============================================================================

class ZenoCompilationError(ZenoError):
    """
    Aggregate compilation error containing multiple errors.

    The message is already a formatted report from ErrorCollector and
    is passed through unchanged.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message)

    def _format_message(self) -> str:
        """Return message as-is - it's already a formatted aggregate report."""
        return self.message


class ToolchainError(ZenoError):
    """
    Failure invoking rustc or running the produced executable.

    Attributes:
        command: The command line that was run
        stdout: Captured standard output (if any)
        stderr: Captured standard error (if any)
        return_code: Process exit status (if it ran)
    """

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        stdout: str = "",
        stderr: str = "",
        return_code: Optional[int] = None,
    ):
        self.command = list(command or [])
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code
        super().__init__(message)

    def _format_message(self) -> str:
        parts = [f"error: {self.message}"]
        if self.return_code is not None:
            parts[0] += f" (exit status {self.return_code})"
        if self.stdout.strip():
            parts.append("--- rustc stdout ---")
            parts.append(self.stdout.rstrip())
        if self.stderr.strip():
            parts.append("--- rustc stderr ---")
            parts.append(self.stderr.rstrip())
        return "\n".join(parts)


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The parser uses this to continue after a failed statement,
    collecting all errors before reporting them together.

    Example:
        collector = ErrorCollector()
        collector.add(ZenoSyntaxError("...", location))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[ZenoError] = []

    def add(self, error: ZenoError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def messages(self) -> List[str]:
        """Return the plain messages of the collected errors."""
        return [e.message for e in self.errors]

    def report(self) -> str:
        """Format all errors for display."""
        lines = [str(error) for error in self.errors]
        word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {word} generated")
        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise a ZenoCompilationError if any errors were collected."""
        if self.has_errors():
            raise ZenoCompilationError(self.report(), self.messages())
