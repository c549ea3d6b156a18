"""
Zeno Command-Line Interface
===========================

This package provides the command-line tool for the Zeno transpiler:

- **zenoc**: Zeno to Rust transpiler, with optional rustc build and run

The tool is a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["zenoc"]
