"""
zenoc - Zeno Transpiler Command-Line Interface
==============================================

This module implements the command-line interface for the Zeno
transpiler. It translates a Zeno program to Rust and can hand the result
to rustc and run the executable.

Usage Examples
--------------
Transpile only:
    $ zenoc hello.zn

With output file:
    $ zenoc hello.zn -o out.rs

Build and run, keeping the generated Rust:
    $ zenoc hello.zn -c -r -k

Debugging the front end:
    $ zenoc hello.zn --tokens
    $ zenoc hello.zn --ast
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from zeno import __version__
from zeno.ast import ASTPrinter
from zeno.cli.errors import ExitCode, handle_cli_exception
from zeno.compiler import CompilerOptions, ZenoCompiler
from zeno.lexer import Lexer
from zeno.toolchain import compile_rust, default_executable_path, run_executable

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output-rust",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output Rust file (default: SOURCE.rs)",
)
@click.option(
    "-O", "--output-executable",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output executable (default: SOURCE without extension)",
)
@click.option(
    "-c", "--compile", "compile_",
    is_flag=True,
    help="Compile the generated Rust code with rustc",
)
@click.option(
    "-r", "--run",
    is_flag=True,
    help="Run the executable after compiling (requires --compile)",
)
@click.option(
    "-k", "--keep-rs",
    is_flag=True,
    help="Keep the generated .rs file after compiling",
)
@click.option(
    "--rustc",
    default="rustc",
    envvar="RUSTC",
    show_default=True,
    help="rustc executable to use",
)
@click.option(
    "--opt-level",
    type=click.IntRange(0, 3),
    default=2,
    show_default=True,
    help="rustc optimization level",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print tokens and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="zenoc")
def main(
    source: Path,
    output_rust: Optional[Path],
    output_executable: Optional[Path],
    compile_: bool,
    run: bool,
    keep_rs: bool,
    rustc: str,
    opt_level: int,
    ast: bool,
    tokens: bool,
    verbose: bool,
) -> None:
    """
    Transpile a Zeno program to Rust.

    SOURCE is the Zeno source file (.zn) to translate.

    \b
    Examples:
        zenoc hello.zn               # Outputs hello.rs
        zenoc hello.zn -o out.rs     # Specify output file
        zenoc hello.zn -c            # Build hello (removes hello.rs)
        zenoc hello.zn -c -r -k      # Build, run, keep hello.rs
    """
    setup_logging(verbose)

    if run and not compile_:
        raise click.UsageError("--run requires --compile")

    options = CompilerOptions(rustc=rustc, opt_level=opt_level)

    try:
        if verbose:
            click.echo(f"Transpiling {source}...")

        # Token dump mode
        if tokens:
            text = source.read_text(encoding="utf-8")
            for token in Lexer(text, str(source)).tokenize():
                click.echo(repr(token))
            return

        result = ZenoCompiler(options).compile_file(source)

        # AST dump mode
        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        rust_path = output_rust or source.with_suffix(".rs")
        rust_path.write_text(result.rust_source, encoding="utf-8")
        click.echo(f"Generated Rust code written to: {rust_path}")

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {len(result.ast.statements)} statements")
            click.echo(f"Wrote {len(result.rust_source)} bytes to {rust_path}")

        if not compile_:
            return

        executable = output_executable or default_executable_path(source)
        click.echo("Compiling generated Rust code with rustc...")
        compile_rust(
            rust_path,
            executable,
            rustc=options.rustc,
            opt_level=options.opt_level,
            timeout=options.timeout,
        )
        click.echo(f"Compilation successful. Executable at: {executable}")

        exit_status = 0
        if run:
            click.echo(f"Running executable '{executable}'...")
            exit_status = run_executable(executable)
            if exit_status != 0:
                click.echo(
                    f"Executable '{executable}' exited with error code: {exit_status}",
                    err=True,
                )

        if not keep_rs:
            rust_path.unlink(missing_ok=True)
            click.echo(f"Removed temporary Rust file: {rust_path}")

        if exit_status != 0:
            sys.exit(ExitCode.BUILD_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
