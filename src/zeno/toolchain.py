"""
Rust Toolchain Integration
==========================

Thin wrappers around the external programs the zenoc driver runs after
transpilation: rustc, to build the generated source, and the resulting
executable itself.

Both go through subprocess.run. Every failure (non-zero exit, missing
program, timeout) surfaces as a ToolchainError that carries the command
line and any captured output, so the CLI can show rustc's diagnostics
verbatim.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

from zeno.errors import ToolchainError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def default_executable_path(source_path: PathLike) -> Path:
    """
    Return where the executable for a source file goes by default.

    This is the source path without its suffix (`hello.zn` -> `hello`),
    with `.exe` appended on Windows.
    """
    path = Path(source_path).with_suffix("")
    if sys.platform == "win32":
        path = path.with_suffix(".exe")
    return path


def compile_rust(
    source_path: PathLike,
    executable_path: PathLike,
    rustc: str = "rustc",
    opt_level: int = 2,
    timeout: float = 120.0,
) -> Path:
    """
    Compile a Rust source file to a native executable.

    Args:
        source_path: The .rs file to compile
        executable_path: Where rustc should write the executable
        rustc: rustc program name or path
        opt_level: Optimization level passed as `-C opt-level=N`
        timeout: Seconds to wait for rustc

    Returns:
        Path of the produced executable

    Raises:
        ToolchainError: If rustc is missing, times out or fails
    """
    executable_path = Path(executable_path)
    cmd = [
        rustc,
        str(source_path),
        "-o",
        str(executable_path),
        "-C",
        f"opt-level={opt_level}",
    ]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise ToolchainError(
            f"rustc timed out after {timeout} seconds compiling {source_path}",
            command=cmd,
        )
    except FileNotFoundError:
        raise ToolchainError(
            f"rustc not found ('{rustc}') - is the Rust toolchain installed?",
            command=cmd,
        )

    if result.returncode != 0:
        raise ToolchainError(
            f"rustc failed to compile {source_path}",
            command=cmd,
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        )

    if result.stderr.strip():
        # rustc warnings on successful builds
        logger.debug(result.stderr.rstrip())

    logger.debug(f"Built executable {executable_path}")
    return executable_path


def run_executable(path: PathLike, timeout: Optional[float] = None) -> int:
    """
    Run a compiled program with the caller's stdin/stdout/stderr.

    Returns:
        The program's exit code

    Raises:
        ToolchainError: If the program cannot be started or times out
    """
    # A bare name would be looked up on PATH instead of the current directory
    cmd = [str(Path(path).resolve())]
    logger.debug(f"Running: {cmd[0]}")

    try:
        result = subprocess.run(cmd, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise ToolchainError(
            f"{path} timed out after {timeout} seconds",
            command=cmd,
        )
    except (FileNotFoundError, PermissionError):
        raise ToolchainError(
            f"Cannot run {path}: missing or not executable",
            command=cmd,
        )

    logger.debug(f"{path} exited with status {result.returncode}")
    return result.returncode
