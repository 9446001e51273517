"""Shared output utilities for the CLI."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from cmdtree.exceptions import CmdTreeError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "format_error",
    "get_error_console",
    "get_output_console",
    "print_error",
    "print_message",
    "print_text",
]

# Module-level consoles, created lazily
_error_console: Console | None = None
_output_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    Returns a console configured for stderr with appropriate settings.
    The console is created lazily and cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def get_output_console() -> Console:
    """Get or create the Rich console for help and command output."""
    global _output_console
    if _output_console is None:
        from rich.console import Console

        _output_console = Console(force_terminal=None)
    return _output_console


def print_text(text: str) -> None:
    """Print plain text (help output) to stdout without markup or wrapping."""
    get_output_console().print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_message(message: str, style: str | None = "red") -> None:
    """Print a one-line message to stderr."""
    get_error_console().print(
        message, style=style, markup=False, highlight=False, emoji=False, soft_wrap=True
    )


def print_error(e: BaseException, verbose: bool = False) -> None:
    """
    Print an exception message, plus its stack trace when verbose.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
    """
    print_message(format_error(e))
    if verbose:
        # Always use plain text for stack traces
        print("".join(traceback.format_exception(e)), file=sys.stderr)


def format_error(e: BaseException) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Framework errors show their message only; other exceptions show their
    message, falling back to the type name when the message is empty.
    """
    if isinstance(e, CmdTreeError):
        return e.message
    return str(e) or type(e).__name__
