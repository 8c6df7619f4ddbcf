"""
CLI Exit Codes and Error Reporting
==================================

Maps exceptions escaping the lingualc command to an exit status and a
message on stderr. Build problems found in the source never get here:
they are diagnostics on the CompileContext and lingualc prints them
itself. What does arrive is a failed build raised as an exception, a bad
option or file, or a bug.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from lingual.compiler.errors import CompilationFailedError, CompilerError
from lingual.errors import LingualError


class ExitCode(IntEnum):
    """Exit status of lingualc."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Source has parse, macro or type errors
    INVALID_ARGS = 2     # Bad option value or unreadable input
    INTERNAL_ERROR = 3   # Bug in the compiler


def exit_code_for(error: Exception) -> ExitCode:
    """Classify an exception."""
    if isinstance(error, LingualError):
        return ExitCode.BUILD_ERROR
    if isinstance(error, (click.BadParameter, ValueError, OSError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def format_error(error: Exception) -> str:
    if isinstance(error, CompilationFailedError):
        return error.report
    if isinstance(error, CompilerError):
        # Carries its own location and "error:" prefix
        return str(error)
    if isinstance(error, LingualError):
        return f"error: {error}"
    if exit_code_for(error) is ExitCode.INVALID_ARGS:
        return f"Error: {error}"
    return f"Internal error: {error}"


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised inside a command and exit.

    Args:
        error: The exception that was raised
        verbose: Print the traceback for internal errors

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)
    click.echo(format_error(error), err=True)
    if verbose and code is ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
