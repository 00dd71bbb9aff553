"""
CLI Error Handling
==================

Maps the ways a dasm run can fail onto process exit codes. Assembly
errors already carry their file and line, so they are printed as is.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from dcpu16_asm.errors import Dcpu16Error


class ExitCode(IntEnum):
    """Process exit codes of dasm."""
    SUCCESS = 0
    BUILD_ERROR = 1      # source did not assemble
    INVALID_ARGS = 2     # bad option, unreadable input or unwritable output
    INTERNAL_ERROR = 3   # bug in dasm itself


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Print a failed run's error to stderr and exit.

    Args:
        error: Exception that ended the run
        verbose: Also print the traceback of an unexpected exception
        error_type: Word placed before "error:" for assembly errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, Dcpu16Error):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    if isinstance(error, (click.BadParameter, OSError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
