"""
pagasm - Assembler Command-Line Interface
=========================================

This module implements the command-line interface for the assembler.

Usage Examples
--------------
Assemble a file, listing to stdout:
    $ pagasm fib.asm

Read source from standard input:
    $ pagasm < fib.asm

Write listing and symbol files:
    $ pagasm fib.asm -o fib.lst -s fib.sym

Verbose mode:
    $ pagasm -v fib.asm

Diagnostics are written to stderr as ``source(line): Error message.``
The exit code is 0 when every line assembled, 1 otherwise.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from pagasm import __version__
from pagasm.assembler import Assembler
from pagasm.assembler.assembler import STDIN_NAME
from pagasm.cli.errors import ExitCode, handle_cli_exception

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
    "input_file",
    required=False,
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the listing to FILE instead of stdout",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="pagasm")
def main(
    input_file: Optional[Path],
    output: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble source code for the paged accumulator machine.

    INPUT_FILE is the assembly source file. If omitted (or '-'), source
    is read from standard input. Source must be UTF-8.

    \b
    Examples:
        pagasm fib.asm               # Listing to stdout
        pagasm fib.asm -o fib.lst    # Listing to file
        pagasm < fib.asm             # Read from stdin
    """
    setup_logging(verbose)
    asm = Assembler(verbose=verbose)

    try:
        if input_file is None or str(input_file) == "-":
            ok = asm.assemble_bytes(sys.stdin.buffer.read(), STDIN_NAME)
        else:
            ok = asm.assemble_file(input_file)

        if output:
            asm.write_listing(output)
        else:
            listing = asm.get_listing()
            if listing:
                click.echo(listing)

        if symbols:
            asm.write_symbols(symbols)

        if not ok:
            click.echo(asm.get_error_report(), err=True)
            logger.debug("%d errors", len(asm.get_errors()))
            sys.exit(ExitCode.BUILD_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
