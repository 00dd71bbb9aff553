"""
dasm - DCPU-16 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the DCPU-16
assembler. Source is read line by line from a file or standard input;
the binary image is written only once the whole program has assembled
and every label has been resolved.

Usage Examples
--------------
Basic assembly (writes hello.bin):
    $ dasm hello.dasm

With output file:
    $ dasm hello.dasm -o hello.img

As a filter:
    $ dasm < hello.dasm > hello.bin

Generate listing and symbol files:
    $ dasm hello.dasm -l hello.lst -s hello.sym

Fixed byte order:
    $ dasm --byte-order big hello.dasm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from dcpu16_asm import __version__
from dcpu16_asm.assembler import Assembler, BYTE_ORDERS
from dcpu16_asm.assembler.buffer import native_byte_order
from dcpu16_asm.cli.errors import handle_cli_exception


STDIO = Path("-")


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def resolve_output_path(input_file: Path, output: Optional[Path]) -> Path:
    """
    Pick the output path.

    An explicit ``-o`` wins. Input from stdin goes to stdout; a named
    input file goes to the same name with a ``.bin`` suffix.
    """
    if output is not None:
        return output
    if input_file == STDIO:
        return STDIO
    return input_file.with_suffix(".bin")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    default="-",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Output binary file ('-' for stdout; default: input.bin, or stdout for stdin)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-b", "--byte-order",
    type=click.Choice(list(BYTE_ORDERS), case_sensitive=False),
    default="native",
    show_default=True,
    help="Byte order of the 16-bit words in the output image",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="dasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    byte_order: str,
    verbose: bool,
) -> None:
    """
    Assemble DCPU-16 source code into a binary image.

    INPUT_FILE is the assembly source file; '-' or no argument reads
    standard input.

    \b
    Examples:
        dasm hello.dasm              # Outputs hello.bin
        dasm hello.dasm -o out.img   # Specify output file
        dasm < hello.dasm > out.bin  # Filter mode
    """
    setup_logging(verbose)

    byte_order = byte_order.lower()
    output_file = resolve_output_path(input_file, output)
    asm = Assembler(byte_order=byte_order)

    if verbose:
        order = native_byte_order() if byte_order == "native" else byte_order
        click.echo(f"Byte order: {order}-endian", err=True)

    try:
        filename = "<stdin>" if input_file == STDIO else str(input_file)
        with click.open_file(
            str(input_file), "r", encoding="utf-8", errors="replace"
        ) as source:
            asm.assemble_lines(source, filename)

        # The image goes last so a failed auxiliary write leaves no binary
        if listing:
            asm.write_listing(listing)

        if symbols:
            asm.write_symbols(symbols)

        if output_file == STDIO:
            stdout = click.get_binary_stream("stdout")
            stdout.write(asm.get_code())
            stdout.flush()
        else:
            asm.write_binary(output_file)

        if verbose:
            click.echo(
                f"Assembly complete: {len(asm.get_words())} words, "
                f"{len(asm.get_symbols())} labels",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
