"""Command-line interface for the MessagePack Lens."""

import base64
import binascii
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .converter import MsgpackConverter
from .error_handler import ErrorHandler
from .types import ConversionError

BINARY_FORMATS = ["hex", "base64", "raw"]


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise click.BadParameter(f"{path} is not valid UTF-8: {e.reason} at byte {e.start}")


def _load_binary(path: Path, fmt: str) -> bytes:
    if fmt == "raw":
        return path.read_bytes()
    text = _read_text(path)
    try:
        if fmt == "hex":
            return bytes.fromhex(text)
        return base64.b64decode("".join(text.split()), validate=True)
    except (ValueError, binascii.Error) as e:
        raise click.BadParameter(f"{path} is not valid {fmt}: {e}")


def _format_binary(data: bytes, fmt: str) -> str:
    if fmt == "hex":
        return " ".join(f"{b:02X}" for b in data)
    return base64.b64encode(data).decode("ascii")


def _fail(error: ConversionError) -> None:
    response = ErrorHandler().handle_conversion_error(error)
    click.echo(f"❌ Error: {error}", err=True)
    click.echo(f"   • {response.suggested_action}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose: bool):
    """MessagePack Lens - Convert between JSON text and MessagePack bytes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(BINARY_FORMATS), default='hex',
              help='Output encoding of the bytes (default: hex)')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output file path (required for raw)')
def encode(input_file: Path, fmt: str, output: Optional[Path]):
    """Encode a JSON file as MessagePack."""
    if fmt == "raw" and output is None:
        raise click.UsageError("--output is required with --format raw")

    text = _read_text(input_file)
    try:
        encoded = MsgpackConverter().json_to_msgpack(text)
    except ConversionError as e:
        _fail(e)

    if fmt == "raw":
        output.write_bytes(encoded)
        click.echo(f"✅ Wrote {len(encoded)} bytes to {output}")
    elif output is not None:
        output.write_text(_format_binary(encoded, fmt) + "\n", encoding='utf-8')
        click.echo(f"✅ Wrote {len(encoded)} bytes to {output}")
    else:
        click.echo(_format_binary(encoded, fmt))


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(BINARY_FORMATS), default='hex',
              help='Encoding of the input bytes (default: hex)')
@click.option('--indent', '-i', default=2, show_default=True, help='Spaces per nesting level')
@click.option('--compact', is_flag=True, help='Render single-line JSON')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output JSON file path')
def decode(input_file: Path, fmt: str, indent: int, compact: bool, output: Optional[Path]):
    """Decode MessagePack bytes into JSON text."""
    data = _load_binary(input_file, fmt)
    converter = MsgpackConverter(indent=None if compact else indent)
    try:
        text = converter.msgpack_to_json(data)
    except ConversionError as e:
        _fail(e)

    if output is not None:
        output.write_text(text + "\n", encoding='utf-8')
        click.echo(f"✅ Wrote JSON to {output}")
    else:
        click.echo(text)


@main.command(name='map')
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(BINARY_FORMATS), default='hex',
              help='Encoding of the input bytes (default: hex)')
def map_positions(input_file: Path, fmt: str):
    """Show which bytes produce each token of the rendered JSON."""
    data = _load_binary(input_file, fmt)
    converter = MsgpackConverter()
    try:
        text = converter.msgpack_to_json(data)
    except ConversionError as e:
        _fail(e)

    for mapping in converter.build_mappings(data, text):
        byte_range, text_range = mapping.byte_range, mapping.text_range
        token = text[text_range.start:text_range.end]
        click.echo(f"{mapping.kind.value:<5}  bytes[{byte_range.start}:{byte_range.end}]  "
                   f"text[{text_range.start}:{text_range.end}]  {token}")


if __name__ == '__main__':
    main()
