"""Main CLI entry point for mimewords."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from src.config.config_loader import ConfigLoader
from src.config.rfc2047_config import Rfc2047Config
from src.models.encoded_word import EncodeStatus
from src.services.rfc2047.decoder import decode_header
from src.services.rfc2047.encoder import EncodingPlanner
from src.utils.unicode_utils import encode_text


def _read_values(values: list[str]) -> Iterable[str]:
    """Yield the values given on the command line, or stdin lines."""
    if values:
        yield from values
        return
    for line in sys.stdin:
        yield line.rstrip("\r\n")


def encode_values(
    values: Iterable[str],
    config: Rfc2047Config,
    column: int = 0,
    encode_specials: bool = False,
) -> int:
    """
    Encode header values and print them.

    Args:
        values: Header values to encode
        config: Encoding settings
        column: Column each value starts at
        encode_specials: Also encode RFC 822 specials

    Returns:
        Highest encode status seen
    """
    planner = EncodingPlanner(config)
    charsets = config.send_charsets or ("utf-8",)
    specials = config.address_specials_bytes if encode_specials else None
    worst = EncodeStatus.CLEAN

    for value in values:
        data = encode_text(value, config.charset)
        result = planner.encode(data, column, config.charset, charsets, specials)
        print(result.value.decode(config.charset, errors="surrogateescape"))
        if result.status != EncodeStatus.CLEAN:
            print(f"Warning: {value!r}: {result.status.name.lower()}", file=sys.stderr)
            worst = max(worst, result.status)

    return int(worst)


def decode_values(values: Iterable[str], config: Rfc2047Config) -> None:
    """Decode header values and print them."""
    for value in values:
        print(decode_header(value, config))


def _load_config(config_path: Optional[Path], args) -> Rfc2047Config:
    config = ConfigLoader(config_path).load_rfc2047_config()
    overrides = {}
    if getattr(args, "charsets", None):
        overrides["send_charsets"] = args.charsets
    if getattr(args, "assumed_charsets", None):
        overrides["assumed_charsets"] = args.assumed_charsets
    if getattr(args, "ignore_lws", False):
        overrides["ignore_linear_white_space"] = True
    if overrides:
        config = Rfc2047Config(**{**config.model_dump(), **overrides})
    return config


def cmd_encode(args) -> int:
    """Encode command."""
    config = _load_config(args.config, args)
    return encode_values(_read_values(args.values), config, args.column, args.specials)


def cmd_decode(args) -> int:
    """Decode command."""
    config = _load_config(args.config, args)
    decode_values(_read_values(args.values), config)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="mimewords - RFC 2047 header encoding")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    encode_parser = subparsers.add_parser("encode", help="Encode header values")
    encode_parser.add_argument("values", nargs="*", help="Header value(s); read from stdin if omitted")
    encode_parser.add_argument("--column", type=int, default=0, help="Column the value starts at")
    encode_parser.add_argument("--specials", action="store_true", help="Also encode RFC 822 specials")
    encode_parser.add_argument("--charsets", help="Colon separated candidate charsets")
    encode_parser.add_argument("--config", type=Path, help="Custom config file path")
    encode_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    decode_parser = subparsers.add_parser("decode", help="Decode header values")
    decode_parser.add_argument("values", nargs="*", help="Header value(s); read from stdin if omitted")
    decode_parser.add_argument("--assumed-charsets", help="Colon separated charsets for non-MIME text")
    decode_parser.add_argument("--ignore-lws", action="store_true", help="Fold white space around encoded words")
    decode_parser.add_argument("--config", type=Path, help="Custom config file path")
    decode_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "encode":
        return cmd_encode(args)
    return cmd_decode(args)


if __name__ == "__main__":
    sys.exit(main())
