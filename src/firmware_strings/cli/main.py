"""Main CLI entry point for the firmware-strings command-line tool.

Provides commands to encode text into Latin-1 / UCS-2 firmware strings of a
given capacity and to validate raw string dumps taken from firmware memory.
"""

import argparse
import json
import logging
import sys
from array import array
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from firmware_strings.character.kinds import kind_by_name
from firmware_strings.shared.config import BYTE_ORDERS, KIND_NAMES, OUTPUT_FORMATS, CLIConfig
from firmware_strings.shared.logging import get_logger
from firmware_strings.shared.result import EncodeResult
from firmware_strings.string.encoder import iter_encode
from firmware_strings.string.view import CStr

logger = get_logger(__name__, None, "cli")


def resolve_config(args: argparse.Namespace) -> CLIConfig:
    """Merge the optional config file with command-line overrides."""
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    overrides: Dict[str, Any] = {}
    for name in ("kind", "capacity", "output_format", "byteorder"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    if getattr(args, "no_crlf", False):
        overrides["translate_line_endings"] = False
    return replace(config, **overrides)


def format_units(units: Any, kind: type) -> str:
    """Render integer units as space-separated hex words."""
    width = kind.WIDTH_BITS // 4
    return " ".join(f"{code:0{width}x}" for code in units)


def chunk_to_dict(result: EncodeResult) -> Dict[str, Any]:
    """Describe a successful encode result."""
    string = result.unwrap()
    return {
        "text": str(string),
        "units": list(string.to_ints_with_nul()),
        "units_written": result.statistics.units_written,
        "characters_consumed": result.statistics.characters_consumed,
    }


def cmd_encode(args: argparse.Namespace) -> int:
    """Handle encode command."""
    config = resolve_config(args)
    kind = kind_by_name(config.kind)
    text = sys.stdin.read() if args.text == "-" else args.text

    chunks: List[Dict[str, Any]] = []
    remainder: Optional[str] = None
    hex_lines: List[str] = []
    for result in iter_encode(text, config.capacity, kind, config.encoder_config()):
        if not result.success:
            error = result.error
            logger.debug("Encode command failed", extra={"error_kind": error.kind.value})
            if config.output_format == "json":
                print(json.dumps({
                    "error": error.kind.value,
                    "offset": error.offset,
                    "message": str(error),
                }, indent=2))
            else:
                print(f"Error: {error}", file=sys.stderr)
            return 1

        chunks.append(chunk_to_dict(result))
        hex_lines.append(format_units(result.unwrap().to_ints_with_nul(), kind))
        remainder = result.remainder
        if not args.all:
            break

    if config.output_format == "json":
        print(json.dumps({
            "kind": config.kind,
            "capacity": config.capacity,
            "chunks": chunks,
            "remainder": remainder,
        }, indent=2))
    else:
        for line in hex_lines:
            print(line)
        if remainder is not None:
            print(f"Remainder: {remainder!r}", file=sys.stderr)
    return 0


def read_units(data: bytes, kind: type, byteorder: str) -> array:
    """Decode a raw dump into an array of units in native byte order."""
    units = array(kind.TYPECODE)
    if len(data) % units.itemsize:
        raise ValueError(
            f"{len(data)} bytes is not a whole number of {units.itemsize}-byte units"
        )
    units.frombytes(data)
    if units.itemsize > 1 and byteorder != sys.byteorder:
        units.byteswap()
    return units


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    config = resolve_config(args)
    kind = kind_by_name(config.kind)

    report: Dict[str, Any] = {"file": str(args.path), "kind": config.kind}
    try:
        data = args.path.read_bytes()
        units = read_units(data, kind, config.byteorder)
    except (OSError, ValueError) as e:
        report.update({"valid": False, "error": str(e)})
    else:
        result = CStr.of(kind).from_ints_with_nul(units)
        if result.success:
            report.update({"valid": True, "text": str(result.value), "length": len(result.value)})
        else:
            report.update({
                "valid": False,
                "error": result.error.kind.value,
                "position": result.error.position,
                "message": str(result.error),
            })

    if config.output_format == "json":
        print(json.dumps(report, indent=2))
    elif report["valid"]:
        print(f"✓ {report['file']}: {report['text']!r}")
    else:
        print(f"✗ {report['file']}: {report.get('message', report['error'])}")
    return 0 if report["valid"] else 1


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="firmware-strings",
        description="Encode and validate Latin-1 / UCS-2 firmware strings",
    )
    parser.add_argument("--version", action="version", version="0.1.0")
    parser.add_argument("--config", type=Path, help="JSON file with CLI defaults")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--kind", choices=KIND_NAMES, help="Character kind")
        sub.add_argument(
            "--format", dest="output_format", choices=OUTPUT_FORMATS, help="Output format"
        )

    encode_parser = subparsers.add_parser("encode", help="Encode text into a firmware string")
    encode_parser.add_argument("text", help="Text to encode ('-' reads stdin)")
    encode_parser.add_argument(
        "--capacity", type=int, help="Buffer capacity in units, terminator included"
    )
    encode_parser.add_argument(
        "--no-crlf", action="store_true", help="Do not insert CR before LF"
    )
    encode_parser.add_argument(
        "--all", action="store_true", help="Emit every chunk instead of only the first"
    )
    add_common(encode_parser)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a raw NUL-terminated string dump"
    )
    validate_parser.add_argument("path", type=Path, help="File holding the raw units")
    validate_parser.add_argument("--byteorder", choices=BYTE_ORDERS, help="Unit byte order")
    add_common(validate_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "encode":
            return cmd_encode(args)
        if args.command == "validate":
            return cmd_validate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Bad config file or option values
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
