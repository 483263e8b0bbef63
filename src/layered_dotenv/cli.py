from __future__ import annotations

import argparse
import json
import os
import sys

from layered_dotenv.config import ConfigError, load_settings
from layered_dotenv.loader import Dotenv, FileReadError
from layered_dotenv.log import StreamLogger
from layered_dotenv.normalize import to_env_string
from layered_dotenv.validation import ValidationError, import_schema


def _build_loader(args: argparse.Namespace) -> Dotenv:
    settings = load_settings()
    return Dotenv.from_settings(
        settings,
        coerce_values=args.coerce or settings.coerce_values,
        # private copy of the process environment
        store=dict(os.environ),
        # stdout carries command output
        logger=StreamLogger(out=sys.stderr),
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the layered-dotenv CLI.

    Commands:
    - parse: prints the parsed key/values of one env file as JSON.
    - show: loads files plus selected profiles and prints KEY=value lines.
    - check: loads files plus profiles and validates them against a model.

    Returns:
    - 0 on success
    - 1 on failure (prints an ERROR message to stderr)
    """
    parser = argparse.ArgumentParser(prog="layered-dotenv")
    sub = parser.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse")
    parse_cmd.add_argument("file", help="Env file to parse.")
    parse_cmd.add_argument(
        "--coerce",
        action="store_true",
        help="Convert numbers, booleans, null and JSON values.",
    )

    show = sub.add_parser("show")
    show.add_argument(
        "files",
        nargs="*",
        default=[".env"],
        help="Env files to load, in order (default: .env).",
    )
    show.add_argument(
        "--coerce",
        action="store_true",
        help="Convert numbers, booleans, null and JSON values.",
    )

    check = sub.add_parser("check")
    check.add_argument(
        "files",
        nargs="*",
        default=[".env"],
        help="Env files to load, in order (default: .env).",
    )
    check.add_argument(
        "--schema",
        required=True,
        help="Pydantic model to validate against, as module:Name.",
    )
    check.add_argument(
        "--coerce",
        action="store_true",
        help="Validate coerced values instead of raw strings.",
    )

    args = parser.parse_args(argv)

    if args.command == "parse":
        try:
            dotenv = _build_loader(args)
            parsed = dotenv.load(args.file)
        except (ConfigError, FileReadError) as exc:
            sys.stderr.write(f"ERROR: {exc}\n")
            return 1

        sys.stdout.write(json.dumps(parsed, indent=2) + "\n")
        return 0

    if args.command == "show":
        try:
            dotenv = _build_loader(args)
            dotenv.initialize(args.files)
        except (ConfigError, FileReadError) as exc:
            sys.stderr.write(f"ERROR: {exc}\n")
            return 1

        for key, value in dotenv.values.items():
            sys.stdout.write(f"{key}={to_env_string(value)}\n")
        return 0

    if args.command == "check":
        try:
            schema = import_schema(args.schema)
            dotenv = _build_loader(args)
            dotenv.initialize(args.files, schema)
        except (ConfigError, FileReadError, ValidationError) as exc:
            sys.stderr.write(f"ERROR: {exc}\n")
            return 1

        sys.stdout.write(f"OK keys={len(dotenv.values)}\n")
        return 0

    sys.stderr.write("ERROR: Unknown command\n")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
