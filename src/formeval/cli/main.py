# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the formeval command-line interface."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from formeval.config.engine_config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    EngineConfig,
    EngineConfigError,
    find_engine_config,
    load_engine_config,
)
from formeval.engine.analysis import analyze_schema
from formeval.engine.recompute import recompute
from formeval.engine.validation import validate
from formeval.io.records import SchemaLoadError, dump_values, load_schema, load_values
from formeval.model.fields import FormSchema, Value

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the formeval CLI."""
    parser = argparse.ArgumentParser(
        prog="formeval",
        description="formeval - recompute and validate form schemas",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the structure of a form schema",
        description="Report duplicate ids, broken field order, invalid derived logic, and similar schema errors.",
    )
    check_parser.add_argument("schema", help="Path to the schema file (.json, .yaml or .yml)")

    # evaluate subcommand
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Recompute derived fields and validate a set of values",
        description=(
            "Seed the form with its default values, overlay the given values, recompute "
            "derived fields, validate every field, and print the result as JSON."
        ),
    )
    evaluate_parser.add_argument("schema", help="Path to the schema file (.json, .yaml or .yml)")
    evaluate_parser.add_argument(
        "values",
        nargs="?",
        default=None,
        help="Path to a value file mapping field ids to values (default: defaults only)",
    )
    evaluate_parser.add_argument(
        "--config",
        default=None,
        help=f"Path to an engine config file (default: {CONFIG_FILE_NAME} in the current directory)",
    )
    evaluate_parser.add_argument(
        "--today",
        default=None,
        help="Reference date for age fields in YYYY-MM-DD format (overrides the config)",
    )

    # init-config subcommand
    init_parser = subparsers.add_parser(
        "init-config",
        help="Write a default engine configuration file",
        description=f"Create a {CONFIG_FILE_NAME} file with the default settings.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to write the config file to (default: current directory)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "evaluate":
        return _cmd_evaluate(args)
    if args.command == "init-config":
        return _cmd_init_config(args)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        schema = load_schema(Path(args.schema))
    except SchemaLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    errors = analyze_schema(schema)
    for error in errors:
        print(f"Error: {error.message}", file=sys.stderr)
    if errors:
        return 1

    print(f"Schema '{schema.name or args.schema}' with {len(schema.fields)} field(s): no issues found.")
    return 0


def _cmd_evaluate(args: argparse.Namespace) -> int:
    """Handle the evaluate subcommand."""
    try:
        config = _load_config(args.config)
    except EngineConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    today = config.today
    if args.today is not None:
        try:
            today = date.fromisoformat(args.today)
        except ValueError:
            print(f"Error: invalid --today date '{args.today}', expected YYYY-MM-DD.", file=sys.stderr)
            return 1

    try:
        schema = load_schema(Path(args.schema))
        overrides = load_values(Path(args.values)) if args.values is not None else {}
    except SchemaLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    values = recompute(schema, _seed_values(schema, overrides), today=today, max_passes=config.max_passes)
    outcome = validate(schema, values)

    report = {"values": dump_values(values), "errors": outcome.errors, "isValid": outcome.is_valid}
    print(json.dumps(report, indent=2))
    return 0 if outcome.is_valid else 1


def _cmd_init_config(args: argparse.Namespace) -> int:
    """Handle the init-config subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: config file already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    print(f"Wrote default engine config to '{config_file}'.")
    return 0


def _load_config(path: str | None) -> EngineConfig:
    """Load the config from an explicit path or from the current directory."""
    if path is not None:
        return load_engine_config(Path(path))
    return find_engine_config(Path.cwd())


def _seed_values(schema: FormSchema, overrides: dict[str, Value]) -> dict[str, Value]:
    """Return the defaults of non-derived fields overlaid with user-supplied values."""
    seeded: dict[str, Value] = {
        f.id: f.default_value for f in schema.fields if not f.is_derived and f.default_value is not None
    }
    seeded.update(overrides)
    return seeded
