"""
Command-line interface for csfmorph

Migrates Storybook story modules from CSF2 to CSF3:
- rewrite: add Meta/StoryObj typing to single-default-export modules in place
- split: break modules with several default exports into one file per title
- migrate: pick rewrite or split per module
"""

import argparse
import json
import sys
import logging
from typing import Any, TextIO

from csfmorph import __version__
from csfmorph.api import CsfMorph
from csfmorph.config import CsfMorphConfig, WriteMode, load_config
from csfmorph.errors import ConfigurationError
from csfmorph.cli.rich_output import set_rich_enabled
from csfmorph.cli.commands.config import cmd_config
from csfmorph.cli.commands.morph import cmd_morph

MORPH_COMMANDS = ("rewrite", "split", "migrate")


def _is_machine_readable(args: Any) -> bool:
    return bool(getattr(args, "machine_readable", False))


def _json_stdout(args: Any) -> TextIO:
    """
    When --machine-readable is enabled, main() redirects sys.stdout -> sys.stderr
    to prevent accidental non-JSON output. This function returns the original stdout.
    """
    return getattr(args, "_json_stdout", sys.__stdout__)


def _print_json_to_stdout(args: Any, payload: Any) -> None:
    """
    Always print JSON to the original stdout in machine-readable mode.
    """
    s = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    print(s, file=_json_stdout(args))


def _maybe_print_output(args: Any, output_text_or_json: str) -> None:
    """
    Print final command output:
    - in normal mode: print to sys.stdout
    - in machine-readable mode: print to original stdout (args._json_stdout)
    """
    if _is_machine_readable(args):
        print(output_text_or_json, file=_json_stdout(args))
    else:
        print(output_text_or_json)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _add_morph_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("patterns", nargs="+", help="Story file glob(s), e.g. 'src/**/*.stories.tsx'")
    parser.add_argument("--root", help="Directory the patterns are relative to (default: cwd)")
    parser.add_argument("--dry-run", action="store_true", help="Report planned writes without writing")
    parser.add_argument("--output", "-o", help="Write the detailed JSON report to this file")
    parser.add_argument(
        "--storybook-module",
        help="Module that provides Meta and StoryObj (default: @storybook/react)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="csfmorph",
        description="csfmorph - Storybook CSF2 to CSF3 migration",
        epilog='Use "csfmorph <command> --help" for detailed command help.',
    )

    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )

    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )

    parser.add_argument(
        "--machine-readable",
        action="store_true",
        help="Output in machine-readable format (JSON)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    rewrite_parser = subparsers.add_parser(
        "rewrite", help="Add CSF3 typing to modules with a single default export"
    )
    _add_morph_arguments(rewrite_parser)
    rewrite_parser.add_argument(
        "--backup", action="store_true", help="Keep a timestamped copy of each rewritten module"
    )

    split_parser = subparsers.add_parser(
        "split", help="Split modules with several default exports into one file per title"
    )
    _add_morph_arguments(split_parser)
    split_parser.add_argument(
        "--append",
        action="store_true",
        help="Append to existing output files instead of replacing them",
    )
    split_parser.add_argument("--extension", help="Extension of generated files (default: tsx)")

    migrate_parser = subparsers.add_parser(
        "migrate", help="Rewrite or split each module depending on its default exports"
    )
    _add_morph_arguments(migrate_parser)
    migrate_parser.add_argument("--backup", action="store_true", help="Back up modules rewritten in place")
    migrate_parser.add_argument("--append", action="store_true", help="Append split outputs")
    migrate_parser.add_argument("--extension", help="Extension of generated files (default: tsx)")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_action", required=True)

    config_subparsers.add_parser("show", help="Show current configuration")

    init_parser = config_subparsers.add_parser("init", help="Write a default configuration file")
    init_parser.add_argument("path", nargs="?", default="csfmorph.json", help="Output path")
    init_parser.add_argument("--format", choices=["json", "yaml"], default="json")

    validate_parser = config_subparsers.add_parser("validate", help="Validate a configuration file")
    validate_parser.add_argument("config_file", help="Configuration file to validate")

    return parser


def apply_overrides(config: CsfMorphConfig, args: Any) -> CsfMorphConfig:
    """Apply command-line flags on top of the loaded configuration."""
    if getattr(args, "dry_run", False):
        config.output_settings.dry_run = True
    if getattr(args, "append", False):
        config.output_settings.write_mode = WriteMode.APPEND
    if getattr(args, "backup", False):
        config.output_settings.backup_enabled = True
    if getattr(args, "extension", None):
        config.morph_settings.story_file_extension = args.extension.lstrip(".")
    if getattr(args, "storybook_module", None):
        config.morph_settings.storybook_module = args.storybook_module
    return config


def main(argv=None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    # In machine-readable mode stdout carries JSON only; everything else goes to stderr.
    if _is_machine_readable(args):
        args._json_stdout = sys.stdout
        sys.stdout = sys.stderr
        try:
            _run(args, parser)
        finally:
            sys.stdout = args._json_stdout
        return

    _run(args, parser)


def _run(args: Any, parser: argparse.ArgumentParser) -> None:
    setup_logging(getattr(args, "verbose", False))

    use_rich = not getattr(args, "no_rich", False) and not _is_machine_readable(args)
    set_rich_enabled(use_rich)

    try:
        if args.command == "config":
            cmd_config(args)
            return

        config = apply_overrides(load_config(args.config), args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command in MORPH_COMMANDS:
        cmd_morph(args, CsfMorph(config))
        return

    parser.print_help()
