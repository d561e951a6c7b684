"""
Configuration commands for the csfmorph CLI (show, init, validate).
"""

import json
import sys

from csfmorph.cli.rich_output import get_rich_output
from csfmorph.config import ConfigurationManager, CsfMorphConfig
from csfmorph.errors import ConfigurationError


def cmd_config(args) -> None:
    """Handle config command."""
    if args.config_action == "show":
        config = CsfMorphConfig.load(getattr(args, "config", None))
        if getattr(args, "machine_readable", False):
            from csfmorph.cli_entry import _print_json_to_stdout

            _print_json_to_stdout(args, config.to_dict())
            return
        source = getattr(args, "config", None) or ConfigurationManager.find_config_file() or "built-in defaults"
        get_rich_output().print_header("csfmorph configuration", f"Source: {source}")
        print(config.get_config_summary())

    elif args.config_action == "init":
        config = CsfMorphConfig.default()
        try:
            config.to_file(args.path, args.format)
        except ConfigurationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Default configuration file created at {args.path}")
        print("Edit the file to customize your csfmorph settings.")

    elif args.config_action == "validate":
        try:
            config = CsfMorphConfig.load(args.config_file, use_env=False, validate=True)
        except ConfigurationError as e:
            print(f"Error: Configuration file is invalid: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Configuration file {args.config_file} is valid")
        if getattr(args, "verbose", False):
            print(json.dumps(config.to_dict(), indent=2))
