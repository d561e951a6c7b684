"""
CLI command handlers for csfmorph.

- morph: rewrite, split and migrate
- config: show, init and validate
"""

from .config import cmd_config
from .morph import cmd_morph, format_morph_report, print_morph_report

__all__ = ["cmd_config", "cmd_morph", "format_morph_report", "print_morph_report"]
