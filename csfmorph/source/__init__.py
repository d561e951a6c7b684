"""
Source model for story modules: parsing, classification and rendering.
"""

from .model import Dialect, SourceUnit, Statement, StatementKind
from .parser import parse_file, parse_source, parse_statement

__all__ = [
    "Dialect",
    "SourceUnit",
    "Statement",
    "StatementKind",
    "parse_file",
    "parse_source",
    "parse_statement",
]
