"""
TypeScript / TSX parsing into the flat statement model.

Uses tree-sitter with the tree-sitter-typescript grammars. Each top-level
statement becomes a ``Statement`` classified once here; comments between
statements are kept as trivia on the following statement.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import tree_sitter_typescript
from tree_sitter import Language, Parser

from ..errors import SourceParseError
from . import syntax
from .model import Dialect, SourceUnit, Statement, StatementKind

logger = logging.getLogger(__name__)

_LANGUAGES: Dict[Dialect, Language] = {}


def get_language(dialect: Dialect) -> Language:
    if dialect not in _LANGUAGES:
        if dialect is Dialect.TSX:
            _LANGUAGES[dialect] = Language(tree_sitter_typescript.language_tsx())
        else:
            _LANGUAGES[dialect] = Language(tree_sitter_typescript.language_typescript())
    return _LANGUAGES[dialect]


def _parse_tree(source: bytes, dialect: Dialect) -> Any:
    return Parser(get_language(dialect)).parse(source)


def classify(node: Any) -> StatementKind:
    """Compute the classification tag of a top-level statement node."""
    if node.type == "import_statement":
        return StatementKind.IMPORT
    if node.type == "export_statement":
        if syntax.default_export_value(node) is not None:
            return StatementKind.DEFAULT_EXPORT_ASSIGNMENT
        if syntax.exported_declaration(node) is not None:
            return StatementKind.EXPORTED_DECLARATION
        return StatementKind.OTHER
    if node.type in syntax.DECLARATION_TYPES:
        return StatementKind.UNEXPORTED_DECLARATION
    return StatementKind.OTHER


def _first_error(node: Any) -> Optional[Any]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            return _first_error(child) or child
    return None


def _describe_error(root: Any) -> str:
    bad = _first_error(root) or root
    row, column = bad.start_point
    return f"syntax error at line {row + 1}, column {column + 1}"


def _trailing_end(source: bytes, start: int, end: int, comments: List[Any]) -> int:
    """
    End of the same-line trivia that follows a statement ending at ``start``.

    The trivia runs up to the first line break (LF or CRLF) that is not inside
    a comment.
    """
    pos = start
    while True:
        newline = source.find(b"\n", pos, end)
        if newline == -1:
            return end
        spanning = [c for c in comments if c.start_byte < newline < c.end_byte]
        if not spanning:
            if newline > pos and source[newline - 1 : newline] == b"\r":
                return newline - 1
            return newline
        pos = spanning[0].end_byte


def parse_source(
    text: str,
    path: Union[str, Path],
    dialect: Optional[Dialect] = None,
    strict: bool = True,
) -> SourceUnit:
    """
    Parse module text into a ``SourceUnit``.

    Args:
        text: Module source.
        path: Path the module was read from (used for output paths and messages).
        dialect: Grammar to use; derived from the file suffix when omitted.
        strict: Raise ``SourceParseError`` when the parser reports errors.
    """
    path = Path(path)
    dialect = dialect or Dialect.for_path(path)
    source = text.encode("utf-8")
    tree = _parse_tree(source, dialect)
    root = tree.root_node

    if root.has_error:
        message = _describe_error(root)
        if strict:
            raise SourceParseError(message, str(path))
        logger.warning("%s: %s, continuing in non-strict mode", path, message)

    comments = [c for c in root.children if c.type in syntax.TRIVIA_TYPES]
    statements: List[Statement] = []
    cursor = 0
    for node in root.children:
        if node.type in syntax.TRIVIA_TYPES:
            continue
        if statements:
            previous = statements[-1]
            split = _trailing_end(source, cursor, node.start_byte, comments)
            previous.trailing = source[cursor:split].decode("utf-8")
            cursor = split
        statements.append(
            Statement(
                kind=classify(node),
                text=source[node.start_byte : node.end_byte].decode("utf-8"),
                node=node,
                base=node.start_byte,
                leading=source[cursor : node.start_byte].decode("utf-8"),
            )
        )
        cursor = node.end_byte

    if statements:
        previous = statements[-1]
        split = _trailing_end(source, cursor, len(source), comments)
        previous.trailing = source[cursor:split].decode("utf-8")
        cursor = split
    tail = source[cursor:].decode("utf-8")

    logger.debug("%s: parsed %d top-level statements", path, len(statements))
    return SourceUnit(path=path, dialect=dialect, statements=statements, tail=tail)


def parse_file(path: Union[str, Path], encoding: str = "utf-8", strict: bool = True) -> SourceUnit:
    path = Path(path)
    return parse_source(path.read_text(encoding=encoding), path, strict=strict)


def parse_statement(text: str, dialect: Dialect) -> Statement:
    """Parse text that must hold exactly one top-level statement."""
    source = text.encode("utf-8")
    tree = _parse_tree(source, dialect)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(f"generated statement does not parse: {text!r}")
    nodes = [c for c in root.children if c.type not in syntax.TRIVIA_TYPES]
    if len(nodes) != 1:
        raise SourceParseError(f"expected one statement, got {len(nodes)}: {text!r}")
    node = nodes[0]
    return Statement(
        kind=classify(node),
        text=source[node.start_byte : node.end_byte].decode("utf-8"),
        node=node,
        base=node.start_byte,
    )
