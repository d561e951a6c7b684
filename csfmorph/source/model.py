"""
Flat statement model for one story module.

A module is an ordered list of ``Statement`` handles. Each handle owns its
source text, the trivia around it and a classification tag computed once at
parse time. Mutation replaces, inserts or removes handles by index; the
replacement text is re-parsed so the tag and syntax node stay accurate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Tuple


class StatementKind(str, Enum):
    """Classification of a top-level statement."""

    IMPORT = "import"
    EXPORTED_DECLARATION = "exported_declaration"
    UNEXPORTED_DECLARATION = "unexported_declaration"
    DEFAULT_EXPORT_ASSIGNMENT = "default_export_assignment"
    OTHER = "other"


class Dialect(str, Enum):
    """Grammar used to parse a module."""

    TYPESCRIPT = "typescript"
    TSX = "tsx"

    @classmethod
    def for_path(cls, path: Path) -> "Dialect":
        if path.suffix.lower() in {".tsx", ".jsx"}:
            return cls.TSX
        return cls.TYPESCRIPT


# (start_byte, end_byte, replacement) in the coordinates of the owning tree
Edit = Tuple[int, int, str]


@dataclass
class Statement:
    """
    One top-level statement.

    Attributes:
        kind: Classification tag.
        text: Source text of the statement itself, without surrounding trivia.
        node: tree-sitter node of the statement.
        base: Byte offset of ``node`` inside the tree it was parsed from.
        leading: Whitespace and comments between the previous statement and this one.
        trailing: Same-line trivia after the statement (e.g. ``// note``).
    """

    kind: StatementKind
    text: str
    node: Any = field(repr=False, compare=False)
    base: int = 0
    leading: str = ""
    trailing: str = ""

    @property
    def is_import(self) -> bool:
        return self.kind is StatementKind.IMPORT

    @property
    def is_default_export(self) -> bool:
        return self.kind is StatementKind.DEFAULT_EXPORT_ASSIGNMENT

    @property
    def comments(self) -> str:
        """Comment lines directly attached above the statement."""
        return self.leading.strip()

    def source_text(self, with_comments: bool = True) -> str:
        """Statement text as it should appear when copied into another module."""
        parts = []
        if with_comments and self.comments:
            parts.append(self.comments + "\n")
        parts.append(self.text)
        if with_comments and self.trailing.strip():
            parts.append(self.trailing.rstrip())
        return "".join(parts)

    def apply_edits(self, edits: Sequence[Edit]) -> str:
        """Return the statement text with byte-range edits applied."""
        raw = self.text.encode("utf-8")
        ordered = sorted(edits, key=lambda e: e[0], reverse=True)
        last_start = None
        for start, end, replacement in ordered:
            if last_start is not None and end > last_start:
                raise ValueError("overlapping edits")
            lo, hi = start - self.base, end - self.base
            raw = raw[:lo] + replacement.encode("utf-8") + raw[hi:]
            last_start = start
        return raw.decode("utf-8")


@dataclass
class SourceUnit:
    """
    Ordered top-level statements of one module.

    ``tail`` holds the trivia after the last statement so ``render()``
    reproduces the original text byte for byte when nothing changed.
    """

    path: Path
    dialect: Dialect
    statements: List[Statement] = field(default_factory=list)
    tail: str = ""

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __getitem__(self, index: int) -> Statement:
        return self.statements[index]

    @property
    def base_directory(self) -> Path:
        return self.path.parent

    @property
    def base_name(self) -> str:
        """File name up to the first dot (``Button.stories.tsx`` -> ``Button``)."""
        return self.path.name.split(".")[0]

    @property
    def newline(self) -> str:
        """Line ending of the module, taken from the first line break in its trivia."""
        trivia = [t for s in self.statements for t in (s.leading, s.trailing)] + [self.tail]
        for text in trivia:
            if "\n" in text:
                return "\r\n" if "\r\n" in text else "\n"
        return "\n"

    def positions_of(self, kind: StatementKind) -> List[int]:
        return [i for i, s in enumerate(self.statements) if s.kind is kind]

    def find(self, kind: StatementKind) -> Optional[int]:
        for i, statement in enumerate(self.statements):
            if statement.kind is kind:
                return i
        return None

    def replace(self, index: int, text: str) -> Statement:
        """Replace the statement at ``index`` with freshly parsed ``text``."""
        from .parser import parse_statement

        old = self.statements[index]
        new = parse_statement(text, self.dialect)
        new.leading = old.leading
        new.trailing = old.trailing
        self.statements[index] = new
        return new

    def insert(self, index: int, text: str) -> Statement:
        """
        Insert a freshly parsed statement before ``index``.

        The new statement takes over the leading trivia of the statement it
        displaces, so comments above that statement stay at the top.
        """
        from .parser import parse_statement

        new = parse_statement(text, self.dialect)
        newline = self.newline
        if index < len(self.statements):
            displaced = self.statements[index]
            new.leading = displaced.leading
            displaced.leading = newline
        elif self.statements:
            new.leading = newline
        self.statements.insert(index, new)
        return new

    def remove(self, index: int) -> Statement:
        return self.statements.pop(index)

    def render(self) -> str:
        """Serialize the module back to source text."""
        parts = []
        for statement in self.statements:
            parts.append(statement.leading)
            parts.append(statement.text)
            parts.append(statement.trailing)
        parts.append(self.tail)
        return "".join(parts)
