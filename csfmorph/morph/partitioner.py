"""
Partition a module's statements into shared and per-story-group parts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from ..errors import StructuralError
from ..source.model import SourceUnit, Statement, StatementKind
from ..source.syntax import default_export_value

logger = logging.getLogger(__name__)


@dataclass
class StoryGroup:
    """A default export and the statements that belong to it."""

    default_export: Statement
    members: List[Statement]
    start: int
    end: int

    @property
    def expression(self) -> Any:
        return default_export_value(self.default_export.node)


@dataclass
class Partition:
    """
    Result of scanning one module.

    ``imports`` and ``locals`` are collected regardless of position;
    ``default_export_positions`` are indices into the full statement list
    in source order.
    """

    statements: Sequence[Statement]
    imports: List[Statement] = field(default_factory=list)
    locals: List[Statement] = field(default_factory=list)
    default_export_positions: List[int] = field(default_factory=list)

    @property
    def default_export_count(self) -> int:
        return len(self.default_export_positions)

    def require_default_exports(self, module_path: Optional[str] = None) -> None:
        if not self.default_export_positions:
            raise StructuralError("no default export found", module_path)

    def group_ranges(self) -> List[Tuple[int, int]]:
        """
        Half-open ``[start, end)`` ranges, one per default export.

        Group i spans up to the next default export; the last group runs
        to the end of the module.
        """
        positions = self.default_export_positions
        bounds = list(positions[1:]) + [len(self.statements)]
        return list(zip(positions, bounds))

    def groups(self, module_path: Optional[str] = None) -> List[StoryGroup]:
        self.require_default_exports(module_path)
        return [
            StoryGroup(
                default_export=self.statements[start],
                members=list(self.statements[start:end]),
                start=start,
                end=end,
            )
            for start, end in self.group_ranges()
        ]


def partition_statements(statements: Sequence[Statement]) -> Partition:
    partition = Partition(statements=statements)
    for index, statement in enumerate(statements):
        if statement.kind is StatementKind.IMPORT:
            partition.imports.append(statement)
        elif statement.kind is StatementKind.UNEXPORTED_DECLARATION:
            partition.locals.append(statement)
        elif statement.kind is StatementKind.DEFAULT_EXPORT_ASSIGNMENT:
            partition.default_export_positions.append(index)
    return partition


def partition_unit(unit: SourceUnit) -> Partition:
    partition = partition_statements(unit.statements)
    logger.debug(
        "%s: %d imports, %d locals, %d default exports",
        unit.path,
        len(partition.imports),
        len(partition.locals),
        partition.default_export_count,
    )
    return partition
