"""
Split a module with several default exports into one module per story title.

Each output module repeats the shared imports and local declarations, then
carries the statements of its own group. Nothing is written here; the caller
receives ``(path, text)`` pairs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..errors import SkipReason
from ..source.model import SourceUnit, Statement
from .partitioner import Partition, StoryGroup, partition_unit
from .title import TitlePath, resolve_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitOutput:
    path: Path
    text: str
    title: str


@dataclass(frozen=True)
class SkippedGroup:
    index: int
    reason: SkipReason
    title: Optional[str] = None

    def describe(self) -> str:
        label = f"group {self.index + 1}"
        if self.title:
            label += f" ({self.title})"
        return f"{label}: {self.reason.describe()}"


@dataclass
class SplitResult:
    outputs: List[SplitOutput] = field(default_factory=list)
    skipped: List[SkippedGroup] = field(default_factory=list)
    # Statements before the first default export that no output carries
    dropped: List[Statement] = field(default_factory=list)


def _join(statements: Sequence[Statement]) -> str:
    return "\n".join(s.source_text() for s in statements)


def render_group(imports: Sequence[Statement], locals_: Sequence[Statement], group: StoryGroup) -> str:
    shared = {id(s) for s in imports} | {id(s) for s in locals_}
    members = [s for s in group.members if id(s) not in shared]
    return "\n\n".join([_join(imports), _join(locals_), _join(members)]) + "\n"


def story_directory(unit: SourceUnit) -> Path:
    return unit.base_directory / unit.base_name


class GroupSplitter:
    """
    Build one output module per default export.

    Args:
        story_file_extension: Extension of the generated files, without the dot.
    """

    def __init__(self, story_file_extension: str = "tsx"):
        self.story_file_extension = story_file_extension

    def split(self, unit: SourceUnit, partition: Optional[Partition] = None) -> SplitResult:
        partition = partition or partition_unit(unit)
        groups = partition.groups(str(unit.path))
        directory = story_directory(unit)
        result = SplitResult()

        first = partition.default_export_positions[0]
        shared = {id(s) for s in partition.imports} | {id(s) for s in partition.locals}
        result.dropped = [s for s in unit.statements[:first] if id(s) not in shared]
        for statement in result.dropped:
            logger.warning(
                "%s: statement before the first default export is not carried into split output: %s",
                unit.path,
                statement.text.splitlines()[0] if statement.text else "",
            )

        logger.info("%s: %d story groups -> %s", unit.path, len(groups), directory)
        claimed: Dict[Path, int] = {}
        for index, group in enumerate(groups):
            logger.debug("%s: group %d has %d statements", unit.path, index + 1, len(group.members))
            resolved = resolve_title(group.expression)
            if isinstance(resolved, SkipReason):
                self._skip(unit, result, index, resolved)
                continue

            path = resolved.to_path(directory, self.story_file_extension)
            if path in claimed:
                self._skip(unit, result, index, SkipReason.DUPLICATE_PATH, resolved)
                continue
            claimed[path] = index

            logger.info("%s: %s -> %s", unit.path, resolved.title, path)
            result.outputs.append(
                SplitOutput(
                    path=path,
                    text=render_group(partition.imports, partition.locals, group),
                    title=resolved.title,
                )
            )
        return result

    @staticmethod
    def _skip(
        unit: SourceUnit,
        result: SplitResult,
        index: int,
        reason: SkipReason,
        title: Optional[TitlePath] = None,
    ) -> None:
        skipped = SkippedGroup(index=index, reason=reason, title=title.title if title else None)
        logger.info("%s: continue: %s", unit.path, skipped.describe())
        result.skipped.append(skipped)
