"""
Main API interface for csfmorph

Provides a unified facade over parsing, the story transformations and file
output. Each module is loaded, classified once by its default-export count and
handed to exactly one of the rewriter or the splitter. Failures are confined to
the module they occur in.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import CsfMorphConfig
from .discovery import discover_story_files
from .errors import CsfMorphError, StructuralError
from .executor import MorphExecutor
from .morph.partitioner import Partition, partition_unit
from .morph.rewriter import SingleExportRewriter
from .morph.splitter import GroupSplitter, SplitResult
from .source.model import SourceUnit
from .source.parser import parse_file

logger = logging.getLogger(__name__)


class MorphAction(str, Enum):
    """What to do with a module."""

    REWRITE = "rewrite"
    SPLIT = "split"
    MIGRATE = "migrate"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Diagnostic:
    """Operator-facing message about one module."""

    module_path: str
    severity: Severity
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.module_path}: {self.message}"


@dataclass
class MorphResult:
    """Outcome for one module."""

    module_path: str
    action: Optional[MorphAction] = None
    success: bool = True
    changed: bool = False
    files_written: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(self, severity: Severity, code: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(self.module_path, severity, code, message)
        self.diagnostics.append(diagnostic)
        log = {
            Severity.INFO: logger.info,
            Severity.WARNING: logger.warning,
            Severity.ERROR: logger.error,
        }[severity]
        log("%s", diagnostic)
        if severity is Severity.ERROR:
            self.success = False
        return diagnostic

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_path": self.module_path,
            "action": self.action.value if self.action else None,
            "success": self.success,
            "changed": self.changed,
            "files_written": self.files_written,
            "diagnostics": [
                {"severity": d.severity.value, "code": d.code, "message": d.message}
                for d in self.diagnostics
            ],
        }


@dataclass
class MorphReport:
    """Outcome over all processed modules."""

    results: List[MorphResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def files_written(self) -> List[str]:
        return [p for r in self.results for p in r.files_written]

    @property
    def failed(self) -> List[MorphResult]:
        return [r for r in self.results if not r.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "modules": len(self.results),
            "files_written": self.files_written,
            "results": [r.to_dict() for r in self.results],
        }


class CsfMorph:
    """
    Facade for csfmorph.

    The ``*_unit`` methods are the pure core and never touch the file system;
    the ``*_file`` methods add loading and writing around them.
    """

    def __init__(self, config: Optional[CsfMorphConfig] = None, executor: Optional[MorphExecutor] = None):
        self.config = config or CsfMorphConfig.default()
        morph = self.config.morph_settings
        output = self.config.output_settings

        self.rewriter = SingleExportRewriter(
            storybook_module=morph.storybook_module,
            meta_identifier=morph.meta_identifier,
        )
        self.splitter = GroupSplitter(story_file_extension=morph.story_file_extension)
        self.executor = executor or MorphExecutor(
            write_mode=output.write_mode,
            dry_run=output.dry_run,
            backup_enabled=output.backup_enabled,
            encoding=output.encoding,
        )

    def load(self, path: Union[str, Path]) -> SourceUnit:
        return parse_file(
            path,
            encoding=self.config.output_settings.encoding,
            strict=self.config.morph_settings.strict_parse,
        )

    def rewrite_unit(self, unit: SourceUnit, partition: Optional[Partition] = None) -> bool:
        return self.rewriter.rewrite(unit, partition)

    def split_unit(self, unit: SourceUnit, partition: Optional[Partition] = None) -> SplitResult:
        return self.splitter.split(unit, partition)

    def rewrite_file(self, path: Union[str, Path]) -> MorphResult:
        return self.process_file(path, MorphAction.REWRITE)

    def split_file(self, path: Union[str, Path]) -> MorphResult:
        return self.process_file(path, MorphAction.SPLIT)

    def migrate_file(self, path: Union[str, Path]) -> MorphResult:
        return self.process_file(path, MorphAction.MIGRATE)

    def process_file(self, path: Union[str, Path], action: MorphAction) -> MorphResult:
        """Transform one module; errors are recorded on the result, not raised."""
        path = Path(path)
        result = MorphResult(module_path=str(path))
        logger.info("convert %s", path)
        try:
            unit = self.load(path)
            partition = partition_unit(unit)
            if action is MorphAction.MIGRATE:
                count = partition.default_export_count
                if count == 0:
                    raise StructuralError("no default export found", str(path))
                action = MorphAction.SPLIT if count > 1 else MorphAction.REWRITE
            result.action = action

            with self.executor.atomic_write_session():
                if action is MorphAction.SPLIT:
                    self._split(unit, partition, result)
                else:
                    self._rewrite(unit, partition, result)
        except CsfMorphError as e:
            result.add(Severity.ERROR, e.code, e.message)
        except (OSError, UnicodeDecodeError) as e:
            result.add(Severity.ERROR, "io", str(e))
        return result

    def _rewrite(self, unit: SourceUnit, partition: Partition, result: MorphResult) -> None:
        result.changed = self.rewrite_unit(unit, partition)
        if not result.changed:
            result.add(Severity.INFO, "unchanged", "already in CSF3 shape")
            return
        self.executor.write_module(unit.path, unit.render())
        result.files_written.append(str(unit.path))

    def _split(self, unit: SourceUnit, partition: Partition, result: MorphResult) -> None:
        split = self.split_unit(unit, partition)
        for skipped in split.skipped:
            result.add(Severity.WARNING, skipped.reason.value, f"continue: {skipped.describe()}")
        if split.dropped:
            result.add(
                Severity.WARNING,
                "dropped_statements",
                f"{len(split.dropped)} statement(s) before the first default export are not carried into split output",
            )
        written = self.executor.write_outputs(split.outputs)
        result.files_written.extend(str(p) for p in written)
        result.changed = bool(written)

    def run(
        self,
        patterns: Iterable[str],
        action: MorphAction = MorphAction.MIGRATE,
        root: Optional[Union[str, Path]] = None,
    ) -> MorphReport:
        """Process every module matched by ``patterns``."""
        files = discover_story_files(
            patterns,
            root=root,
            exclude_patterns=self.config.discovery_settings.exclude_patterns,
        )
        logger.info("Found %d story files", len(files))
        report = MorphReport(dry_run=self.executor.dry_run)
        for path in files:
            report.results.append(self.process_file(path, action))
        return report
