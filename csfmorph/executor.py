"""
File writing for csfmorph.

This module provides the MorphExecutor class that handles all file I/O for
transformed story modules:

- Atomic write sessions with rollback capability
- Optional backups of modules rewritten in place
- Truncate or append writes for split outputs
- Dry runs that record planned writes without touching disk

Example:
    >>> executor = MorphExecutor(write_mode=WriteMode.TRUNCATE)
    >>> with executor.atomic_write_session():
    ...     executor.write_outputs(result.outputs)
"""

from __future__ import annotations

import logging
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import WriteMode
from .morph.splitter import SplitOutput

logger = logging.getLogger(__name__)


class MorphExecutor:
    """
    Writes transformation results with rollback on failure.

    Attributes:
        write_mode: Truncate (default) or append for split outputs
        dry_run: Record writes without performing them
        backup_enabled: Copy a module aside before rewriting it in place
        encoding: Text encoding for all writes

    State Attributes:
        written: Paths written (or planned, in dry-run mode) since the last reset
        _created_files: Files that did not exist before the current session
        _previous_contents: Original text of files the current session overwrote
    """

    def __init__(
        self,
        write_mode: WriteMode = WriteMode.TRUNCATE,
        dry_run: bool = False,
        backup_enabled: bool = False,
        encoding: str = "utf-8",
    ):
        self.write_mode = write_mode
        self.dry_run = dry_run
        self.backup_enabled = backup_enabled
        self.encoding = encoding

        self.written: List[Path] = []
        self.backups: List[Path] = []
        self._created_files: List[Path] = []
        self._previous_contents: Dict[Path, str] = {}

    @contextmanager
    def atomic_write_session(self):
        """
        Context manager for atomic write operations with rollback.

        Raises:
            Exception: Re-raises any exception after rollback
        """
        self._created_files = []
        self._previous_contents = {}
        try:
            yield
        except Exception:
            self.rollback()
            raise
        finally:
            self._created_files = []
            self._previous_contents = {}

    def rollback(self) -> None:
        """Undo every write made during the session."""
        logger.warning("Rolling back changes...")
        for path in reversed(self._created_files):
            try:
                if path.exists():
                    path.unlink()
            except OSError as e:
                logger.error("Failed to remove %s: %s", path, e)

        for path, content in self._previous_contents.items():
            try:
                path.write_text(content, encoding=self.encoding)
                logger.info("Restored: %s", path)
            except OSError as e:
                logger.error("Failed to restore %s: %s", path, e)

        self._created_files = []
        self._previous_contents = {}

    def _remember(self, path: Path) -> None:
        if path in self._previous_contents or path in self._created_files:
            return
        if path.exists():
            self._previous_contents[path] = path.read_text(encoding=self.encoding)
        else:
            self._created_files.append(path)

    def create_backup(self, filepath: Path) -> Optional[Path]:
        """
        Create backup of a module before rewriting it.

        Returns:
            Path to backup file or None if backup disabled
        """
        if not self.backup_enabled or self.dry_run:
            return None

        backup_path = filepath.parent / f"{filepath.name}.backup_{int(time.time())}"
        shutil.copy2(filepath, backup_path)
        self.backups.append(backup_path)
        logger.info("Backup created: %s", backup_path)
        return backup_path

    def write_module(self, path: Path, text: str) -> None:
        """Save a module rewritten in place."""
        self.written.append(path)
        if self.dry_run:
            logger.info("[dry-run] would write %s", path)
            return

        self.create_backup(path)
        self._remember(path)
        path.write_text(text, encoding=self.encoding)
        logger.debug("Wrote %s", path)

    def write_output(self, path: Path, text: str, mode: Optional[WriteMode] = None) -> None:
        """Write one split output, creating parent directories as needed."""
        mode = mode or self.write_mode
        self.written.append(path)
        if self.dry_run:
            logger.info("[dry-run] would %s %s", "append to" if mode is WriteMode.APPEND else "write", path)
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        self._remember(path)
        if mode is WriteMode.APPEND:
            with open(path, "a", encoding=self.encoding) as f:
                f.write(text)
        else:
            path.write_text(text, encoding=self.encoding)
        logger.debug("Wrote %s (%s)", path, mode.value)

    def write_outputs(self, outputs: Iterable[SplitOutput], mode: Optional[WriteMode] = None) -> List[Path]:
        paths = []
        for output in outputs:
            self.write_output(output.path, output.text, mode)
            paths.append(output.path)
        return paths
