"""Locate story files from glob patterns."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


def _is_excluded(path: Path, root: Path, exclude_patterns: Sequence[str]) -> bool:
    try:
        rel = path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        rel = path.as_posix()
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch("/" + rel, pattern):
            return True
    return False


def discover_story_files(
    patterns: Iterable[str],
    root: Optional[Union[str, Path]] = None,
    exclude_patterns: Optional[Sequence[str]] = None,
) -> List[Path]:
    """
    Expand glob patterns into a sorted, de-duplicated list of files.

    Args:
        patterns: Glob patterns (``**`` allowed) or plain file paths,
            relative to ``root`` unless absolute
        root: Base directory; defaults to the current directory
        exclude_patterns: fnmatch patterns matched against root-relative paths
    """
    base = Path(root) if root else Path.cwd()
    exclude_patterns = list(exclude_patterns or [])
    found = set()

    for pattern in patterns:
        if not any(ch in pattern for ch in _GLOB_CHARS):
            candidate = Path(pattern)
            candidate = candidate if candidate.is_absolute() else base / candidate
            if candidate.is_file():
                found.add(candidate)
            else:
                logger.warning("No such file: %s", candidate)
            continue

        if Path(pattern).is_absolute():
            anchor = Path(Path(pattern).anchor)
            matches = anchor.glob(str(Path(pattern).relative_to(anchor)))
        else:
            matches = base.glob(pattern)

        count = 0
        for match in matches:
            if match.is_file() and not _is_excluded(match, base, exclude_patterns):
                found.add(match)
                count += 1
        logger.debug("Pattern %s matched %d files", pattern, count)

    return sorted(found)
