"""
Story module transformations.

Provides:
- Statement partitioning into imports, locals and story groups
- Title to output path resolution
- Splitting of multi-default-export modules
- In-place CSF3 rewrite of single-default-export modules
"""

from .partitioner import Partition, StoryGroup, partition_statements, partition_unit
from .rewriter import SingleExportRewriter
from .splitter import GroupSplitter, SkippedGroup, SplitOutput, SplitResult
from .title import TitlePath, resolve_title, sanitize_segment, title_to_path

__all__ = [
    "Partition",
    "StoryGroup",
    "partition_statements",
    "partition_unit",
    "SingleExportRewriter",
    "GroupSplitter",
    "SkippedGroup",
    "SplitOutput",
    "SplitResult",
    "TitlePath",
    "resolve_title",
    "sanitize_segment",
    "title_to_path",
]
