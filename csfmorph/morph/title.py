"""
Story titles to output path segments.

``"Category/Sub/Leaf"`` becomes ``["Sub", "Leaf"]``: the first segment is a
category and is dropped. A category-only title keeps the whole title as its
single segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..errors import SkipReason
from ..source import syntax

UNSAFE_SEGMENTS = frozenset({".", ".."})


@dataclass(frozen=True)
class TitlePath:
    title: str
    segments: Tuple[str, ...]

    def to_path(self, directory: Path, extension: str) -> Path:
        *parents, leaf = self.segments
        return directory.joinpath(*parents, f"{leaf}.{extension.lstrip('.')}")


def sanitize_segment(segment: str) -> str:
    return segment.replace(" ", "_").replace("'", "")


def title_to_path(title: str) -> Union[TitlePath, SkipReason]:
    parts = [p for p in title.split("/")[1:] if p]
    if not parts:
        parts = [title.strip("/").replace(" ", "_")]
    segments = tuple(sanitize_segment(p) for p in parts)
    if any(s in UNSAFE_SEGMENTS or not s for s in segments):
        return SkipReason.UNSAFE_PATH
    return TitlePath(title=title, segments=segments)


def read_title(expression: Any) -> Union[str, SkipReason]:
    """Literal title text of a default-export expression."""
    obj: Optional[Any] = syntax.unwrap_type_wrappers(expression)
    if obj is None or obj.type != "object":
        return SkipReason.NOT_OBJECT_LITERAL
    prop = syntax.find_object_property(obj, "title")
    if prop is None or prop.type != "pair":
        return SkipReason.NO_TITLE_PROPERTY
    value = prop.child_by_field_name("value")
    title = syntax.literal_text(value) if value is not None else ""
    if not title:
        return SkipReason.EMPTY_TITLE
    return title


def resolve_title(expression: Any) -> Union[TitlePath, SkipReason]:
    title = read_title(expression)
    if isinstance(title, SkipReason):
        return title
    return title_to_path(title)
