"""
Error taxonomy for csfmorph.

Fatal per-module errors are exceptions; per-group skips are plain values
(see ``SkipReason``) so sibling groups keep going.
"""

from enum import Enum
from typing import Optional


class SkipReason(str, Enum):
    """Why a story group was not written during a split."""

    NOT_OBJECT_LITERAL = "not_object_literal"
    NO_TITLE_PROPERTY = "no_title_property"
    EMPTY_TITLE = "empty_title"
    UNSAFE_PATH = "unsafe_path"
    DUPLICATE_PATH = "duplicate_path"

    def describe(self) -> str:
        return {
            SkipReason.NOT_OBJECT_LITERAL: "default export is not an object literal",
            SkipReason.NO_TITLE_PROPERTY: "no title property",
            SkipReason.EMPTY_TITLE: "no title",
            SkipReason.UNSAFE_PATH: "title resolves outside the output directory",
            SkipReason.DUPLICATE_PATH: "another group already resolved to this path",
        }[self]


class CsfMorphError(Exception):
    """Base class for errors that stop processing of one module."""

    code = "error"

    def __init__(self, message: str, module_path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.module_path = module_path

    def __str__(self) -> str:
        if self.module_path:
            return f"{self.module_path}: {self.message}"
        return self.message


class StructuralError(CsfMorphError):
    """A module lacks the default export a transformation requires."""

    code = "structural"


class MultipleDefaultExportsError(CsfMorphError):
    """The single-export rewriter was handed a module with several default exports."""

    code = "multiple_default_exports"

    def __init__(self, count: int, module_path: Optional[str] = None):
        super().__init__(
            f"found {count} default exports, skipping rewrite; "
            "use the split command to break the module into one file per title",
            module_path,
        )
        self.count = count


class SourceParseError(CsfMorphError):
    """Source text could not be parsed cleanly."""

    code = "parse"


class ConfigurationError(CsfMorphError):
    """Raised when configuration validation fails."""

    code = "configuration"
