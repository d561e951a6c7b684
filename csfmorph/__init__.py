"""
csfmorph - Storybook CSF2 to CSF3 migration

Rewrites story modules with a single default export into the CSF3 shape
(``Meta``-typed ``meta`` default export, ``StoryObj``-typed stories) and
splits modules with several default exports into one module per title.
"""

__version__ = "0.1.0"

# Only expose version by default - everything else is lazy loaded
__all__ = ["__version__"]


def __getattr__(name):
    """Lazy loading of main API classes to prevent heavy imports at module level."""
    if name in {"CsfMorph", "MorphResult", "MorphReport", "MorphAction"}:
        from .api import CsfMorph, MorphAction, MorphReport, MorphResult

        return {
            "CsfMorph": CsfMorph,
            "MorphResult": MorphResult,
            "MorphReport": MorphReport,
            "MorphAction": MorphAction,
        }[name]

    if name in {"CsfMorphConfig", "WriteMode"}:
        from .config import CsfMorphConfig, WriteMode

        return {"CsfMorphConfig": CsfMorphConfig, "WriteMode": WriteMode}[name]

    if name in {"GroupSplitter", "SingleExportRewriter"}:
        from .morph import GroupSplitter, SingleExportRewriter

        return {
            "GroupSplitter": GroupSplitter,
            "SingleExportRewriter": SingleExportRewriter,
        }[name]

    raise AttributeError(f"module 'csfmorph' has no attribute '{name}'")

__all__ = [
    "__version__",
    # Main API
    "CsfMorph",
    "MorphResult",
    "MorphReport",
    "MorphAction",
    "CsfMorphConfig",
    "WriteMode",
    # Core transformations (for advanced usage)
    "GroupSplitter",
    "SingleExportRewriter",
]
