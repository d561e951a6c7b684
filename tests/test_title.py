"""
Tests for title extraction and path segment derivation.
"""

from pathlib import Path

import pytest

from csfmorph.errors import SkipReason
from csfmorph.morph.title import (
    TitlePath,
    read_title,
    resolve_title,
    sanitize_segment,
    title_to_path,
)
from csfmorph.source import parse_source
from csfmorph.source.syntax import default_export_value


def default_expression(source: str):
    unit = parse_source(source, "/stories/Example.stories.tsx")
    default = next(s for s in unit if s.is_default_export)
    return default_export_value(default.node)


class TestTitleToPath:
    """Tests for the pure title -> segments rule."""

    def test_category_is_dropped(self):
        """The first segment is a category, not a path component."""
        assert title_to_path("Category/Sub/Leaf").segments == ("Sub", "Leaf")

    def test_category_only_title_synthesizes_segment(self):
        """A title without slashes becomes the single segment."""
        assert title_to_path("Solo").segments == ("Solo",)

    def test_category_only_title_replaces_spaces(self):
        """Synthesized segments are sanitized too."""
        assert title_to_path("Design System").segments == ("Design_System",)

    def test_sanitize_segment(self):
        """Spaces become underscores and apostrophes are stripped."""
        assert sanitize_segment("My 'Button'") == "My_Button"

    def test_segments_are_sanitized(self):
        """Every kept segment goes through sanitization."""
        path = title_to_path("Components/Form Controls/User's Input")
        assert path.segments == ("Form_Controls", "Users_Input")

    def test_non_ascii_segments_kept(self):
        """Segments are not transliterated."""
        assert title_to_path("コンポーネント/ボタン").segments == ("ボタン",)

    @pytest.mark.parametrize("title", ["Components/..", "Components/./Button", "/"])
    def test_unsafe_segments_are_rejected(self, title):
        """Segments that would escape the output directory are refused."""
        assert title_to_path(title) is SkipReason.UNSAFE_PATH

    def test_to_path(self):
        """Segments become directories plus a leaf file with the extension."""
        path = TitlePath(title="A/B/C", segments=("B", "C"))
        assert path.to_path(Path("/out/Button"), "tsx") == Path("/out/Button/B/C.tsx")
        assert path.to_path(Path("/out/Button"), ".ts") == Path("/out/Button/B/C.ts")


class TestReadTitle:
    """Tests for reading the title property from a default export."""

    def test_string_title(self):
        """Quotes of a string literal are removed."""
        expr = default_expression('export default { title: "Components/Button" };')
        assert read_title(expr) == "Components/Button"

    def test_single_quoted_title(self):
        expr = default_expression("export default { title: 'Components/Button' };")
        assert read_title(expr) == "Components/Button"

    def test_template_literal_title(self):
        """Substitution-free template literals are unwrapped."""
        expr = default_expression("export default { title: `Components/Button` };")
        assert read_title(expr) == "Components/Button"

    def test_quoted_key(self):
        expr = default_expression('export default { "title": "Components/Button" };')
        assert read_title(expr) == "Components/Button"

    def test_not_object_literal(self):
        """A bare identifier default export has no readable title."""
        expr = default_expression("const meta = {};\nexport default meta;")
        assert read_title(expr) is SkipReason.NOT_OBJECT_LITERAL

    def test_missing_title(self):
        expr = default_expression("export default { component: Button };")
        assert read_title(expr) is SkipReason.NO_TITLE_PROPERTY

    def test_shorthand_title_is_not_plain_property(self):
        """Only key-value properties are accepted."""
        expr = default_expression('const title = "A/B";\nexport default { title };')
        assert read_title(expr) is SkipReason.NO_TITLE_PROPERTY

    def test_empty_title(self):
        expr = default_expression('export default { title: "" };')
        assert read_title(expr) is SkipReason.EMPTY_TITLE

    def test_satisfies_wrapper_is_looked_through(self):
        """Type-only assertions do not hide the object literal."""
        expr = default_expression('export default { title: "A/B" } satisfies Meta;')
        assert read_title(expr) == "A/B"

    def test_resolve_title(self):
        expr = default_expression('export default { title: "Components/Buttons/Primary Button" };')
        resolved = resolve_title(expr)
        assert isinstance(resolved, TitlePath)
        assert resolved.title == "Components/Buttons/Primary Button"
        assert resolved.segments == ("Buttons", "Primary_Button")

    def test_escaped_quote_in_title(self):
        """Escape sequences are resolved before the title is used."""
        expr = default_expression("export default { title: 'Components/Don\\'t Panic' };")
        assert read_title(expr) == "Components/Don't Panic"
        assert resolve_title(expr).segments == ("Dont_Panic",)

    def test_unicode_escape_in_title(self):
        expr = default_expression('export default { title: "Components/Caf\\u00e9" };')
        assert read_title(expr) == "Components/Café"
