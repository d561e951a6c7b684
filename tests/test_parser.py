"""
Tests for parsing story modules into the flat statement model.
"""

from pathlib import Path

import pytest

from csfmorph.errors import SourceParseError
from csfmorph.source import Dialect, StatementKind, parse_file, parse_source, parse_statement

MODULE = """// Button stories
import React from "react";
import { Button } from "./Button"; // the component

/* shared
   arguments */
const base = { label: "Hello" };

export default {
  title: "Components/Button",
  component: Button,
};

export const Primary = () => <Button {...base} primary />;
Primary.args = { size: "large" };
export type Props = { label: string };
interface Local { a: number }
"""


@pytest.fixture
def unit():
    return parse_source(MODULE, "/stories/Button.stories.tsx")


class TestClassification:
    """Tests for statement classification."""

    def test_kinds(self, unit):
        """Each top-level statement gets exactly one tag."""
        assert [s.kind for s in unit] == [
            StatementKind.IMPORT,
            StatementKind.IMPORT,
            StatementKind.UNEXPORTED_DECLARATION,
            StatementKind.DEFAULT_EXPORT_ASSIGNMENT,
            StatementKind.EXPORTED_DECLARATION,
            StatementKind.OTHER,
            StatementKind.EXPORTED_DECLARATION,
            StatementKind.UNEXPORTED_DECLARATION,
        ]

    def test_default_function_is_declaration(self):
        """``export default function`` is not a default-export assignment."""
        unit = parse_source("export default function Story() { return null; }\n", "/s/A.tsx")
        assert unit[0].kind is StatementKind.EXPORTED_DECLARATION

    def test_default_arrow_is_assignment(self):
        unit = parse_source("export default () => null;\n", "/s/A.tsx")
        assert unit[0].kind is StatementKind.DEFAULT_EXPORT_ASSIGNMENT

    def test_export_clause_is_other(self):
        unit = parse_source("const a = 1;\nexport { a };\n", "/s/A.ts")
        assert [s.kind for s in unit] == [
            StatementKind.UNEXPORTED_DECLARATION,
            StatementKind.OTHER,
        ]


class TestTrivia:
    """Tests for comment and whitespace preservation."""

    def test_round_trip_is_exact(self, unit):
        """Rendering an untouched module reproduces it byte for byte."""
        assert unit.render() == MODULE

    def test_leading_comments_attach_to_next_statement(self, unit):
        assert unit[0].comments == "// Button stories"
        assert unit[2].comments == "/* shared\n   arguments */"

    def test_same_line_comment_is_trailing(self, unit):
        """A comment on the statement's own line stays with it."""
        assert unit[1].trailing == " // the component"
        assert unit[2].comments.startswith("/* shared")

    def test_source_text_includes_comments(self, unit):
        assert unit[1].source_text() == 'import { Button } from "./Button"; // the component'
        assert unit[1].source_text(with_comments=False) == 'import { Button } from "./Button";'

    def test_round_trip_without_trailing_newline(self):
        text = 'import a from "a";\nexport default {}'
        assert parse_source(text, "/s/A.ts").render() == text

    def test_round_trip_non_ascii(self):
        """Byte offsets are handled for multi-byte characters."""
        text = '// 日本語のコメント\nexport default { title: "例/ボタン" };\nexport const A = () => <p>こんにちは</p>;\n'
        unit = parse_source(text, "/s/A.stories.tsx")
        assert unit.render() == text
        assert unit[1].text == "export const A = () => <p>こんにちは</p>;"

    def test_crlf_trivia(self):
        """A CRLF line break stays whole in the next statement's leading trivia."""
        text = 'import a from "a";\r\nexport default {};\r\n'
        unit = parse_source(text, "/s/A.ts")
        assert unit.render() == text
        assert unit[0].trailing == ""
        assert unit[1].leading == "\r\n"
        assert unit.tail == "\r\n"
        assert unit.newline == "\r\n"

    def test_newline_defaults_to_lf(self, unit):
        assert unit.newline == "\n"


class TestMutation:
    """Tests for replace/insert/remove by position."""

    def test_replace_keeps_trivia_and_reclassifies(self, unit):
        unit.replace(2, "export const base = 1;")
        assert unit[2].kind is StatementKind.EXPORTED_DECLARATION
        assert unit[2].comments.startswith("/* shared")

    def test_insert_takes_over_leading_trivia(self, unit):
        unit.insert(3, "const meta = 1;")
        assert unit[3].text == "const meta = 1;"
        assert unit[3].leading == "\n\n"
        assert unit[4].leading == "\n"
        assert unit[4].kind is StatementKind.DEFAULT_EXPORT_ASSIGNMENT

    def test_insert_at_top(self):
        unit = parse_source('import a from "a";\n', "/s/A.ts")
        unit.insert(0, 'import b from "b";')
        assert unit.render() == 'import b from "b";\nimport a from "a";\n'

    def test_remove(self, unit):
        removed = unit.remove(5)
        assert removed.kind is StatementKind.OTHER
        assert "Primary.args" not in unit.render()

    def test_apply_edits_rejects_overlap(self, unit):
        statement = unit[2]
        with pytest.raises(ValueError):
            statement.apply_edits(
                [
                    (statement.base, statement.base + 5, "x"),
                    (statement.base + 2, statement.base + 8, "y"),
                ]
            )


class TestErrors:
    """Tests for parse failures."""

    def test_strict_mode_raises(self):
        with pytest.raises(SourceParseError) as exc_info:
            parse_source("export default {\n", "/s/Broken.tsx")
        assert exc_info.value.module_path == "/s/Broken.tsx"
        assert "line" in exc_info.value.message

    def test_non_strict_mode_continues(self):
        unit = parse_source("export default {\n", "/s/Broken.tsx", strict=False)
        assert unit.path == Path("/s/Broken.tsx")

    def test_parse_statement_requires_single_statement(self):
        with pytest.raises(SourceParseError):
            parse_statement("const a = 1; const b = 2;", Dialect.TYPESCRIPT)

    def test_dialect_from_suffix(self):
        assert Dialect.for_path(Path("A.stories.tsx")) is Dialect.TSX
        assert Dialect.for_path(Path("A.stories.ts")) is Dialect.TYPESCRIPT

    def test_parse_file(self, tmp_path):
        path = tmp_path / "Button.stories.tsx"
        path.write_text(MODULE, encoding="utf-8")
        unit = parse_file(path)
        assert unit.base_name == "Button"
        assert unit.base_directory == tmp_path
        assert unit.render() == MODULE
