"""
Tests for the CsfMorph facade.
"""

import pytest

from csfmorph.api import CsfMorph, MorphAction, Severity
from csfmorph.config import CsfMorphConfig, WriteMode

SINGLE = """import React from "react";
import { Button } from "./Button";

export default {
  title: "Components/Button",
  component: Button,
};

export const Primary = () => <Button primary />;
"""

MULTI = """import React from "react";

export default { title: "Components/Button" };
export const Primary = () => <button />;

export default { title: "Components/Inputs/Text Field" };
export const Filled = () => <input />;
"""


@pytest.fixture
def stories(tmp_path):
    (tmp_path / "Button.stories.tsx").write_text(SINGLE, encoding="utf-8")
    (tmp_path / "Many.stories.tsx").write_text(MULTI, encoding="utf-8")
    (tmp_path / "Empty.stories.tsx").write_text("export const A = {};\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def morph():
    return CsfMorph(CsfMorphConfig.default())


class TestMigrate:
    """Routing by default-export count."""

    def test_single_default_export_is_rewritten(self, stories, morph):
        path = stories / "Button.stories.tsx"
        result = morph.migrate_file(path)

        assert result.success
        assert result.action is MorphAction.REWRITE
        assert result.files_written == [str(path)]
        text = path.read_text(encoding="utf-8")
        assert text.startswith('import { Meta, StoryObj } from "@storybook/react";\n')
        assert "} satisfies Meta;\nexport default meta;" in text

    def test_multiple_default_exports_are_split(self, stories, morph):
        path = stories / "Many.stories.tsx"
        result = morph.migrate_file(path)

        assert result.success
        assert result.action is MorphAction.SPLIT
        assert result.files_written == [
            str(stories / "Many" / "Button.tsx"),
            str(stories / "Many" / "Inputs" / "Text_Field.tsx"),
        ]
        assert path.read_text(encoding="utf-8") == MULTI
        assert (stories / "Many" / "Inputs" / "Text_Field.tsx").read_text(encoding="utf-8") == (
            'import React from "react";\n\n\n\n'
            'export default { title: "Components/Inputs/Text Field" };\n'
            "export const Filled = () => <input />;\n"
        )

    def test_zero_default_exports_is_structural_error(self, stories, morph):
        result = morph.migrate_file(stories / "Empty.stories.tsx")

        assert not result.success
        assert [d.code for d in result.diagnostics] == ["structural"]
        assert result.files_written == []

    def test_rewrite_twice_is_unchanged(self, stories, morph):
        path = stories / "Button.stories.tsx"
        morph.rewrite_file(path)
        first = path.read_text(encoding="utf-8")

        result = morph.rewrite_file(path)

        assert result.success
        assert not result.changed
        assert result.files_written == []
        assert [d.code for d in result.diagnostics] == ["unchanged"]
        assert path.read_text(encoding="utf-8") == first


class TestExplicitActions:
    def test_rewrite_refuses_multiple_default_exports(self, stories, morph):
        path = stories / "Many.stories.tsx"
        result = morph.rewrite_file(path)

        assert not result.success
        assert result.diagnostics[0].code == "multiple_default_exports"
        assert "split" in result.diagnostics[0].message
        assert path.read_text(encoding="utf-8") == MULTI
        assert not (stories / "Many").exists()

    def test_split_single_default_export(self, stories, morph):
        result = morph.split_file(stories / "Button.stories.tsx")
        assert result.files_written == [str(stories / "Button" / "Button.tsx")]

    def test_split_skips_are_warnings(self, tmp_path, morph):
        path = tmp_path / "Mixed.stories.tsx"
        path.write_text(
            'export default { title: "" };\nexport const A = {};\n'
            'export default { title: "X/Ok" };\nexport const B = {};\n',
            encoding="utf-8",
        )
        result = morph.split_file(path)

        assert result.success
        assert [(d.severity, d.code) for d in result.diagnostics] == [(Severity.WARNING, "empty_title")]
        assert result.diagnostics[0].message.startswith("continue:")
        assert result.files_written == [str(tmp_path / "Mixed" / "Ok.tsx")]

    def test_split_append_mode(self, stories):
        config = CsfMorphConfig.default()
        config.output_settings.write_mode = WriteMode.APPEND
        morph = CsfMorph(config)

        morph.split_file(stories / "Many.stories.tsx")
        morph.split_file(stories / "Many.stories.tsx")

        text = (stories / "Many" / "Button.tsx").read_text(encoding="utf-8")
        assert text.count('export default { title: "Components/Button" };') == 2

    def test_parse_error_is_reported(self, tmp_path, morph):
        path = tmp_path / "Broken.stories.tsx"
        path.write_text("export default {\n", encoding="utf-8")
        result = morph.migrate_file(path)
        assert not result.success
        assert result.diagnostics[0].code == "parse"

    def test_missing_file_is_io_error(self, tmp_path, morph):
        result = morph.migrate_file(tmp_path / "Nope.stories.tsx")
        assert not result.success
        assert result.diagnostics[0].code == "io"


class TestRun:
    def test_failures_are_isolated(self, stories, morph):
        report = morph.run(["*.stories.tsx"], root=stories)

        assert len(report.results) == 3
        assert not report.success
        assert [r.module_path for r in report.failed] == [str(stories / "Empty.stories.tsx")]
        assert len(report.files_written) == 3

    def test_dry_run_writes_nothing(self, stories):
        config = CsfMorphConfig.default()
        config.output_settings.dry_run = True
        before = sorted(p.name for p in stories.iterdir())

        report = CsfMorph(config).run(["*.stories.tsx"], root=stories)

        assert report.dry_run
        assert sorted(p.name for p in stories.iterdir()) == before
        assert (stories / "Button.stories.tsx").read_text(encoding="utf-8") == SINGLE
        assert report.to_dict()["modules"] == 3

    def test_unit_core_does_not_touch_disk(self, stories, morph):
        unit = morph.load(stories / "Button.stories.tsx")
        assert morph.rewrite_unit(unit) is True
        assert (stories / "Button.stories.tsx").read_text(encoding="utf-8") == SINGLE
