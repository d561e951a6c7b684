"""
Tests for story file discovery.
"""

from csfmorph.discovery import discover_story_files


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("export default {};\n", encoding="utf-8")
    return path


def test_recursive_glob(tmp_path):
    a = touch(tmp_path / "src" / "Button.stories.tsx")
    b = touch(tmp_path / "src" / "forms" / "Input.stories.tsx")
    touch(tmp_path / "src" / "Button.tsx")

    found = discover_story_files(["**/*.stories.tsx"], root=tmp_path)
    assert found == sorted([a, b])


def test_exclude_patterns(tmp_path):
    kept = touch(tmp_path / "src" / "Card.stories.tsx")
    touch(tmp_path / "node_modules" / "lib" / "Other.stories.tsx")

    found = discover_story_files(
        ["**/*.stories.tsx"], root=tmp_path, exclude_patterns=["**/node_modules/**"]
    )
    assert found == [kept]


def test_plain_path_and_duplicates(tmp_path):
    a = touch(tmp_path / "A.stories.tsx")
    found = discover_story_files(["A.stories.tsx", "*.stories.tsx"], root=tmp_path)
    assert found == [a]


def test_absolute_pattern(tmp_path):
    a = touch(tmp_path / "deep" / "A.stories.ts")
    found = discover_story_files([str(tmp_path / "**" / "*.stories.ts")])
    assert found == [a]


def test_missing_plain_path(tmp_path):
    assert discover_story_files(["Missing.stories.tsx"], root=tmp_path) == []
