"""Integration tests for the spec-then-scaffold flow.

These tests drive the real CLI entry point with a saved project spec and the
bundled template source, then check that the generated project directory is
complete and internally consistent: every file the README diagram lists
exists, every placeholder is filled, and the build descriptor references only
files that were generated.

No compiler or build tool is required.
"""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from cppgen import cli
from cppgen.scaffolder import Archetype, ProjectSpec


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scaffold(spec: ProjectSpec, tmp_path: Path) -> Path:
    """Save *spec*, run ``cppgen --spec`` on it and return the project root."""
    spec_path = spec.save(tmp_path / f"{spec.name}.json")
    out = tmp_path / "projects"
    assert cli.main(["--spec", str(spec_path), "--output", str(out)]) == 0
    return out / spec.name


def _diagram_entries(readme: str) -> list[str]:
    """Return the file names listed in the README structure diagram."""
    block = readme.split("## Project Structure", 1)[1].split("```")[1]
    names = []
    for line in block.strip().splitlines()[1:]:
        entry = re.sub(r"^[│├└─\s]+", "", line).split("#")[0].strip()
        names.append(entry)
    return names


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestScaffoldEndToEnd:
    """Generate complete projects and check them as a whole."""

    def test_console_app_with_everything(self, tmp_path: Path) -> None:
        spec = ProjectSpec.create(
            name="survey_tool",
            description="Collects survey answers",
            goal="Ask questions and store responses",
            author="Jane Doe",
            version="0.3.1",
            archetype=Archetype.CONSOLE_APP,
            use_cmake=True,
            include_tests=True,
            include_gitignore=True,
            include_likert_scale=True,
            include_data_dictionary=True,
            include_privacy_policy=True,
        )
        root = _scaffold(spec, tmp_path)

        generated = {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
        assert generated == {
            "src/main.cpp",
            "include/survey_tool.h",
            "src/survey_tool.cpp",
            "CMakeLists.txt",
            "tests/test_survey_tool.cpp",
            ".gitignore",
            "include/LikertScale.h",
            "src/LikertScale.cpp",
            "data_dictionary.md",
            "PRIVACY_POLICY.md",
            "README.md",
            "LICENSE",
        }

        for path in generated:
            text = (root / path).read_text(encoding="utf-8")
            assert "{{" not in text, f"unfilled placeholder in {path}"

        readme = (root / "README.md").read_text(encoding="utf-8")
        assert readme.startswith("# Survey_tool\n")
        listed = _diagram_entries(readme)
        for name in ("include/", "src/", "tests/", "build/", "main.cpp", "LikertScale.cpp",
                     "CMakeLists.txt", "PRIVACY_POLICY.md", ".gitignore", "LICENSE"):
            assert name in listed

    def test_cmake_sources_exist(self, tmp_path: Path) -> None:
        spec = ProjectSpec.create(
            name="engine",
            archetype=Archetype.SHARED_LIBRARY,
            use_cmake=True,
            include_tests=True,
            include_likert_scale=True,
        )
        root = _scaffold(spec, tmp_path)

        cmake = (root / "CMakeLists.txt").read_text(encoding="utf-8")
        referenced = set(re.findall(r"^\s+((?:src|tests)/\S+\.cpp)$", cmake, re.MULTILINE))
        assert referenced
        for source in referenced:
            assert (root / source).is_file(), source

    def test_header_only_library(self, tmp_path: Path) -> None:
        spec = ProjectSpec.create(
            name="mathlib",
            description="Header-only maths helpers",
            archetype=Archetype.HEADER_ONLY,
            include_tests=True,
        )
        root = _scaffold(spec, tmp_path)

        assert not (root / "src").exists()
        makefile = (root / "Makefile").read_text(encoding="utf-8")
        assert "HEADERS = $(wildcard include/*.h)" in makefile
        assert "$(SRCDIR)" not in makefile
        readme = (root / "README.md").read_text(encoding="utf-8")
        assert "src/" not in _diagram_entries(readme)
        assert "## Running" not in readme

    def test_second_run_overwrites_in_place(self, tmp_path: Path) -> None:
        spec = ProjectSpec.create(name="calc", description="first")
        root = _scaffold(spec, tmp_path)
        readme_before = (root / "README.md").read_text(encoding="utf-8")

        spec = ProjectSpec.create(name="calc", description="second")
        root = _scaffold(spec, tmp_path)
        readme_after = (root / "README.md").read_text(encoding="utf-8")

        assert "first" in readme_before
        assert "second" in readme_after
        assert "first" not in readme_after
