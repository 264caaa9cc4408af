"""Shared pytest fixtures for the cppgen test suite.

Provides reusable fixtures for:
- The bundled template store and small hand-written stores
- A factory for ``ProjectSpec`` instances with sensible defaults
- A generator helper that writes into ``tmp_path``
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from cppgen.scaffolder import GenerationReport, ProjectGenerator, ProjectSpec, TemplateStore


# ---------------------------------------------------------------------------
# Template stores
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def bundled_store() -> TemplateStore:
    """The template store shipped with the package."""
    return TemplateStore.bundled()


@pytest.fixture
def minimal_store() -> TemplateStore:
    """A store holding only the two mandatory documents."""
    return TemplateStore(
        {
            "README.md": "# {{project_name}}\n\n{{description}}\n",
            "LICENSE": "Copyright {{author}}\n",
        }
    )


@pytest.fixture
def sample_source() -> str:
    """A template source exercising escaped quotes and multi-line content."""
    return textwrap.dedent(
        """\
        -- sample templates
        CREATE TABLE templates (project_name TEXT, file_path TEXT, content TEXT);

        INSERT INTO templates (project_name, file_path, content) VALUES ('demo', 'LICENSE', 'Copyright {{author}}
        It''s free; use it (responsibly).');
        INSERT INTO templates VALUES ('demo', 'README.md', '# {{project_name}}');
        """
    )


# ---------------------------------------------------------------------------
# Specs & generation
# ---------------------------------------------------------------------------


@pytest.fixture
def make_spec() -> Callable[..., ProjectSpec]:
    """Factory building a ``ProjectSpec`` with test defaults."""

    def _make(**overrides: Any) -> ProjectSpec:
        fields: dict[str, Any] = {
            "name": "calc",
            "description": "A small calculator",
            "goal": "Add numbers",
            "author": "Test Author",
        }
        fields.update(overrides)
        return ProjectSpec.create(**fields)

    return _make


@pytest.fixture
def generate(
    tmp_path: Path, bundled_store: TemplateStore
) -> Callable[..., GenerationReport]:
    """Run a quiet generation of *spec* into ``tmp_path``."""

    def _generate(spec: ProjectSpec, store: TemplateStore | None = None) -> GenerationReport:
        generator = ProjectGenerator(spec, store or bundled_store, quiet=True)
        return generator.generate(tmp_path)

    return _generate
