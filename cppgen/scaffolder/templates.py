"""Jinja2 rendering for the generated C++ sources and build descriptors.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``cppgen/scaffolder/templates/`` directory and renders them with the context
built from a :class:`~cppgen.scaffolder.spec.ProjectSpec`.  Document templates
(README, LICENSE, policies) live in the
:class:`~cppgen.scaffolder.template_store.TemplateStore` instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the ``.j2`` code templates.

    Undefined variables raise instead of rendering as empty strings, so a
    template that drifts from the context fails loudly.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["cpp_string"] = _cpp_string_filter
        self.env.filters["cpp_comment"] = _cpp_comment_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render one code template.

        Args:
            template_path: Template name relative to :attr:`template_dir`,
                e.g. ``"CMakeLists.txt.j2"``.
            context: Variables built by the generator from the project spec.

        Raises:
            jinja2.UndefinedError: If the template uses a variable missing
                from *context*.
        """
        return self.env.get_template(template_path).render(**context)

    def list_templates(self) -> list[str]:
        if not self.template_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in self.template_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _cpp_string_filter(value: str) -> str:
    """Escape *value* for use inside a C++ string literal."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )


def _cpp_comment_filter(value: str) -> str:
    """Flatten *value* onto one line that cannot close a ``/* */`` block."""
    return " ".join(str(value).split()).replace("*/", "* /")
