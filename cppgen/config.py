"""cppgen runtime configuration.

Settings that are not part of a single project specification: where the
document templates come from and where projects are written.  Uses a Pydantic
v2 model so values are validated at construction and can be serialised to and
from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from cppgen.scaffolder.template_store import TemplateStore


class Config(BaseModel):
    """Global cppgen configuration.

    Instances are created once by the CLI entry point (usually via
    :meth:`from_env`) and then passed to whatever needs them.
    """

    templates_path: Path | None = Field(
        default=None,
        description="Template source file; None means the source bundled with the package",
    )
    output_dir: Path = Field(
        default=Path("."), description="Parent directory for generated projects"
    )

    def load_store(self) -> TemplateStore:
        """Load the configured template source."""
        if self.templates_path is None:
            return TemplateStore.bundled()
        return TemplateStore.load(self.templates_path)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CPPGEN_TEMPLATES, CPPGEN_OUTPUT_DIR.
        """
        templates = os.environ.get("CPPGEN_TEMPLATES")
        return cls(
            templates_path=Path(templates) if templates else None,
            output_dir=Path(os.environ.get("CPPGEN_OUTPUT_DIR") or "."),
        )
