"""Project specification: what the generator should produce.

A :class:`ProjectSpec` is validated once at construction and is immutable
afterwards.  Everything the generator decides (which directories exist, which
files are mandatory, which build target type to declare) derives from the
spec's :class:`Archetype` and its feature flags.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from cppgen.errors import InvalidProjectSpec

DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_VERSION = "1.0.0"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Names an executable may not take: ``main`` is the entry point's file stem,
# the rest are directories sitting next to the Makefile target.
_RESERVED_APP_NAMES = frozenset({"main", "build", "include", "obj", "src", "tests"})
_LIKERT_MODULE = "likertscale"


# ---------------------------------------------------------------------------
# Archetype
# ---------------------------------------------------------------------------


class Archetype(str, Enum):
    """The fixed project shapes the generator knows how to build."""

    CONSOLE_APP = "console_app"
    STATIC_LIBRARY = "static_library"
    SHARED_LIBRARY = "shared_library"
    HEADER_ONLY = "header_only"
    GUI_APP = "gui_app"
    UNIT_TEST_HARNESS = "unit_test_harness"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_library(self) -> bool:
        return self in (
            Archetype.STATIC_LIBRARY,
            Archetype.SHARED_LIBRARY,
            Archetype.HEADER_ONLY,
        )

    @property
    def is_app(self) -> bool:
        return self in (Archetype.CONSOLE_APP, Archetype.GUI_APP)

    @property
    def has_entry_point(self) -> bool:
        """Whether the archetype gets a ``src/main.cpp``."""
        return not self.is_library

    @property
    def has_sources(self) -> bool:
        """Whether the archetype gets a ``src/`` directory at all."""
        return self is not Archetype.HEADER_ONLY


_LABELS: dict[Archetype, str] = {
    Archetype.CONSOLE_APP: "Console Application",
    Archetype.STATIC_LIBRARY: "Static Library",
    Archetype.SHARED_LIBRARY: "Shared Library",
    Archetype.HEADER_ONLY: "Header-Only Library",
    Archetype.GUI_APP: "GUI Application",
    Archetype.UNIT_TEST_HARNESS: "Unit Test Framework",
}


# ---------------------------------------------------------------------------
# ProjectSpec
# ---------------------------------------------------------------------------


class ProjectSpec(BaseModel):
    """Immutable description of the project to scaffold."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Identifier used for directories, files and targets")
    description: str = Field(default="", description="One-line project description")
    goal: str = Field(default="", description="What the project is meant to achieve")
    author: str = Field(default=DEFAULT_AUTHOR)
    version: str = Field(default=DEFAULT_VERSION)
    archetype: Archetype = Field(default=Archetype.CONSOLE_APP)

    use_cmake: bool = Field(default=False, description="CMakeLists.txt instead of a Makefile")
    include_tests: bool = False
    include_gitignore: bool = False
    include_likert_scale: bool = Field(
        default=False, description="Emit the LikertScale survey question module"
    )
    include_data_dictionary: bool = False
    include_privacy_policy: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name must not be empty")
        if not _IDENTIFIER.match(value):
            raise ValueError(
                f"project name {value!r} must start with a letter or underscore "
                "and contain only letters, digits and underscores"
            )
        return value

    @field_validator("author")
    @classmethod
    def _default_author(cls, value: str) -> str:
        return value.strip() or DEFAULT_AUTHOR

    @field_validator("version")
    @classmethod
    def _default_version(cls, value: str) -> str:
        return value.strip() or DEFAULT_VERSION

    @model_validator(mode="after")
    def _check_file_collisions(self) -> "ProjectSpec":
        # Compared case-insensitively for case-folding filesystems.
        folded = self.name.lower()
        if self.archetype.has_entry_point and folded in _RESERVED_APP_NAMES:
            raise ValueError(
                f"project name {self.name!r} clashes with a generated file or "
                f"directory for a {self.archetype.label}"
            )
        if self.include_likert_scale and folded == _LIKERT_MODULE:
            raise ValueError(
                f"project name {self.name!r} clashes with the LikertScale module"
            )
        return self

    # -- Derived values ----------------------------------------------------

    @property
    def display_name(self) -> str:
        """``name`` with its first character upper-cased; the C++ class name."""
        return self.name[:1].upper() + self.name[1:]

    @property
    def include_guard(self) -> str:
        return f"{self.name.upper()}_H"

    # -- Construction helpers ---------------------------------------------

    @classmethod
    def create(cls, **fields: Any) -> "ProjectSpec":
        """Validate *fields* and build a spec.

        Raises:
            InvalidProjectSpec: If any field fails validation.
        """
        try:
            return cls(**fields)
        except ValidationError as exc:
            raise _invalid(exc) from exc

    @classmethod
    def load(cls, path: str | Path) -> "ProjectSpec":
        """Load a previously saved spec from JSON.

        Raises:
            InvalidProjectSpec: If the file is not UTF-8 or its content does
                not validate.
        """
        source = Path(path)
        try:
            raw = source.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidProjectSpec(
                f"Invalid project spec: {source} is not UTF-8 ({exc})"
            ) from exc
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise _invalid(exc) from exc

    def save(self, path: str | Path) -> Path:
        """Write the spec to *path* as JSON and return the path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target


def _invalid(exc: ValidationError) -> InvalidProjectSpec:
    details = exc.errors(include_url=False)
    messages = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'spec'}: {err['msg']}"
        for err in details
    )
    return InvalidProjectSpec(f"Invalid project spec: {messages}", errors=details)
