"""Read-only store of document templates with ``{{placeholder}}`` substitution.

The store is loaded once from a template source (see
:mod:`cppgen.scaffolder.template_source`) and never mutated afterwards, so a
single instance can back any number of generations.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from cppgen.errors import (
    TemplateNotFound,
    TemplateSourceError,
    TemplateSourceParseWarning,
)
from cppgen.utils import print_warning

from .template_source import TemplateRecord, format_insert, parse_template_source

_BUNDLED_SOURCE = Path(__file__).parent / "data" / "templates.sql"


def placeholder_token(key: str) -> str:
    """Return the literal token for *key* (``"author"`` -> ``"{{author}}"``).

    Keys that are already written as a token are returned unchanged.
    """
    if key.startswith("{{") and key.endswith("}}"):
        return key
    return "{{" + key + "}}"


def substitute(template: str, substitutions: Mapping[str, str]) -> str:
    """Replace every placeholder token in *template* in a single scan.

    All tokens are matched by one alternation, longest first and then in
    lexical order, and each match is replaced by its value.  Replacement text
    is never rescanned, so a value that itself contains a token is written out
    verbatim.
    """
    if not substitutions:
        return template

    values = {placeholder_token(key): str(value) for key, value in substitutions.items()}
    tokens = sorted(values, key=lambda token: (-len(token), token))
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda match: values[match.group(0)], template)


class TemplateStore:
    """Immutable ``key -> template text`` mapping.

    Attributes:
        parse_warnings: Records skipped while loading, in source order.
    """

    def __init__(
        self,
        templates: Mapping[str, str],
        *,
        groups: Mapping[str, str] | None = None,
        parse_warnings: list[TemplateSourceParseWarning] | None = None,
    ) -> None:
        self._templates = MappingProxyType(dict(templates))
        self._groups = MappingProxyType(dict(groups or {}))
        self.parse_warnings: tuple[TemplateSourceParseWarning, ...] = tuple(
            parse_warnings or ()
        )

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_records(
        cls,
        records: list[TemplateRecord],
        parse_warnings: list[TemplateSourceParseWarning] | None = None,
    ) -> "TemplateStore":
        """Build a store from parsed records; later records win on key clashes."""
        templates: dict[str, str] = {}
        groups: dict[str, str] = {}
        for record in records:
            templates[record.path] = record.content
            groups[record.path] = record.group
        return cls(templates, groups=groups, parse_warnings=parse_warnings)

    @classmethod
    def from_source(cls, source: str, *, origin: str = "<string>") -> "TemplateStore":
        """Parse *source* text and build a store.

        Every skipped record is reported on the console and kept in
        :attr:`parse_warnings`.
        """
        records, warnings = parse_template_source(source)
        for warning in warnings:
            print_warning(f"Warning: skipped template record in {origin}, {warning}")
        return cls.from_records(records, warnings)

    @classmethod
    def load(cls, path: str | Path) -> "TemplateStore":
        """Load a store from a UTF-8 template source file (a leading BOM is dropped).

        Raises:
            TemplateSourceError: If the file cannot be read.
        """
        source_path = Path(path)
        try:
            text = source_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateSourceError(
                f"Could not open template source: {source_path} ({exc})"
            ) from exc
        return cls.from_source(text, origin=str(source_path))

    @classmethod
    def bundled(cls) -> "TemplateStore":
        """Load the template source shipped with the package."""
        return cls.load(_BUNDLED_SOURCE)

    # -- Lookup ------------------------------------------------------------

    def get(self, key: str) -> str:
        """Return the raw template for *key*.

        Raises:
            TemplateNotFound: If *key* is not in the store.
        """
        try:
            return self._templates[key]
        except KeyError:
            raise TemplateNotFound(key) from None

    def get_and_substitute(self, key: str, substitutions: Mapping[str, str]) -> str:
        """Return the template for *key* with *substitutions* applied.

        Args:
            key: Template key, e.g. ``"README.md"``.
            substitutions: Placeholder -> value.  Keys may be bare names
                (``"author"``) or full tokens (``"{{author}}"``).

        Raises:
            TemplateNotFound: If *key* is not in the store.
        """
        return substitute(self.get(key), substitutions)

    def require(self, *keys: str) -> None:
        """Raise :class:`TemplateNotFound` for the first key that is missing."""
        for key in keys:
            if key not in self._templates:
                raise TemplateNotFound(key)

    def group_of(self, key: str) -> str:
        """Return the logical group the template for *key* was loaded under."""
        self.get(key)
        return self._groups.get(key, "")

    def keys(self) -> list[str]:
        return sorted(self._templates)

    def to_sql(self) -> str:
        """Serialise the store back into template source text."""
        lines = [
            format_insert(self._groups.get(key, ""), key, self._templates[key])
            for key in self.keys()
        ]
        return "\n".join(lines) + "\n" if lines else ""

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"TemplateStore({len(self)} templates)"
