"""Tests for TemplateStore and placeholder substitution.

Covers:
- get / get_and_substitute / require
- Substitution semantics (all occurrences, no rescan, bare vs token keys)
- Loading from text, files and the bundled source
- Immutability and serialisation back to source text
"""

from __future__ import annotations

import pytest

from cppgen.errors import TemplateNotFound, TemplateSourceError
from cppgen.scaffolder.template_source import TemplateRecord
from cppgen.scaffolder.template_store import TemplateStore, placeholder_token, substitute

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# substitute()
# ---------------------------------------------------------------------------


class TestSubstitute:
    def test_replaces_every_occurrence(self):
        text = "{{name}} and {{name}} again, {{name}}"
        assert substitute(text, {"name": "x"}) == "x and x again, x"

    def test_empty_mapping_returns_template(self):
        text = "keep {{this}} as is"
        assert substitute(text, {}) == text

    def test_unknown_placeholders_left_alone(self):
        assert substitute("{{a}} {{b}}", {"a": "1"}) == "1 {{b}}"

    def test_bare_and_token_keys_are_equivalent(self):
        text = "by {{author}}"
        assert substitute(text, {"author": "Ada"}) == substitute(text, {"{{author}}": "Ada"})

    def test_values_are_not_rescanned(self):
        result = substitute("{{a}}-{{b}}", {"a": "{{b}}", "b": "B"})
        assert result == "{{b}}-B"

    def test_value_containing_its_own_token_terminates(self):
        assert substitute("{{loop}}", {"loop": "[{{loop}}]"}) == "[{{loop}}]"

    def test_longer_token_wins_over_prefix(self):
        text = "{{project}} / {{project_name}}"
        result = substitute(text, {"project": "P", "project_name": "calc"})
        assert result == "P / calc"

    def test_special_characters_in_values(self):
        assert substitute("{{x}}", {"x": r"\1 $0 \\g<0>"}) == r"\1 $0 \\g<0>"

    def test_placeholder_token(self):
        assert placeholder_token("author") == "{{author}}"
        assert placeholder_token("{{author}}") == "{{author}}"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_get_returns_raw_template(self, minimal_store):
        assert minimal_store.get("LICENSE") == "Copyright {{author}}\n"

    def test_get_missing_key(self, minimal_store):
        with pytest.raises(TemplateNotFound) as exc_info:
            minimal_store.get("NOTICE")
        assert exc_info.value.key == "NOTICE"
        assert str(exc_info.value) == "Template with key 'NOTICE' not found."

    def test_missing_key_is_also_a_key_error(self, minimal_store):
        with pytest.raises(KeyError):
            minimal_store.get("NOTICE")

    def test_get_and_substitute(self, minimal_store):
        text = minimal_store.get_and_substitute(
            "README.md", {"project_name": "calc", "description": "Adds"}
        )
        assert text == "# calc\n\nAdds\n"

    def test_get_and_substitute_missing_key(self, minimal_store):
        with pytest.raises(TemplateNotFound):
            minimal_store.get_and_substitute("NOTICE", {"a": "b"})

    def test_require(self, minimal_store):
        minimal_store.require("README.md", "LICENSE")
        with pytest.raises(TemplateNotFound) as exc_info:
            minimal_store.require("README.md", ".gitignore", "NOTICE")
        assert exc_info.value.key == ".gitignore"

    def test_container_protocol(self, minimal_store):
        assert "README.md" in minimal_store
        assert "NOTICE" not in minimal_store
        assert len(minimal_store) == 2
        assert list(minimal_store) == ["LICENSE", "README.md"]

    def test_source_mapping_is_copied(self):
        templates = {"a": "1"}
        store = TemplateStore(templates)
        templates["a"] = "changed"
        templates["b"] = "2"
        assert store.get("a") == "1"
        assert "b" not in store


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoading:
    def test_from_source(self, sample_source):
        store = TemplateStore.from_source(sample_source)
        assert store.keys() == ["LICENSE", "README.md"]
        assert store.group_of("LICENSE") == "demo"
        assert store.parse_warnings == ()

    def test_later_record_wins(self):
        store = TemplateStore.from_records(
            [
                TemplateRecord("one", "README.md", "first"),
                TemplateRecord("two", "README.md", "second"),
            ]
        )
        assert store.get("README.md") == "second"
        assert store.group_of("README.md") == "two"

    def test_skipped_records_are_kept_as_warnings(self):
        source = (
            "INSERT INTO templates VALUES ('g', 'README.md', 'ok');\n"
            "INSERT INTO templates VALUES ('g', 'broken');\n"
        )
        store = TemplateStore.from_source(source)
        assert store.keys() == ["README.md"]
        assert len(store.parse_warnings) == 1
        assert store.parse_warnings[0].line == 2

    def test_load_file(self, tmp_path, sample_source):
        path = tmp_path / "templates.sql"
        path.write_text(sample_source, encoding="utf-8")
        store = TemplateStore.load(path)
        assert "It's free" in store.get("LICENSE")

    def test_load_file_with_byte_order_mark(self, tmp_path):
        path = tmp_path / "templates.sql"
        path.write_text(
            "INSERT INTO templates VALUES ('g', 'LICENSE', 'MIT');\n", encoding="utf-8-sig"
        )
        store = TemplateStore.load(path)
        assert store.keys() == ["LICENSE"]
        assert store.parse_warnings == ()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(TemplateSourceError, match="Could not open template source"):
            TemplateStore.load(tmp_path / "nope.sql")

    def test_to_sql_reads_back(self, sample_source):
        store = TemplateStore.from_source(sample_source)
        again = TemplateStore.from_source(store.to_sql())
        assert again.keys() == store.keys()
        for key in store:
            assert again.get(key) == store.get(key)
            assert again.group_of(key) == store.group_of(key)

    def test_empty_store_to_sql(self):
        assert TemplateStore({}).to_sql() == ""


class TestBundledStore:
    @pytest.mark.parametrize(
        "key",
        ["README.md", "LICENSE", ".gitignore", "data_dictionary.md", "PRIVACY_POLICY.md"],
    )
    def test_has_document(self, bundled_store, key):
        assert key in bundled_store

    def test_loads_without_warnings(self, bundled_store):
        assert bundled_store.parse_warnings == ()

    def test_readme_placeholders(self, bundled_store):
        readme = bundled_store.get("README.md")
        for name in ("project_name", "description", "goal", "project_structure",
                     "build_instructions", "author", "version"):
            assert placeholder_token(name) in readme

    def test_license_placeholders(self, bundled_store):
        license_text = bundled_store.get("LICENSE")
        assert "{{year}}" in license_text
        assert "{{author}}" in license_text

    def test_escaped_quote_survives(self, bundled_store):
        assert "'response'" in bundled_store.get("data_dictionary.md")
