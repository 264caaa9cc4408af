"""Reader and writer for the SQL-style template source.

Templates are shipped as a sequence of ``INSERT`` statements::

    INSERT INTO templates (project_name, file_path, content)
    VALUES ('default', 'LICENSE', 'MIT License

    Copyright (c) {{year}} {{author}}
    ...');

String literals are single-quoted, may span several lines and escape a literal
quote by doubling it (``''``).  The reader below is an explicit character
state machine rather than a search for quote positions, so escaped quotes,
semicolons and parentheses inside a literal never confuse it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from cppgen.errors import TemplateSourceParseWarning

__all__ = [
    "TemplateRecord",
    "format_insert",
    "parse_template_source",
]


_INSERT_PREFIX = re.compile(r"^\s*INSERT\s+INTO\s+templates\b", re.IGNORECASE)
_STATEMENT_HEAD = re.compile(
    r"^\s*INSERT\s+INTO\s+templates\s*(?:\((?P<columns>[^()']*)\))?\s*VALUES\s*\(",
    re.IGNORECASE,
)
_COLUMN_NAMES = ("project_name", "file_path", "content")


@dataclass(frozen=True, slots=True)
class TemplateRecord:
    """One ``(group, path, content)`` triple read from the source."""

    group: str
    path: str
    content: str


class _State(Enum):
    OUTSIDE = "outside"
    IN_QUOTE = "in_quote"
    QUOTE_IN_QUOTE = "quote_in_quote"
    COMMENT = "comment"


@dataclass(slots=True)
class _Statement:
    text: str
    line: int
    unterminated: bool = False


# ---------------------------------------------------------------------------
# Tokenisation
# ---------------------------------------------------------------------------


def _split_statements(source: str) -> list[_Statement]:
    """Split *source* on ``;`` outside literals and drop ``--`` comments."""
    statements: list[_Statement] = []
    buf: list[str] = []
    state = _State.OUTSIDE
    line = 1
    start_line = 1
    pending = True
    i = 0

    while i < len(source):
        ch = source[i]
        if pending and state is _State.OUTSIDE and not ch.isspace() and ch not in "-;":
            start_line = line
            pending = False

        if state is _State.COMMENT:
            if ch == "\n":
                state = _State.OUTSIDE
                buf.append(ch)
        elif state is _State.IN_QUOTE:
            buf.append(ch)
            if ch == "'":
                state = _State.QUOTE_IN_QUOTE
        elif state is _State.QUOTE_IN_QUOTE:
            if ch == "'":
                # Doubled quote: still inside the literal.
                buf.append(ch)
                state = _State.IN_QUOTE
            else:
                state = _State.OUTSIDE
                continue
        else:
            if ch == "'":
                buf.append(ch)
                state = _State.IN_QUOTE
            elif ch == "-" and source.startswith("--", i):
                state = _State.COMMENT
                i += 1
            elif ch == ";":
                text = "".join(buf)
                if text.strip():
                    statements.append(_Statement(text, start_line))
                buf = []
                pending = True
            else:
                buf.append(ch)

        if ch == "\n":
            line += 1
        i += 1

    text = "".join(buf)
    if text.strip():
        statements.append(
            _Statement(text, start_line, unterminated=state is _State.IN_QUOTE)
        )
    return statements


def _read_values(body: str) -> tuple[list[str | None], str] | None:
    """Read a comma separated value list up to its closing parenthesis.

    Returns the values (``None`` for anything that is not a string literal)
    and the text after the closing parenthesis, or ``None`` when the list is
    not closed.
    """
    values: list[str | None] = []
    literal: list[str] = []
    bare: list[str] = []
    state = _State.OUTSIDE
    have_literal = False

    def flush() -> None:
        nonlocal have_literal
        if have_literal and not "".join(bare).strip():
            values.append("".join(literal))
        else:
            values.append(None)
        literal.clear()
        bare.clear()
        have_literal = False

    for pos, ch in enumerate(body):
        if state is _State.IN_QUOTE:
            if ch == "'":
                state = _State.QUOTE_IN_QUOTE
            else:
                literal.append(ch)
            continue
        if state is _State.QUOTE_IN_QUOTE:
            if ch == "'":
                literal.append("'")
                state = _State.IN_QUOTE
                continue
            state = _State.OUTSIDE

        if ch == "'":
            if have_literal or "".join(bare).strip():
                bare.append(ch)
            state = _State.IN_QUOTE
            have_literal = True
        elif ch == ",":
            flush()
        elif ch == ")":
            flush()
            return values, body[pos + 1 :]
        else:
            bare.append(ch)

    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_template_source(
    source: str,
) -> tuple[list[TemplateRecord], list[TemplateSourceParseWarning]]:
    """Parse every template record in *source*.

    Statements that are not ``INSERT INTO templates`` are ignored.  Insert
    statements that cannot be read are skipped and reported as warnings.

    Args:
        source: Full text of the template source.

    Returns:
        A ``(records, warnings)`` tuple, records in source order.
    """
    records: list[TemplateRecord] = []
    warnings: list[TemplateSourceParseWarning] = []

    for statement in _split_statements(source):
        if not _INSERT_PREFIX.match(statement.text):
            continue

        def skip(reason: str) -> None:
            warnings.append(TemplateSourceParseWarning(statement.line, reason))

        if statement.unterminated:
            skip("unterminated string literal")
            continue

        head = _STATEMENT_HEAD.match(statement.text)
        if head is None:
            skip("expected 'VALUES (' after INSERT INTO templates")
            continue

        parsed = _read_values(statement.text[head.end() :])
        if parsed is None:
            skip("value list is not closed")
            continue
        values, trailing = parsed
        if trailing.strip():
            skip(f"unexpected text after value list: {trailing.strip()[:40]!r}")
            continue

        columns = head.group("columns")
        if columns is not None:
            names = [c.strip().strip('"`').lower() for c in columns.split(",")]
            if len(names) != len(values):
                skip(f"{len(names)} columns but {len(values)} values")
                continue
            row = dict(zip(names, values))
            missing = [c for c in _COLUMN_NAMES if c not in row]
            if missing:
                skip(f"missing column(s): {', '.join(missing)}")
                continue
            picked = [row[c] for c in _COLUMN_NAMES]
        else:
            if len(values) != 3:
                skip(f"expected 3 values, found {len(values)}")
                continue
            picked = values

        if any(value is None for value in picked):
            skip("template values must be quoted strings")
            continue

        group, path, content = picked
        if not path:
            skip("empty file_path")
            continue
        records.append(TemplateRecord(group=group, path=path, content=content))

    return records, warnings


def format_insert(group: str, path: str, content: str) -> str:
    """Render one record as an ``INSERT`` statement the parser reads back."""

    def quote(value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    return (
        "INSERT INTO templates (project_name, file_path, content) VALUES ("
        f"{quote(group)}, {quote(path)}, {quote(content)});"
    )
