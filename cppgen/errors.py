"""Exception types shared by the template store, generator and CLI."""

from __future__ import annotations

from pathlib import Path


class CppgenError(Exception):
    """Base class for every error raised by cppgen."""


class TemplateNotFound(CppgenError, KeyError):
    """Raised when a template key is absent from the store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Template with key '{key}' not found.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return self.args[0]


class TemplateSourceError(CppgenError):
    """Raised when a template source file cannot be read at all."""


class TemplateSourceParseWarning(UserWarning):
    """A template record that could not be parsed and was skipped.

    Not raised: collected on the :class:`TemplateStore` and printed while
    loading so the remaining records still load.
    """

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"line {line}: {message}")


class FileWriteFailure(CppgenError):
    """A directory or file the generator could not create."""

    def __init__(self, path: str | Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Could not create {self.path}: {cause}")


class InvalidProjectSpec(CppgenError, ValueError):
    """Raised when a project specification fails validation."""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
