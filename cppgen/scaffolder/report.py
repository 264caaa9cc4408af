"""Generation bookkeeping and the filesystem sink the generator writes through."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from cppgen.errors import FileWriteFailure


class FileSink:
    """Creates directories and writes files on the local filesystem.

    Both operations raise :class:`OSError` on failure; the generator turns
    that into a per-file :class:`FileWriteFailure`.
    """

    def make_dir(self, path: Path) -> bool:
        """Create *path* (and parents).  Returns ``False`` if it already existed."""
        if path.is_dir():
            return False
        path.mkdir(parents=True, exist_ok=True)
        return True

    def write_file(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@dataclass
class GenerationReport:
    """What a single ``generate()`` call actually produced.

    Paths in :attr:`directories` and :attr:`files` are POSIX-style and
    relative to :attr:`project_root`, in the order they were created.
    """

    project_root: Path
    directories: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    failures: list[FileWriteFailure] = field(default_factory=list)

    def record_dir(self, relative: str) -> None:
        if relative not in self.directories:
            self.directories.append(relative)

    def record_file(self, relative: str) -> None:
        if relative not in self.files:
            self.files.append(relative)

    def record_failure(self, failure: FileWriteFailure) -> None:
        self.failures.append(failure)

    def has_dir(self, relative: str) -> bool:
        return relative.rstrip("/") in self.directories

    def has_file(self, relative: str) -> bool:
        return relative in self.files

    def files_in(self, directory: str) -> list[str]:
        """Return the names of files written directly inside *directory*."""
        prefix = PurePosixPath(directory)
        return [
            PurePosixPath(f).name for f in self.files if PurePosixPath(f).parent == prefix
        ]

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> dict[str, str]:
        """Key/value rows for the CLI summary table."""
        return {
            "Project root": str(self.project_root),
            "Directories": str(len(self.directories)),
            "Files": str(len(self.files)),
            "Failures": str(len(self.failures)),
        }
