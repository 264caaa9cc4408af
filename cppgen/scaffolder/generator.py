"""Main scaffolding orchestrator.

Takes a :class:`ProjectSpec` and a :class:`TemplateStore` and materialises a
C++ project skeleton: header, implementation, entry point, build descriptor,
tests, optional modules, README and LICENSE.  Steps run in a fixed order and
every directory and file actually created is recorded in a
:class:`GenerationReport`, which the README's structure diagram is built from.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any, Callable

from cppgen.errors import FileWriteFailure, TemplateNotFound
from cppgen.utils import print_error, print_info

from .report import FileSink, GenerationReport
from .spec import Archetype, ProjectSpec
from .template_store import TemplateStore, placeholder_token
from .templates import TemplateRenderer

SOURCE_EXT = ".cpp"
MANDATORY_TEMPLATES = ("README.md", "LICENSE")

_CMAKE_VERSION = re.compile(r"^\d+(?:\.\d+){0,3}")

# Comments shown next to entries in the README structure diagram.
_TREE_NOTES: dict[str, str] = {
    "build": "Build directory",
    "CMakeLists.txt": "CMake configuration",
    "Makefile": "Build configuration",
    "README.md": "This file",
    ".gitignore": "Git ignore rules",
    "LICENSE": "License file",
    "data_dictionary.md": "Data file formats",
    "PRIVACY_POLICY.md": "Privacy policy",
    "main.cpp": "Entry point",
    "LikertScale.h": "Survey question module",
    "LikertScale.cpp": "Survey question module",
}

# Root-level entries in the order the diagram lists them.
_ROOT_ORDER = (
    "build",
    "CMakeLists.txt",
    "Makefile",
    "data_dictionary.md",
    "PRIVACY_POLICY.md",
    "README.md",
    ".gitignore",
    "LICENSE",
)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generate a C++ project skeleton for one :class:`ProjectSpec`.

    Emission order:

    1. directories (root, ``include/``, ``src/``, ``tests/``, ``build/``)
    2. ``src/main.cpp`` for archetypes with an entry point
    3. ``include/<name>.h``
    4. ``src/<name>.cpp`` unless header-only
    5. ``CMakeLists.txt`` or ``Makefile``
    6. ``tests/test_<name>.cpp``
    7. ``.gitignore``
    8. optional modules: LikertScale, data dictionary, privacy policy
    9. ``README.md`` and ``LICENSE``

    A directory or file that cannot be written is recorded as a
    :class:`FileWriteFailure` and generation moves on.  Missing README or
    LICENSE templates abort before anything is written.
    """

    def __init__(
        self,
        spec: ProjectSpec,
        store: TemplateStore,
        *,
        renderer: TemplateRenderer | None = None,
        sink: FileSink | None = None,
        quiet: bool = False,
    ) -> None:
        self.spec = spec
        self.store = store
        self.renderer = renderer or TemplateRenderer()
        self.sink = sink or FileSink()
        self.quiet = quiet

    # -- Public API --------------------------------------------------------

    def generate(self, output_dir: str | Path = ".") -> GenerationReport:
        """Generate the complete project structure.

        Args:
            output_dir: Parent directory where the project folder will be
                created.  A subdirectory named after the project is created
                inside it; existing files there are overwritten.

        Returns:
            The report of everything created and every failure.

        Raises:
            TemplateNotFound: If the README or LICENSE template is missing.
        """
        self.store.require(*MANDATORY_TEMPLATES)

        spec = self.spec
        root = Path(output_dir) / spec.name
        report = GenerationReport(project_root=root)
        context = self._build_context()

        # 1. Directory structure
        self._create_directory_structure(root, report)

        # 2. Entry point
        if spec.archetype.has_entry_point:
            self._emit(report, f"src/main{SOURCE_EXT}", lambda: self._render("main.cpp.j2", context))

        # 3. Header
        self._emit(report, f"include/{spec.name}.h", lambda: self._render("header.h.j2", context))

        # 4. Implementation
        if spec.archetype.has_sources:
            self._emit(
                report,
                f"src/{spec.name}{SOURCE_EXT}",
                lambda: self._render("source.cpp.j2", context),
            )

        # 5. Build descriptor, exactly one
        if spec.use_cmake:
            self._emit(report, "CMakeLists.txt", lambda: self._render("CMakeLists.txt.j2", context))
        else:
            self._emit(report, "Makefile", lambda: self._render("Makefile.j2", context))

        # 6. Tests (the harness archetype's entry point already is the test)
        if spec.include_tests and spec.archetype is not Archetype.UNIT_TEST_HARNESS:
            self._emit(
                report,
                f"tests/test_{spec.name}{SOURCE_EXT}",
                lambda: self._render("test.cpp.j2", context),
            )

        # 7. Ignore file
        if spec.include_gitignore:
            self._emit(report, ".gitignore", self._gitignore)

        # 8. Optional modules
        self._emit_optional_modules(report, context)

        # 9. README and LICENSE, last so the structure diagram sees everything
        self._emit(report, "README.md", lambda: self._readme(report))
        self._emit(report, "LICENSE", self._license)

        return report

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project spec."""
        spec = self.spec
        archetype = spec.archetype
        class_lower = spec.display_name.lower()
        version_match = _CMAKE_VERSION.match(spec.version)

        return {
            "name": spec.name,
            "class_name": spec.display_name,
            "guard": spec.include_guard,
            "description": spec.description,
            "goal": spec.goal,
            "author": spec.author,
            "version": spec.version,
            "cmake_version": version_match.group(0) if version_match else "",
            "archetype": archetype.value,
            "is_app": archetype.is_app,
            "is_library": archetype.is_library,
            "header_only": archetype is Archetype.HEADER_ONLY,
            "likert": spec.include_likert_scale,
            "include_tests": spec.include_tests,
            "utils_namespace": f"{class_lower}_utils",
            "test_prefix": f"test_{class_lower}",
            "sources": self._cmake_sources(),
            "test_sources": self._cmake_test_sources(),
        }

    def _cmake_sources(self) -> list[str]:
        spec = self.spec
        if not spec.archetype.has_sources:
            return []
        sources: list[str] = []
        if spec.archetype.has_entry_point:
            sources.append(f"src/main{SOURCE_EXT}")
        sources.append(f"src/{spec.name}{SOURCE_EXT}")
        if spec.include_likert_scale:
            sources.append(f"src/LikertScale{SOURCE_EXT}")
        return sources

    def _cmake_test_sources(self) -> list[str]:
        spec = self.spec
        sources = [f"tests/test_{spec.name}{SOURCE_EXT}"]
        if spec.archetype.has_sources:
            sources.append(f"src/{spec.name}{SOURCE_EXT}")
        return sources

    # -- Directory structure -----------------------------------------------

    def _create_directory_structure(self, root: Path, report: GenerationReport) -> None:
        """Create the project root and the subdirectories the spec calls for."""
        spec = self.spec
        dirs = ["include"]
        if spec.archetype.has_sources:
            dirs.append("src")
        if spec.include_tests:
            dirs.append("tests")
        if spec.use_cmake:
            dirs.append("build")

        self._mkdir(root, ".", report)
        for d in dirs:
            self._mkdir(root / d, d, report)

    def _mkdir(self, path: Path, relative: str, report: GenerationReport) -> None:
        try:
            created = self.sink.make_dir(path)
        except OSError as exc:
            self._fail(report, FileWriteFailure(path, exc))
            return
        if relative != ".":
            report.record_dir(relative)
        if created and not self.quiet:
            print_info(f"Created directory: {path}")

    # -- File emission -----------------------------------------------------

    def _emit(
        self,
        report: GenerationReport,
        relative: str,
        build: Callable[[], str],
    ) -> None:
        """Build the content for *relative* and write it under the project root.

        A missing document template or an I/O error fails this file only.  A
        path already written during this run is never written again.
        """
        path = report.project_root / relative
        if report.has_file(relative):
            self._fail(report, FileWriteFailure(path, "already generated in this run"))
            return
        try:
            content = build()
        except TemplateNotFound as exc:
            self._fail(report, FileWriteFailure(path, exc))
            return
        try:
            self.sink.write_file(path, content)
        except OSError as exc:
            self._fail(report, FileWriteFailure(path, exc))
            return
        report.record_file(relative)
        if not self.quiet:
            print_info(f"Generated: {path}")

    def _fail(self, report: GenerationReport, failure: FileWriteFailure) -> None:
        report.record_failure(failure)
        print_error(f"Error: {failure}")

    def _render(self, template: str, context: dict[str, Any], **extra: Any) -> str:
        return self.renderer.render(template, {**context, **extra})

    # -- Optional modules --------------------------------------------------

    def _emit_optional_modules(self, report: GenerationReport, context: dict[str, Any]) -> None:
        spec = self.spec
        if spec.include_likert_scale:
            header_only = not spec.archetype.has_sources
            self._emit(
                report,
                "include/LikertScale.h",
                lambda: self._render("LikertScale.h.j2", context, inline_impl=header_only),
            )
            if not header_only:
                self._emit(
                    report,
                    f"src/LikertScale{SOURCE_EXT}",
                    lambda: self._render("LikertScale.cpp.j2", context),
                )

        if spec.include_data_dictionary:
            self._emit(
                report,
                "data_dictionary.md",
                lambda: self.store.get_and_substitute(
                    "data_dictionary.md", {"project_name": spec.name}
                ),
            )

        if spec.include_privacy_policy:
            self._emit(
                report,
                "PRIVACY_POLICY.md",
                lambda: self.store.get_and_substitute(
                    "PRIVACY_POLICY.md",
                    {"project_name": spec.name, "author": spec.author},
                ),
            )

    def _gitignore(self) -> str:
        content = self.store.get(".gitignore")
        if not content.endswith("\n"):
            content += "\n"
        lines = ["", "# Project specific", self.spec.name, f"{self.spec.name}_tests"]
        if self.spec.use_cmake:
            lines += [
                "",
                "# CMake",
                "CMakeCache.txt",
                "CMakeFiles/",
                "cmake_install.cmake",
                "Makefile",
            ]
        return content + "\n".join(lines) + "\n"

    # -- Documents ---------------------------------------------------------

    def _readme(self, report: GenerationReport) -> str:
        spec = self.spec
        structure = render_structure(spec.name, report)
        substitutions = {
            "project_name": spec.display_name,
            "description": spec.description,
            "goal": spec.goal,
            "author": spec.author,
            "version": spec.version,
            "project_structure": structure,
            "build_instructions": build_instructions(spec),
        }
        template = self.store.get("README.md")
        content = self.store.get_and_substitute("README.md", substitutions)
        if placeholder_token("project_structure") not in template:
            content = content.rstrip("\n") + f"\n\n## Project Structure\n```\n{structure}\n```\n"
        return content

    def _license(self) -> str:
        return self.store.get_and_substitute(
            "LICENSE",
            {"author": self.spec.author, "year": str(date.today().year)},
        )


# ---------------------------------------------------------------------------
# README helpers
# ---------------------------------------------------------------------------


def render_structure(name: str, report: GenerationReport) -> str:
    """Draw the directory tree of what *report* says was created.

    README.md and LICENSE are always listed: they are written right after the
    diagram is rendered.
    """
    entries: list[tuple[str, list[str]]] = []
    for directory in ("include", "src", "tests"):
        if report.has_dir(directory):
            entries.append((f"{directory}/", report.files_in(directory)))

    root_files = set(report.files_in(".")) | set(MANDATORY_TEMPLATES)
    if report.has_dir("build"):
        root_files.add("build")
    for entry in _ROOT_ORDER:
        if entry in root_files:
            label = f"{entry}/" if entry == "build" else entry
            entries.append((label, []))

    lines = [f"{name}/"]
    for index, (label, children) in enumerate(entries):
        last = index == len(entries) - 1
        lines.append(_tree_line(("└── " if last else "├── ") + label, label.rstrip("/")))
        for child_index, child in enumerate(children):
            branch = "    " if last else "│   "
            twig = "└── " if child_index == len(children) - 1 else "├── "
            lines.append(_tree_line(branch + twig + child, child, name))
    return "\n".join(lines)


def _tree_line(text: str, entry: str, name: str | None = None) -> str:
    note = _TREE_NOTES.get(entry)
    if note is None and name is not None:
        if entry == f"{name}.h":
            note = "Header file"
        elif entry == f"{name}{SOURCE_EXT}":
            note = "Implementation"
        elif entry == f"test_{name}{SOURCE_EXT}":
            note = "Unit tests"
    if note is None:
        return text
    return f"{text:<30}# {note}"


def build_instructions(spec: ProjectSpec) -> str:
    """Requirements, build, run and test sections for the README."""
    name = spec.name
    archetype = spec.archetype
    parts = ["## Requirements", "- C++17 compatible compiler (GCC 7+, Clang 5+, MSVC 2017+)"]
    parts.append("- CMake 3.12 or higher" if spec.use_cmake else "- Make utility")

    parts += ["", "## Building", ""]
    if spec.use_cmake:
        parts += ["### Using CMake", "```bash", "cd build", "cmake ..", "make", "```"]
    else:
        parts += [
            "### Using Make",
            "```bash",
            "make                   # Build",
            "make debug             # Build with debug symbols",
            "make release           # Build optimized version",
            "make clean             # Clean build files",
            "```",
        ]

    manual = {
        Archetype.CONSOLE_APP: [f"g++ -std=c++17 -Iinclude src/*.cpp -o {name}"],
        Archetype.GUI_APP: [f"g++ -std=c++17 -Iinclude src/*.cpp -o {name}"],
        Archetype.UNIT_TEST_HARNESS: [f"g++ -std=c++17 -Iinclude src/*.cpp -o {name}"],
        Archetype.STATIC_LIBRARY: [
            f"g++ -std=c++17 -Iinclude -c src/{name}{SOURCE_EXT} -o {name}.o",
            f"ar rcs lib{name}.a {name}.o",
        ],
        Archetype.SHARED_LIBRARY: [
            f"g++ -std=c++17 -Iinclude -fPIC -shared src/{name}{SOURCE_EXT} -o lib{name}.so",
        ],
    }.get(archetype)
    if manual:
        parts += ["", "### Manual Compilation", "```bash", *manual, "```"]

    if archetype.has_entry_point:
        binary = f"./build/{name}" if spec.use_cmake else f"./{name}"
        parts += ["", "## Running", "```bash", binary, "```"]

    if spec.include_tests:
        parts += ["", "## Testing", "```bash"]
        parts += ["cd build", "ctest"] if spec.use_cmake else ["make test"]
        parts.append("```")

    return "\n".join(parts)
