"""Interactive command line entry point.

Usage::

    cppgen                          # answer the prompts
    cppgen --spec calc.json         # non-interactive, spec from JSON
    cppgen --templates my.sql -o ./projects
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.prompt import Confirm, IntPrompt, Prompt

from cppgen.config import Config
from cppgen.errors import CppgenError, InvalidProjectSpec
from cppgen.scaffolder import Archetype, GenerationReport, ProjectGenerator, ProjectSpec
from cppgen.utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

# Menu order of the archetype prompt (1-based).
ARCHETYPE_MENU: list[Archetype] = [
    Archetype.CONSOLE_APP,
    Archetype.STATIC_LIBRARY,
    Archetype.SHARED_LIBRARY,
    Archetype.HEADER_ONLY,
    Archetype.GUI_APP,
    Archetype.UNIT_TEST_HARNESS,
]


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def prompt_project_spec() -> ProjectSpec:
    """Ask for every ``ProjectSpec`` field and return the validated spec."""
    console.print("[bold cyan]=== C++ Project Template Generator ===[/bold cyan]\n")

    while True:
        name = Prompt.ask(
            "Enter project name (e.g., graph_analyzer, json_parser)", console=console
        )
        try:
            ProjectSpec.create(name=name)
        except InvalidProjectSpec as exc:
            print_warning(str(exc))
            continue
        break

    description = Prompt.ask("Enter project description", default="", console=console)
    goal = Prompt.ask("Enter project goal", default="", console=console)
    author = Prompt.ask("Enter author name", default="", console=console)
    version = Prompt.ask("Enter version", default="1.0.0", console=console)

    console.print("\nSelect project type:")
    for number, archetype in enumerate(ARCHETYPE_MENU, start=1):
        console.print(f"{number}. {archetype.label}")
    choice = IntPrompt.ask(
        "Choice",
        choices=[str(n) for n in range(1, len(ARCHETYPE_MENU) + 1)],
        default=1,
        show_choices=False,
        console=console,
    )

    return ProjectSpec.create(
        name=name,
        description=description,
        goal=goal,
        author=author,
        version=version,
        archetype=ARCHETYPE_MENU[choice - 1],
        use_cmake=Confirm.ask("\nUse CMake?", default=False, console=console),
        include_tests=Confirm.ask("Include unit tests?", default=False, console=console),
        include_gitignore=Confirm.ask("Include .gitignore?", default=True, console=console),
        include_likert_scale=Confirm.ask(
            "Include Likert Scale module for surveys?", default=False, console=console
        ),
        include_data_dictionary=Confirm.ask(
            "Include a Data Dictionary file?", default=False, console=console
        ),
        include_privacy_policy=Confirm.ask(
            "Include a PRIVACY_POLICY.md file?", default=False, console=console
        ),
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def next_steps(spec: ProjectSpec) -> list[str]:
    """Shell commands to build (and run) the freshly generated project."""
    steps = [f"cd {spec.name}"]
    if spec.use_cmake:
        steps += ["cd build", "cmake ..", "make"]
    else:
        steps.append("make")
    if spec.archetype.has_entry_point:
        steps.append(f"./{spec.name}")
    return steps


def _print_report(spec: ProjectSpec, report: GenerationReport) -> None:
    print_summary_table(report.summary(), title=f"Project '{spec.name}'")
    for failure in report.failures:
        print_error(f"  {failure}")
    if report.ok:
        print_success(f"Project '{spec.name}' generated successfully!")
        console.print("Next steps:")
        for number, step in enumerate(next_steps(spec), start=1):
            console.print(f"{number}. {step}", markup=False)
    else:
        print_error(f"{len(report.failures)} file(s) could not be generated.")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cppgen",
        description="Generate a C++ project skeleton",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  cppgen\n"
            "  cppgen --spec calc.json --output ./projects\n"
        ),
    )
    parser.add_argument(
        "--spec",
        type=Path,
        default=None,
        help="Read the project spec from a JSON file instead of prompting",
    )
    parser.add_argument(
        "--templates",
        type=Path,
        default=None,
        help="Template source file (default: $CPPGEN_TEMPLATES or the bundled templates)",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Parent directory for the project (default: $CPPGEN_OUTPUT_DIR or .)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``cppgen``.  Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.templates is not None:
        config.templates_path = args.templates
    if args.output is not None:
        config.output_dir = args.output

    try:
        spec = ProjectSpec.load(args.spec) if args.spec else prompt_project_spec()
        store = config.load_store()
        console.print("\n[bold]=== Generating Project Structure ===[/bold]")
        report = ProjectGenerator(spec, store).generate(config.output_dir)
    except (CppgenError, OSError) as exc:
        print_error(f"Error: {exc}")
        return 1
    except KeyboardInterrupt:
        print_error("Aborted.")
        return 1

    _print_report(spec, report)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
