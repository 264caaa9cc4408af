"""cppgen scaffolder -- generates C++ project skeletons.

This package takes a ``ProjectSpec`` and a ``TemplateStore`` and renders a
project directory with a header, implementation, entry point, build descriptor
(CMake or Make), optional tests and modules, README and LICENSE.

Quick usage::

    from cppgen.scaffolder import Archetype, ProjectGenerator, ProjectSpec, TemplateStore

    spec = ProjectSpec.create(
        name="calc",
        description="A small calculator",
        archetype=Archetype.CONSOLE_APP,
        use_cmake=True,
        include_tests=True,
    )
    report = ProjectGenerator(spec, TemplateStore.bundled()).generate("/tmp/output")
"""

from cppgen.scaffolder.generator import ProjectGenerator
from cppgen.scaffolder.report import FileSink, GenerationReport
from cppgen.scaffolder.spec import Archetype, ProjectSpec
from cppgen.scaffolder.template_store import TemplateStore
from cppgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "Archetype",
    "FileSink",
    "GenerationReport",
    "ProjectGenerator",
    "ProjectSpec",
    "TemplateRenderer",
    "TemplateStore",
]
