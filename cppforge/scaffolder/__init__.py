"""cppforge scaffolder: generates C++/CMake project trees.

Quick usage::

    from cppforge.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig(name="MyApp", author="Jane Doe", with_git=True)
    result = await ProjectGenerator(config).generate()
"""

from cppforge.scaffolder.generator import (
    ProjectConfig,
    ProjectGenerator,
    ScaffoldError,
    ScaffoldResult,
)
from cppforge.scaffolder.templates import TemplateRenderer
from cppforge.scaffolder.vcs import VcsError

__all__ = [
    "ProjectConfig",
    "ProjectGenerator",
    "ScaffoldError",
    "ScaffoldResult",
    "TemplateRenderer",
    "VcsError",
]
