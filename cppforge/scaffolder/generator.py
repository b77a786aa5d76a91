"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and generates a C++/CMake project directory: a
CMakeLists with a static library, a shared library and an executable, the
matching C++ sources, a ``.gitignore`` and the ``cppforge.json`` that
``cppforge build`` reads.  Optionally clones an external framework into the
tree and initializes a git repository.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from cppforge.config import PROJECT_CONFIG_FILENAME, Config
from cppforge.scaffolder.templates import TemplateRenderer
from cppforge.scaffolder.vcs import VcsError, clone_framework, init_repository, repo_name_from_url
from cppforge.utils import to_dir_name, to_pascal_case, to_snake_case

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# (template, output path relative to the project root)
PROJECT_FILES: list[tuple[str, str]] = [
    ("CMakeLists.txt.j2", "CMakeLists.txt"),
    ("src/main.cpp.j2", "src/main.cpp"),
    ("src/core/core.h.j2", "src/core/core.h"),
    ("src/core/core.cpp.j2", "src/core/core.cpp"),
    ("src/utils/utils.h.j2", "src/utils/utils.h"),
    ("src/utils/utils.cpp.j2", "src/utils/utils.cpp"),
    ("gitignore.j2", ".gitignore"),
]

PROJECT_DIRS: list[str] = ["src", "src/core", "src/utils"]


class ScaffoldError(Exception):
    """Raised when the project cannot be generated."""


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold."""

    name: str = Field(..., description="Project name, e.g. 'MyApp'")
    author: str = Field(default="Your Name")
    version: str = Field(default="1.0.0", pattern=r"^\d+(\.\d+){0,3}$")
    output_dir: Path | None = Field(
        default=None, description="Target directory; defaults to the lowercased name"
    )
    with_git: bool = Field(default=False, description="Run 'git init' in the new project")
    framework_url: str | None = Field(default=None, description="Git URL of a framework to clone")
    framework_ref: str | None = Field(default=None, description="Branch or tag of the framework")
    framework_dir: str = Field(default="external")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project name must not be empty")
        if not _IDENTIFIER.match(to_snake_case(value)):
            raise ValueError(
                f"Project name {value!r} does not produce a valid C++ identifier "
                f"(got {to_snake_case(value)!r})"
            )
        return value

    @field_validator("framework_url")
    @classmethod
    def _check_framework_url(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                repo_name_from_url(value)
            except VcsError as exc:
                raise ValueError(str(exc)) from exc
        return value

    @property
    def name_snake(self) -> str:
        return to_snake_case(self.name)

    @property
    def name_upper(self) -> str:
        return self.name_snake.upper()

    @property
    def name_pascal(self) -> str:
        return to_pascal_case(self.name)

    @property
    def target_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else Path(to_dir_name(self.name))

    @property
    def framework_path(self) -> str | None:
        """Framework checkout location relative to the project root (POSIX form)."""
        if not self.framework_url:
            return None
        return f"{self.framework_dir}/{repo_name_from_url(self.framework_url)}"


@dataclass
class ScaffoldResult:
    """What ``ProjectGenerator.generate`` produced."""

    root: Path
    files: list[Path] = field(default_factory=list)
    framework_path: Path | None = None
    git_initialized: bool = False
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    def __init__(
        self,
        config: ProjectConfig,
        renderer: TemplateRenderer | None = None,
        git_binary: str = "git",
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.git_binary = git_binary

    async def generate(self) -> ScaffoldResult:
        """Generate the project.

        Raises:
            ScaffoldError: If the target directory is not empty or the
                framework clone fails.
        """
        root = self.config.target_dir
        await asyncio.to_thread(_ensure_empty_dir, root)

        result = ScaffoldResult(root=root)
        context = self._build_context()

        for directory in PROJECT_DIRS:
            await asyncio.to_thread((root / directory).mkdir, parents=True, exist_ok=True)

        for template_name, output_name in PROJECT_FILES:
            result.files.append(
                await self.renderer.render_to_file(template_name, root / output_name, context)
            )

        build_config = Config(
            project_name=self.config.name,
            version=self.config.version,
            author=self.config.author,
        )
        result.files.append(
            await asyncio.to_thread(build_config.save, root / PROJECT_CONFIG_FILENAME)
        )

        framework_url = self.config.framework_url
        framework_path = self.config.framework_path
        if framework_url and framework_path:
            result.framework_path = await self._clone_framework(
                framework_url, root / framework_path
            )

        if self.config.with_git:
            try:
                await init_repository(root, git_binary=self.git_binary)
                result.git_initialized = True
            except VcsError as exc:
                result.warnings.append(
                    f"Failed to initialize git repository (git may not be installed): {exc}"
                )

        return result

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project config."""
        return {
            "name": self.config.name,
            "name_snake": self.config.name_snake,
            "name_upper": self.config.name_upper,
            "name_pascal": self.config.name_pascal,
            "author": self.config.author,
            "version": self.config.version,
            "build_dir": Config().build_dir,
            "framework_path": self.config.framework_path,
        }

    async def _clone_framework(self, url: str, destination: Path) -> Path:
        try:
            return await clone_framework(
                url,
                destination,
                ref=self.config.framework_ref,
                git_binary=self.git_binary,
            )
        except VcsError as exc:
            raise ScaffoldError(f"Failed to clone framework: {exc}") from exc


def _ensure_empty_dir(path: Path) -> None:
    if path.exists():
        if not path.is_dir():
            raise ScaffoldError(f'"{path}" exists and is not a directory.')
        if any(path.iterdir()):
            raise ScaffoldError(
                f'Directory "{path}" is not empty. Please choose an empty directory or a new path.'
            )
    path.mkdir(parents=True, exist_ok=True)
