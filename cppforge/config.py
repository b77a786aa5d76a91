"""cppforge configuration.

Centralised, typed configuration for scaffolding and building.  All settings
use Pydantic v2 models so they can be validated at construction time and
serialised to/from the ``cppforge.json`` file that every generated project
carries, or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from cppforge.toolchain.catalog import is_supported_version, supported_years

PROJECT_CONFIG_FILENAME = "cppforge.json"


class Config(BaseModel):
    """Global cppforge configuration.

    Holds the project metadata written by ``cppforge new`` together with the
    knobs the build driver uses when it invokes CMake.
    """

    project_name: str = Field(default="")
    version: str = Field(default="1.0.0")
    author: str = Field(default="")
    build_types: list[str] = Field(
        default_factory=lambda: ["Debug", "Release"],
        description="Build types accepted for build_type / --config",
    )

    build_dir: str = Field(default="build")
    build_type: str = Field(default="Release")
    generator: str | None = Field(
        default=None, description="Explicit CMake generator; skips auto-selection"
    )
    vs_version: str | None = Field(
        default=None, description="Visual Studio year to target on Windows"
    )
    cmake_binary: str = Field(default="cmake")
    git_binary: str = Field(default="git")
    vswhere_path: Path | None = Field(default=None)
    command_timeout: int = Field(default=600, ge=10, description="Per-command timeout in seconds")
    parallel: bool = Field(default=True)

    @field_validator("vs_version")
    @classmethod
    def _check_vs_version(cls, value: str | None) -> str | None:
        if value is not None and not is_supported_version(value):
            raise ValueError(
                f"Unsupported Visual Studio version: {value}. "
                f"Supported: {', '.join(supported_years())}"
            )
        return value

    @model_validator(mode="after")
    def _check_build_type(self) -> "Config":
        if self.build_type not in self.build_types:
            raise ValueError(
                f"Unknown build type: {self.build_type}. "
                f"Expected one of: {', '.join(self.build_types)}"
            )
        return self

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def build_path(self, project_dir: Path) -> Path:
        """Absolute build directory for *project_dir*."""
        return (Path(project_dir) / self.build_dir).resolve()

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            self.model_dump_json(indent=2, exclude_none=True) + "\n", encoding="utf-8"
        )
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CPPFORGE_BUILD_DIR, CPPFORGE_BUILD_TYPE, CPPFORGE_GENERATOR,
            CPPFORGE_VS_VERSION, CPPFORGE_CMAKE, CPPFORGE_GIT,
            CPPFORGE_VSWHERE, CPPFORGE_COMMAND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CPPFORGE_BUILD_DIR"):
            kwargs["build_dir"] = os.environ["CPPFORGE_BUILD_DIR"]
        if os.environ.get("CPPFORGE_BUILD_TYPE"):
            kwargs["build_type"] = os.environ["CPPFORGE_BUILD_TYPE"]
        if os.environ.get("CPPFORGE_GENERATOR"):
            kwargs["generator"] = os.environ["CPPFORGE_GENERATOR"]
        if os.environ.get("CPPFORGE_VS_VERSION"):
            kwargs["vs_version"] = os.environ["CPPFORGE_VS_VERSION"]
        if os.environ.get("CPPFORGE_CMAKE"):
            kwargs["cmake_binary"] = os.environ["CPPFORGE_CMAKE"]
        if os.environ.get("CPPFORGE_GIT"):
            kwargs["git_binary"] = os.environ["CPPFORGE_GIT"]
        if os.environ.get("CPPFORGE_VSWHERE"):
            kwargs["vswhere_path"] = Path(os.environ["CPPFORGE_VSWHERE"])
        if os.environ.get("CPPFORGE_COMMAND_TIMEOUT"):
            # Raw string; pydantic coerces and range-checks it.
            kwargs["command_timeout"] = os.environ["CPPFORGE_COMMAND_TIMEOUT"]
        return cls(**kwargs)

    @classmethod
    def for_project(cls, project_dir: Path) -> "Config":
        """Load ``<project_dir>/cppforge.json`` or fall back to :meth:`from_env`."""
        config_file = Path(project_dir) / PROJECT_CONFIG_FILENAME
        if config_file.is_file():
            return cls.load(config_file)
        return cls.from_env()
