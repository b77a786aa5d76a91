"""Drive CMake for a generated project.

Configure, build, then read the File API reply to find what was built, and
optionally run the executable for the active configuration.  The codemodel
query is written before every configure so the reply always exists
afterwards.
"""

from __future__ import annotations

import asyncio
import shutil
import sys
import time
from pathlib import Path

from cppforge.config import Config
from cppforge.fileapi import BuildArtifact, read_build_artifacts, select_executable, write_codemodel_query
from cppforge.toolchain import (
    GeneratorChoice,
    GeneratorResolver,
    KnownPathStrategy,
    ToolchainDetector,
    VswhereStrategy,
)
from cppforge.utils import format_duration, print_diagnostics, print_step_header, print_warning, run_command

DEFAULT_UNIX_GENERATOR = "Unix Makefiles"


class BuildError(Exception):
    """Raised when a cmake invocation or the test executable fails."""

    def __init__(
        self,
        step: str,
        message: str,
        exit_code: int | None = None,
        stderr: str = "",
    ) -> None:
        self.step = step
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class BuildDriver:
    """Configure, build and test one CMake project."""

    def __init__(
        self,
        config: Config,
        project_dir: str | Path,
        detector: ToolchainDetector | None = None,
        platform: str | None = None,
    ) -> None:
        self.config = config
        self.project_dir = Path(project_dir).resolve()
        self.build_dir = config.build_path(self.project_dir)
        self.platform = platform or sys.platform
        self.detector = detector or ToolchainDetector(
            strategies=[VswhereStrategy(config.vswhere_path), KnownPathStrategy()],
            platform=self.platform,
        )

    # -- Steps -------------------------------------------------------------

    async def clean(self) -> list[Path]:
        """Remove the build and dist directories; returns what was removed."""
        removed: list[Path] = []
        for directory in (self.build_dir, self.project_dir / "dist"):
            if await asyncio.to_thread(directory.is_dir):
                await asyncio.to_thread(shutil.rmtree, directory)
                removed.append(directory)
        return removed

    async def choose_generator(self) -> GeneratorChoice:
        """An explicit generator wins; Windows auto-selects Visual Studio."""
        if self.config.generator:
            return GeneratorChoice(generator=self.config.generator, source="configured")
        if self.platform == "win32":
            resolver = GeneratorResolver(self.detector)
            return await resolver.resolve(self.config.vs_version)
        return GeneratorChoice(generator=DEFAULT_UNIX_GENERATOR, source="default")

    async def configure(self) -> GeneratorChoice:
        await write_codemodel_query(self.build_dir)
        choice = await self.choose_generator()
        print_diagnostics(choice.diagnostics)

        await self._cmake(
            "configure",
            [
                self.config.cmake_binary,
                "-S", str(self.project_dir),
                "-B", str(self.build_dir),
                f"-DCMAKE_BUILD_TYPE={self.config.build_type}",
                "-G", choice.generator,
            ],
        )
        return choice

    async def build(self) -> list[BuildArtifact]:
        """Build, then return the artifacts CMake reports for the build dir."""
        cmd = [
            self.config.cmake_binary,
            "--build", str(self.build_dir),
            "--config", self.config.build_type,
        ]
        # MSBuild parallelizes on its own.
        if self.config.parallel and self.platform != "win32":
            cmd.append("--parallel")
        await self._cmake("build", cmd)
        return await read_build_artifacts(self.build_dir)

    async def run_tests(self, artifacts: list[BuildArtifact]) -> BuildArtifact | None:
        """Run the executable of the active configuration.

        Returns the executable that ran, or ``None`` when there was none.

        Raises:
            BuildError: If the executable exits with a non-zero code.
        """
        executable = select_executable(artifacts, self.config.build_type)
        if executable is None:
            print_warning("No executable found to test")
            return None

        try:
            exit_code, _, stderr = await run_command(
                [str(executable.path)],
                cwd=self.project_dir,
                timeout=self.config.command_timeout,
                capture=False,
            )
        except OSError as exc:
            raise BuildError("test", f"Cannot execute {executable.path}: {exc}") from exc

        if exit_code != 0:
            raise BuildError(
                "test",
                f"{executable.name} exited with code {exit_code}",
                exit_code=exit_code,
                stderr=stderr,
            )
        return executable

    async def run(self, clean: bool = False, test: bool = False) -> list[BuildArtifact]:
        """Full flow: [clean] -> configure -> build -> [test]."""
        started = time.monotonic()
        if clean:
            print_step_header("Clean", "bright_red")
            await self.clean()

        print_step_header("Configure")
        await self.configure()

        print_step_header("Build", "bright_yellow")
        artifacts = await self.build()

        if test:
            print_step_header("Test", "bright_magenta")
            await self.run_tests(artifacts)

        print_step_header(f"Done in {format_duration(time.monotonic() - started)}", "bright_green")
        return artifacts

    # -- Internal ----------------------------------------------------------

    async def _cmake(self, step: str, cmd: list[str]) -> None:
        try:
            exit_code, _, stderr = await run_command(
                cmd,
                cwd=self.project_dir,
                timeout=self.config.command_timeout,
                capture=False,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise BuildError(
                step, f"Cannot execute '{self.config.cmake_binary}': {exc}"
            ) from exc

        if exit_code != 0:
            message = f"cmake {step} failed with exit code {exit_code}"
            if stderr:
                message += f": {stderr}"
            raise BuildError(step, message, exit_code=exit_code, stderr=stderr)
