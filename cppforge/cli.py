"""cppforge command line.

Usage::

    cppforge new --name MyApp --author "Jane Doe" --with-git
    cppforge build my-app --config Debug --test
    cppforge artifacts my-app/build
    cppforge detect
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cppforge.builder import BuildDriver, BuildError
from cppforge.config import Config
from cppforge.fileapi import FileApiError, print_artifacts, read_build_artifacts
from cppforge.scaffolder import ProjectConfig, ProjectGenerator, ScaffoldError
from cppforge.toolchain import (
    GeneratorResolver,
    InvalidVersionRequestedError,
    KnownPathStrategy,
    ToolchainDetector,
    VswhereStrategy,
)
from cppforge.utils import (
    console,
    print_diagnostics,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _cmd_new(args: argparse.Namespace) -> None:
    config = ProjectConfig(
        name=args.name,
        author=args.author,
        version=args.version,
        output_dir=Path(args.output) if args.output else None,
        with_git=args.with_git,
        framework_url=args.framework_url,
        framework_ref=args.framework_ref,
    )

    print_summary_table(
        {
            "Project": config.name,
            "Output directory": str(config.target_dir),
            "Author": config.author,
            "Version": config.version,
        },
        title="Generating C++/CMake project",
    )

    result = await ProjectGenerator(config).generate()

    for path in result.files:
        console.print(f"  [green]created[/green] {path}")
    if result.framework_path:
        console.print(f"  [green]cloned[/green]  {result.framework_path}")
    if result.git_initialized:
        console.print("  [green]git repository initialized[/green]")
    print_diagnostics(result.warnings)

    print_success("Project generated successfully!")
    console.print(
        Panel(
            f"cd {result.root}\n"
            "cppforge build               # Build in Release mode\n"
            "cppforge build --config Debug\n"
            "cppforge build --clean       # Clean and rebuild\n"
            "cppforge build --test        # Build and run the executable",
            title="Next steps",
            border_style="cyan",
        )
    )


async def _cmd_build(args: argparse.Namespace) -> None:
    project_dir = Path(args.project)
    base = Config.for_project(project_dir)

    overrides: dict[str, Any] = {}
    if args.config:
        overrides["build_type"] = args.config
    if args.generator:
        overrides["generator"] = args.generator
    if args.vs_version:
        overrides["vs_version"] = args.vs_version
    config = Config.model_validate({**base.model_dump(), **overrides})

    title = config.project_name or project_dir.resolve().name
    console.print(f"[bold]Building {title} v{config.version}[/bold] ({config.build_type}, {sys.platform})")

    driver = BuildDriver(config, project_dir)
    artifacts = await driver.run(clean=args.clean, test=args.test)
    print_artifacts(artifacts)
    print_success("Build completed successfully!")


async def _cmd_artifacts(args: argparse.Namespace) -> None:
    artifacts = await read_build_artifacts(Path(args.build_dir))
    if args.json:
        payload = [
            {
                "name": a.name,
                "type": a.type,
                "path": str(a.path),
                "configuration": a.configuration,
            }
            for a in artifacts
        ]
        console.print_json(json.dumps(payload))
        return
    print_artifacts(artifacts)


async def _cmd_detect(args: argparse.Namespace) -> None:
    config = Config.from_env()
    detector = ToolchainDetector(
        strategies=[VswhereStrategy(config.vswhere_path), KnownPathStrategy()]
    )
    if not detector.applicable:
        print_warning(f"Visual Studio detection does not apply on {detector.platform}.")

    detection = await detector.detect()
    if detection.instances:
        table = Table(title="Installed Visual Studio", show_header=True, header_style="bold cyan")
        table.add_column("Year", style="bold")
        table.add_column("Generator")
        table.add_column("Found by", style="dim")
        table.add_column("Path")
        for instance in detection.instances:
            table.add_row(instance.year, instance.generator, instance.source, instance.install_path)
        console.print(table)

    choice = await GeneratorResolver(detector).resolve(args.vs_version)
    print_diagnostics(choice.diagnostics)
    console.print(f"Generator: [bold]{choice.generator}[/bold] ({choice.source})")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cppforge",
        description="cppforge -- C++/CMake project generator and build driver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  cppforge new --name "MyProject" --author "John Doe" --output ./my-project --with-git\n'
            "  cppforge build ./my-project --config Debug --test\n"
            "  cppforge artifacts ./my-project/build\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Generate a new C++/CMake project")
    new.add_argument("--name", "-n", default="MyApp", help='Project name (default: "MyApp")')
    new.add_argument("--author", "-a", default="Your Name", help='Author name (default: "Your Name")')
    new.add_argument("--version", "-v", default="1.0.0", help='Version (default: "1.0.0")')
    new.add_argument("--output", "-o", default=None, help="Output directory (default: derived from the name)")
    new.add_argument("--with-git", action="store_true", help="Initialize a git repository")
    new.add_argument("--framework-url", default=None, help="Git URL of a framework to clone into external/")
    new.add_argument("--framework-ref", default=None, help="Branch or tag of the framework to clone")
    new.set_defaults(handler=_cmd_new)

    build = subparsers.add_parser("build", help="Configure, build and list artifacts")
    build.add_argument("project", nargs="?", default=".", help="Project directory (default: .)")
    build.add_argument(
        "--config", "-c", default=None, help="Build type, one of the project's build_types"
    )
    build.add_argument("--generator", "-G", default=None, help="CMake generator to use")
    build.add_argument("--vs-version", default=None, help="Visual Studio year (Windows only)")
    build.add_argument("--clean", action="store_true", help="Remove the build directory first")
    build.add_argument("--test", action="store_true", help="Run the built executable")
    build.set_defaults(handler=_cmd_build)

    artifacts = subparsers.add_parser("artifacts", help="List artifacts of a configured build directory")
    artifacts.add_argument("build_dir", nargs="?", default="build", help="Build directory (default: build)")
    artifacts.add_argument("--json", action="store_true", help="Print the list as JSON")
    artifacts.set_defaults(handler=_cmd_artifacts)

    detect = subparsers.add_parser("detect", help="Show installed Visual Studio versions")
    detect.add_argument("--vs-version", default=None, help="Validate a specific Visual Studio year")
    detect.set_defaults(handler=_cmd_detect)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``cppforge`` / ``python -m cppforge``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        asyncio.run(args.handler(args))
    except ValidationError as exc:
        print_error(f"Error: invalid configuration\n{escape(str(exc))}")
        sys.exit(1)
    except (
        FileApiError,
        BuildError,
        ScaffoldError,
        InvalidVersionRequestedError,
    ) as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
