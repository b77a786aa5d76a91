"""Visual Studio installation discovery.

Finds installed Visual Studio instances on Windows and maps each one onto the
supported-version catalog.  Two strategies are tried in order:

1. ``vswhere.exe``, the installer's locator utility, whose text output is
   parsed into ``key: value`` records.
2. Probing the well-known install folders under Program Files.

Detection is a convenience: it never raises.  Every failure is recorded as a
diagnostic string on the returned :class:`DetectionResult` and the caller
decides whether to print it.
"""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from cppforge.toolchain.catalog import (
    SUPPORTED_VERSIONS,
    ToolchainVersion,
    lookup_by_version_number,
    lookup_by_year,
)
from cppforge.utils import run_command

VSWHERE_ARGS: list[str] = ["-all", "-prerelease", "-products", "*", "-nologo", "-utf8"]

EDITIONS: tuple[str, ...] = (
    "Enterprise",
    "Professional",
    "Community",
    "BuildTools",
    "Preview",
    "Insiders",
)

# Present only when the C++ build tools component is installed.
MSVC_MARKER = Path("VC") / "Tools" / "MSVC"


@dataclass(frozen=True)
class DetectedToolchain:
    """A Visual Studio installation found on this machine."""

    year: str
    version: str
    generator: str
    install_path: str
    display_name: str | None = None
    raw_version: str | None = None
    source: str = ""

    @classmethod
    def from_entry(
        cls,
        entry: ToolchainVersion,
        install_path: str,
        *,
        display_name: str | None = None,
        raw_version: str | None = None,
        source: str = "",
    ) -> "DetectedToolchain":
        return cls(
            year=entry.year,
            version=entry.version,
            generator=entry.generator,
            install_path=install_path,
            display_name=display_name,
            raw_version=raw_version,
            source=source,
        )


@dataclass
class DetectionResult:
    """Instances found (newest first) plus any warnings gathered on the way."""

    instances: list[DetectedToolchain] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    @property
    def latest(self) -> DetectedToolchain | None:
        return self.instances[0] if self.instances else None


# ---------------------------------------------------------------------------
# Process capability
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProcessOutput:
    """Exit code and decoded output streams of a finished process."""

    exit_code: int
    stdout: str
    stderr: str = ""


ProcessRunner = Callable[[str, list[str]], Awaitable[ProcessOutput]]


async def default_process_runner(path: str, args: list[str]) -> ProcessOutput:
    """Run *path* with *args* through :func:`cppforge.utils.run_command`."""
    exit_code, stdout, stderr = await run_command([path, *args], timeout=60)
    return ProcessOutput(exit_code=exit_code, stdout=stdout, stderr=stderr)


# ---------------------------------------------------------------------------
# vswhere output parsing
# ---------------------------------------------------------------------------


def parse_vswhere_output(text: str) -> list[dict[str, str]]:
    """Split vswhere's text output into one ``{key: value}`` dict per instance.

    Instances are separated by blank lines.  Lines without a ``:`` separator
    are ignored; values keep any further colons (``C:\\Program Files``).
    """
    records: list[dict[str, str]] = []
    current: dict[str, str] = {}

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            if current:
                records.append(current)
                current = {}
            continue
        key, sep, value = stripped.partition(":")
        if not sep or not key.strip() or " " in key.strip():
            continue
        current[key.strip()] = value.strip()

    if current:
        records.append(current)
    return records


def _instance_from_record(record: dict[str, str]) -> DetectedToolchain | None:
    """Map one vswhere record onto the catalog, or ``None`` if unsupported."""
    install_path = record.get("installationPath")
    if not install_path:
        return None

    entry = None
    product_line = record.get("catalog_productLineVersion")
    if product_line:
        entry = lookup_by_year(product_line)
    raw_version = record.get("installationVersion")
    if entry is None and raw_version:
        entry = lookup_by_version_number(raw_version)
    if entry is None:
        return None

    return DetectedToolchain.from_entry(
        entry,
        install_path,
        display_name=record.get("displayName"),
        raw_version=raw_version,
        source="vswhere",
    )


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class DetectionStrategy(Protocol):
    name: str

    async def find(self, diagnostics: list[str]) -> list[DetectedToolchain]: ...


def default_vswhere_path() -> Path:
    program_files_x86 = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
    return Path(program_files_x86) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"


def default_program_files_roots() -> list[Path]:
    roots: list[Path] = []
    for var, fallback in (
        ("ProgramFiles", r"C:\Program Files"),
        ("ProgramFiles(x86)", r"C:\Program Files (x86)"),
    ):
        root = Path(os.environ.get(var, fallback))
        if root not in roots:
            roots.append(root)
    return roots


class VswhereStrategy:
    """Ask ``vswhere.exe`` for every instance, prereleases included."""

    name = "vswhere"

    def __init__(
        self,
        vswhere_path: Path | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.vswhere_path = Path(vswhere_path) if vswhere_path else default_vswhere_path()
        self.runner = runner or default_process_runner

    async def find(self, diagnostics: list[str]) -> list[DetectedToolchain]:
        if not await asyncio.to_thread(self.vswhere_path.is_file):
            diagnostics.append(
                f"vswhere.exe not found at {self.vswhere_path}. "
                "Cannot auto-detect Visual Studio versions with it."
            )
            return []

        try:
            output = await self.runner(str(self.vswhere_path), VSWHERE_ARGS)
        except OSError as exc:
            diagnostics.append(f"Failed to run vswhere.exe: {exc}")
            return []

        if output.exit_code != 0:
            detail = output.stderr.strip().splitlines()[:1]
            diagnostics.append(
                f"vswhere.exe exited with code {output.exit_code}"
                + (f": {detail[0]}" if detail else "")
            )
            return []

        found = [
            instance
            for instance in map(_instance_from_record, parse_vswhere_output(output.stdout))
            if instance is not None
        ]
        if not found:
            diagnostics.append("vswhere.exe reported no supported Visual Studio instance.")
        return found


class KnownPathStrategy:
    """Probe the historical install folders for each supported version.

    A folder counts only if the MSVC tools marker exists beneath it.  Newer
    installers name the folder after the major version (``18``) instead of
    the year, so both are tried.
    """

    name = "known-paths"

    def __init__(
        self,
        roots: list[Path] | None = None,
        editions: tuple[str, ...] = EDITIONS,
    ) -> None:
        self.roots = [Path(r) for r in roots] if roots is not None else default_program_files_roots()
        self.editions = editions

    async def find(self, diagnostics: list[str]) -> list[DetectedToolchain]:
        found: list[DetectedToolchain] = []
        for entry in SUPPORTED_VERSIONS:
            install_dir = await asyncio.to_thread(self._probe, entry)
            if install_dir is not None:
                found.append(
                    DetectedToolchain.from_entry(
                        entry,
                        str(install_dir),
                        display_name=f"Visual Studio {install_dir.name} {entry.year}",
                        source=self.name,
                    )
                )
        if not found:
            diagnostics.append("No Visual Studio installation found in the known install locations.")
        return found

    def _probe(self, entry: ToolchainVersion) -> Path | None:
        for root in self.roots:
            for folder in (entry.year, entry.version):
                for edition in self.editions:
                    candidate = root / "Microsoft Visual Studio" / folder / edition
                    try:
                        if candidate.is_dir() and (candidate / MSVC_MARKER).is_dir():
                            return candidate
                    except OSError:
                        continue
        return None


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------


def _order_by_catalog(instances: list[DetectedToolchain]) -> list[DetectedToolchain]:
    """Keep the first instance per version, newest version first."""
    ordered: list[DetectedToolchain] = []
    for entry in SUPPORTED_VERSIONS:
        for instance in instances:
            if instance.year == entry.year:
                ordered.append(instance)
                break
    return ordered


class ToolchainDetector:
    """Runs the detection strategies in order until one finds something."""

    def __init__(
        self,
        strategies: list[DetectionStrategy] | None = None,
        platform: str | None = None,
    ) -> None:
        self.platform = platform or sys.platform
        if strategies is None:
            strategies = [VswhereStrategy(), KnownPathStrategy()]
        self.strategies = strategies

    @property
    def applicable(self) -> bool:
        """Visual Studio only exists on Windows."""
        return self.platform == "win32"

    async def detect(self) -> DetectionResult:
        result = DetectionResult()
        if not self.applicable:
            return result

        for strategy in self.strategies:
            try:
                found = await strategy.find(result.diagnostics)
            except (OSError, ValueError, asyncio.TimeoutError) as exc:
                result.diagnostics.append(f"Visual Studio detection via {strategy.name} failed: {exc}")
                continue
            if found:
                result.instances = _order_by_catalog(found)
                break

        return result


async def detect_installed_versions(
    detector: ToolchainDetector | None = None,
) -> list[DetectedToolchain]:
    """Installed Visual Studio instances, newest first; empty off Windows."""
    result = await (detector or ToolchainDetector()).detect()
    return result.instances


async def get_latest_version(
    detector: ToolchainDetector | None = None,
) -> DetectedToolchain | None:
    """The newest installed Visual Studio instance, or ``None``."""
    result = await (detector or ToolchainDetector()).detect()
    return result.latest
