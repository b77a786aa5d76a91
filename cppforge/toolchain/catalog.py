"""Supported Visual Studio toolchain versions.

The table is ordered newest first.  That order is what "latest installed"
means everywhere else in the package.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolchainVersion:
    """One supported Visual Studio release and its CMake generator name."""

    year: str
    version: str
    generator: str


SUPPORTED_VERSIONS: tuple[ToolchainVersion, ...] = (
    ToolchainVersion(year="2026", version="18", generator="Visual Studio 18 2026"),
    ToolchainVersion(year="2022", version="17", generator="Visual Studio 17 2022"),
    ToolchainVersion(year="2019", version="16", generator="Visual Studio 16 2019"),
)


def lookup_by_year(year: str) -> ToolchainVersion | None:
    """Return the catalog entry for a release year such as ``"2022"``."""
    for entry in SUPPORTED_VERSIONS:
        if entry.year == year:
            return entry
    return None


def lookup_by_version_number(version: str) -> ToolchainVersion | None:
    """Return the catalog entry for a major version (``"17"``) or a full
    installation version (``"17.8.34330.188"``)."""
    major = version.strip().split(".", 1)[0]
    for entry in SUPPORTED_VERSIONS:
        if entry.version == major:
            return entry
    return None


def is_supported_version(year: str) -> bool:
    return lookup_by_year(year) is not None


def generator_by_year(year: str) -> str | None:
    entry = lookup_by_year(year)
    return entry.generator if entry else None


def supported_years() -> list[str]:
    return [entry.year for entry in SUPPORTED_VERSIONS]
