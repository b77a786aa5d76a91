"""Visual Studio toolchain discovery and CMake generator selection.

Key pieces:
    SUPPORTED_VERSIONS  - Newest-first catalog of supported releases
    ToolchainDetector   - vswhere -> known install paths detection chain
    GeneratorResolver   - requested -> detected -> fallback generator choice
"""

from .catalog import (
    SUPPORTED_VERSIONS,
    ToolchainVersion,
    generator_by_year,
    is_supported_version,
    lookup_by_version_number,
    lookup_by_year,
    supported_years,
)
from .detector import (
    DetectedToolchain,
    DetectionResult,
    KnownPathStrategy,
    ProcessOutput,
    ToolchainDetector,
    VswhereStrategy,
    detect_installed_versions,
    get_latest_version,
)
from .generator import (
    FALLBACK_GENERATOR,
    GeneratorChoice,
    GeneratorResolver,
    InvalidVersionRequestedError,
    resolve_generator,
)

__all__ = [
    # Catalog
    "SUPPORTED_VERSIONS",
    "ToolchainVersion",
    "generator_by_year",
    "is_supported_version",
    "lookup_by_version_number",
    "lookup_by_year",
    "supported_years",
    # Detection
    "DetectedToolchain",
    "DetectionResult",
    "KnownPathStrategy",
    "ProcessOutput",
    "ToolchainDetector",
    "VswhereStrategy",
    "detect_installed_versions",
    "get_latest_version",
    # Generator selection
    "FALLBACK_GENERATOR",
    "GeneratorChoice",
    "GeneratorResolver",
    "InvalidVersionRequestedError",
    "resolve_generator",
]
