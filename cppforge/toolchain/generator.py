"""Choose the Visual Studio CMake generator to configure with.

Resolution order: an explicitly requested year, then the newest detected
installation, then :data:`FALLBACK_GENERATOR`.  Callers that need a
guaranteed-correct generator should always pass the year explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cppforge.toolchain.catalog import generator_by_year, supported_years
from cppforge.toolchain.detector import DetectedToolchain, ToolchainDetector
from cppforge.utils import print_diagnostics

FALLBACK_GENERATOR = "Visual Studio 17 2022"


class InvalidVersionRequestedError(ValueError):
    """Raised when the caller asks for a Visual Studio year we do not support."""

    def __init__(self, requested: str, supported: list[str]) -> None:
        self.requested = requested
        self.supported = supported
        super().__init__(
            f"Invalid Visual Studio version: {requested}. Supported: {', '.join(supported)}"
        )


@dataclass
class GeneratorChoice:
    """The generator picked and how it was picked.

    ``source`` is ``"requested"``, ``"detected"`` or ``"fallback"`` when the
    resolver picked it.  The build driver also reports ``"configured"`` for an
    explicit generator and ``"default"`` off Windows.
    """

    generator: str
    source: str
    instance: DetectedToolchain | None = None
    diagnostics: list[str] = field(default_factory=list)


class GeneratorResolver:
    def __init__(self, detector: ToolchainDetector | None = None) -> None:
        self.detector = detector or ToolchainDetector()

    async def resolve(self, requested: str | None = None) -> GeneratorChoice:
        """Resolve the generator without printing anything.

        Raises:
            InvalidVersionRequestedError: If *requested* is not in the catalog.
        """
        if requested is not None:
            generator = generator_by_year(requested)
            if generator is None:
                raise InvalidVersionRequestedError(requested, supported_years())
            return GeneratorChoice(generator=generator, source="requested")

        detection = await self.detector.detect()
        diagnostics = list(detection.diagnostics)
        if detection.latest is not None:
            return GeneratorChoice(
                generator=detection.latest.generator,
                source="detected",
                instance=detection.latest,
                diagnostics=diagnostics,
            )

        diagnostics.append(
            "Could not auto-detect Visual Studio. Falling back to Visual Studio 2022."
        )
        return GeneratorChoice(
            generator=FALLBACK_GENERATOR, source="fallback", diagnostics=diagnostics
        )


async def resolve_generator(
    requested: str | None = None,
    detector: ToolchainDetector | None = None,
) -> str:
    """Return the generator string, printing any detection warnings."""
    choice = await GeneratorResolver(detector).resolve(requested)
    print_diagnostics(choice.diagnostics)
    return choice.generator
