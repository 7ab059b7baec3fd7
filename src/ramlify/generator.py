from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .generation import GenerationProfile
from .loader import RamlSource, load_raml
from .log import get_logger
from .targets import get_target

logger = get_logger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    source: RamlSource
    output_dir: Path
    target: str = "go"


def generate_client_package(
    spec: PackageSpec,
    profile: GenerationProfile | None = None,
) -> list[Path]:
    """Run the whole pipeline: check the target, load the RAML, generate and format.

    Each step only starts once the previous one succeeded; the first error
    propagates to the caller.
    """
    target = get_target(spec.target)
    if profile is not None:
        target = target.configure(profile)
    target.check()
    api = load_raml(spec.source)
    written = target.generate(api, spec.output_dir)
    logger.info("wrote %d files to %s", len(written), spec.output_dir)
    return written
