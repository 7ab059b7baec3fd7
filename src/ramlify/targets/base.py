from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Protocol

from ..generation.profile import GenerationProfile
from ..model import ApiModel


class Target(Protocol):
    """A code generation backend for one target language."""

    name: str

    def check(self) -> None:
        """Ensure the tooling the target needs is installed.

        Raises:
            DependencyMissingError: If a required tool is absent
        """
        ...

    def generate(self, api: ApiModel, output: str | PathLike[str]) -> list[Path]:
        """Generate the client for api into output, formatting included."""
        ...

    def configure(self, profile: GenerationProfile) -> "Target":
        """Return a copy of the target using profile."""
        ...
