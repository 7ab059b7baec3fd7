from __future__ import annotations

import shlex
from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationProfile:
    """Settings for one generation run.

    Attributes:
        package_name: Go package clause of the generated files
        prefix_depth: Leading path segments left out of derived function names
        formatter_command: Formatter invoked on the output directory
    """

    package_name: str = "client"
    prefix_depth: int = 0
    formatter_command: tuple[str, ...] = ("gofmt", "-w")

    @classmethod
    def from_options(
        cls,
        package_name: str | None = None,
        prefix_depth: int | None = None,
        formatter: str | None = None,
    ) -> "GenerationProfile":
        default = cls()
        return cls(
            package_name=package_name or default.package_name,
            prefix_depth=prefix_depth if prefix_depth is not None else default.prefix_depth,
            formatter_command=tuple(shlex.split(formatter)) if formatter else default.formatter_command,
        )
