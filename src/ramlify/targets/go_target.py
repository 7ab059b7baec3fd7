from __future__ import annotations

from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path

from ..errors import DependencyMissingError
from ..generation.emitter import Formatter
from ..generation.endpoints import generate_endpoints
from ..generation.models import generate_models
from ..generation.profile import GenerationProfile
from ..generation.source import Module
from ..model import ApiModel
from ..progress import Todo

BOOTSTRAP_PATH = Path(__file__).with_name("bootstrap.go")

# Top-level names declared by bootstrap.go.
BOOTSTRAP_IDENTIFIERS = (
    "Client",
    "NewClient",
    "Filter",
    "StatusError",
    "cookieJar",
    "oauthFilter",
    # Methods of Client share its namespace with the generated endpoints.
    "AddFilter",
    "EnableCookies",
    "UseOAuth",
)


@dataclass(frozen=True)
class GoTarget:
    """Generates a Go client package: models.go, endpoints.go and the client runtime."""

    name: str = "go"
    profile: GenerationProfile = field(default_factory=GenerationProfile)

    @property
    def formatter(self) -> Formatter:
        return Formatter(self.profile.formatter_command)

    def configure(self, profile: GenerationProfile) -> GoTarget:
        return replace(self, profile=profile)

    def check(self) -> None:
        formatter = self.formatter
        if not formatter.is_available():
            raise DependencyMissingError(
                f"'{formatter.executable}' was not found on PATH; it is required to generate Go code"
            )

    def generate(self, api: ApiModel, output: str | PathLike[str]) -> list[Path]:
        todo = Todo()
        todo.start("Generating Go code")

        module = Module(Path(output), self.profile.package_name, formatter=self.formatter)
        module.include(BOOTSTRAP_PATH)
        module.reserve(*BOOTSTRAP_IDENTIFIERS)
        generate_models(api, module.file("models.go"))
        generate_endpoints(api, module.file("endpoints.go"), self.profile)

        todo.start(f"Running {self.formatter.executable}")
        written = module.save()
        todo.finish()
        return written
