from __future__ import annotations


class RamlifyError(Exception):
    """Base class for every error raised by ramlify."""


class DependencyMissingError(RamlifyError):
    """Raised when a target's external tooling is not available."""


class ModelLoadError(RamlifyError):
    """Raised when the RAML document cannot be turned into an API model."""


class GenerationError(RamlifyError):
    pass


class UnsupportedConstructError(GenerationError):
    """Raised when an operation uses a construct the generator does not model."""


class DuplicateIdentifierError(GenerationError):
    pass


class WriteError(RamlifyError):
    """Raised when generated files cannot be written."""


class FormatError(RamlifyError):
    """Raised when the external source formatter fails."""
