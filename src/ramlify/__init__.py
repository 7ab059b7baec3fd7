from .errors import (
    DependencyMissingError,
    DuplicateIdentifierError,
    FormatError,
    GenerationError,
    ModelLoadError,
    RamlifyError,
    UnsupportedConstructError,
    WriteError,
)
from .generation import GenerationProfile, Module, TypeTranslator, generate_endpoints, generate_models
from .generator import PackageSpec, generate_client_package
from .loader import load_raml
from .model import ApiModel, build_model
from .targets import TARGETS, GoTarget, Target, get_target

__all__ = [
    "ApiModel",
    "DependencyMissingError",
    "DuplicateIdentifierError",
    "FormatError",
    "GenerationError",
    "GenerationProfile",
    "GoTarget",
    "ModelLoadError",
    "Module",
    "PackageSpec",
    "RamlifyError",
    "TARGETS",
    "Target",
    "TypeTranslator",
    "UnsupportedConstructError",
    "WriteError",
    "build_model",
    "generate_client_package",
    "generate_endpoints",
    "generate_models",
    "get_target",
    "load_raml",
]
