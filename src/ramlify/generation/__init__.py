from .emitter import Formatter, render_file
from .endpoints import EndpointGenerator, generate_endpoints
from .models import generate_models, generate_struct
from .naming import infer_method_name, to_identifier
from .profile import GenerationProfile
from .source import File, Func, Module, Struct
from .type_emitter import TypeTranslator

__all__ = [
    "EndpointGenerator",
    "File",
    "Formatter",
    "Func",
    "GenerationProfile",
    "Module",
    "Struct",
    "TypeTranslator",
    "generate_endpoints",
    "generate_models",
    "generate_struct",
    "infer_method_name",
    "render_file",
    "to_identifier",
]
