from __future__ import annotations

from ..errors import ModelLoadError
from ..log import get_logger
from ..model import ApiModel, TypeDeclaration
from .naming import to_identifier
from .source import File, Struct
from .type_emitter import TypeTranslator

logger = get_logger(__name__)


def generate_models(api: ApiModel, source_file: File) -> None:
    """Declare one Struct per object-shaped type of the API.

    Every other declaration (``Users: User[]``, ``Email: string``) becomes a
    type definition over its translated type.
    """
    translator = TypeTranslator()
    for declaration in api.types:
        name = to_identifier(declaration.name)
        if source_file.has_struct(name) or source_file.has_typedef(name):
            continue
        if is_object_type(api, declaration):
            generate_struct(source_file, api, name, declaration, translator)
        else:
            source_file.typedef(name, translator.translate(declaration.descriptor))
    source_file.add_import(*translator.imports)


def generate_struct(
    source_file: File,
    api: ApiModel,
    name: str,
    declaration: TypeDeclaration,
    translator: TypeTranslator,
) -> Struct:
    """Declare a Struct holding the declaration's properties and those of its supertypes.

    Own properties come first, then each supertype is expanded depth first in
    declared order. A property already present, by field name, is not added
    again, so a redeclared property keeps the most derived type.

    Raises:
        ModelLoadError: If the inheritance chain loops back on itself
    """
    struct = source_file.struct(name)
    seen = {struct_field.name for struct_field in struct.fields}

    def expand(current: TypeDeclaration, path: tuple[str, ...]) -> None:
        if current.name in path:
            raise _cycle_error((*path, current.name))
        for prop in current.properties:
            field_name = to_identifier(prop.name)
            if field_name in seen:
                continue
            seen.add(field_name)
            struct.add_field(field_name, translator.translate(prop.type), json_tag(prop.wire_name))
        for supertype in current.supertypes:
            parent = api.find_type(supertype)
            if parent is not None:
                expand(parent, (*path, current.name))

    expand(declaration, ())
    logger.debug("struct %s: %d fields", name, len(struct.fields))
    return struct


def is_object_type(api: ApiModel, declaration: TypeDeclaration) -> bool:
    """Check whether a declaration describes an object, directly or through a supertype."""

    def check(current: TypeDeclaration, path: tuple[str, ...]) -> bool:
        if current.name in path:
            raise _cycle_error((*path, current.name))
        if current.properties or "object" in current.supertypes:
            return True
        for supertype in current.supertypes:
            parent = api.find_type(supertype)
            if parent is not None and check(parent, (*path, current.name)):
                return True
        return False

    return check(declaration, ())


def json_tag(wire_name: str) -> str:
    return f'json:"{wire_name}"'


def _cycle_error(chain: tuple[str, ...]) -> ModelLoadError:
    return ModelLoadError(f"Type inheritance cycle: {' -> '.join(chain)}")
