"""API model for RAML documents.

This module defines the read-only data structures the generators consume,
and build_model(), which turns a parsed RAML document (a plain mapping, as
produced by the loader) into that model.

Key classes:
- ApiModel: Root container for types, traits and resources
- Resource: A node in the path hierarchy, owning methods and sub-resources
- Method: An HTTP operation on a resource
- TypeDeclaration: A named type from the ``types`` section
- TypeDescriptor: The type of a property, parameter or body
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Mapping, cast

from .errors import ModelLoadError

HTTP_METHODS = ("get", "put", "post", "patch", "delete", "options", "head", "trace", "connect")
DEFAULT_MEDIA_TYPE = "application/json"

# Built-in RAML type names. Anything else names a declared type.
BUILTIN_KINDS = frozenset(
    {
        "any",
        "array",
        "boolean",
        "date-only",
        "datetime",
        "datetime-only",
        "file",
        "integer",
        "nil",
        "number",
        "object",
        "string",
        "time-only",
        "uint",
        "union",
        "IsoDate",
        "UnixTimestampMillis",
    }
)

_URI_PARAMETER = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class TypeDescriptor:
    """The type of a property, parameter or body.

    Attributes:
        kind: A built-in kind ("string", "integer", ...) or a declared type name
        required: Whether a value must be present
        items: Element type when the descriptor is an array
        union_members: Alternative kinds when the descriptor is a union
    """

    kind: str
    required: bool = True
    items: TypeDescriptor | None = None
    union_members: tuple[str, ...] = ()

    @property
    def is_array(self) -> bool:
        return self.items is not None

    @property
    def is_union(self) -> bool:
        return len(self.union_members) > 1


@dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    type: TypeDescriptor
    wire_name: str


@dataclass(frozen=True)
class TypeDeclaration:
    """A named type declaration.

    Attributes:
        name: The declared name (key of the ``types`` section)
        supertypes: Names this type inherits from, in declared order
        properties: Properties declared directly on this type
        descriptor: The type expression this declaration stands for
    """

    name: str
    supertypes: tuple[str, ...]
    properties: list[PropertyDescriptor]
    descriptor: TypeDescriptor


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeDescriptor


@dataclass(frozen=True)
class Body:
    """A request or response body for one content type.

    Attributes:
        content_type: The MIME type (e.g., "application/json")
        type: The declared body type
        properties: Properties declared inline on the body
    """

    content_type: str
    type: TypeDescriptor
    properties: list[PropertyDescriptor]


@dataclass(frozen=True)
class Response:
    code: str
    bodies: list[Body]

    @property
    def is_success(self) -> bool:
        return self.code.isdigit() and int(self.code) < 300


@dataclass(frozen=True)
class Trait:
    name: str
    query_parameters: list[Parameter]
    bodies: list[Body]


@dataclass(frozen=True)
class Method:
    """An HTTP operation on a resource.

    Attributes:
        method: The HTTP method (lowercase: "get", "post", etc.)
        display_name: The explicitly declared name, if any
        query_parameters: Query parameters declared on the method itself
        bodies: Request bodies declared on the method itself
        responses: Declared responses, in declared order
        traits: Traits applied to the method (resource-level traits first)
    """

    method: str
    display_name: str | None
    query_parameters: list[Parameter]
    bodies: list[Body]
    responses: list[Response]
    traits: list[Trait]

    def all_query_parameters(self) -> list[Parameter]:
        """Return the method's query parameters followed by those its traits contribute."""
        params = list(self.query_parameters)
        for trait in self.traits:
            params.extend(trait.query_parameters)
        return params

    def all_bodies(self) -> list[Body]:
        bodies = list(self.bodies)
        for trait in self.traits:
            bodies.extend(trait.bodies)
        return bodies

    def success_response(self) -> Response | None:
        """Return the first declared response with a status code below 300."""
        return next((response for response in self.responses if response.is_success), None)


@dataclass(frozen=True)
class Resource:
    """A node in the API's path hierarchy.

    Attributes:
        relative_uri: The URI fragment declared for this node (e.g., "/{userId}")
        path: The full path below the base URI (e.g., "/users/{userId}")
        uri_parameters: Parameters of the whole URI chain, parents first
        methods: Operations declared on this resource
        resources: Nested sub-resources
    """

    relative_uri: str
    path: str
    uri_parameters: list[Parameter]
    methods: list[Method]
    resources: list[Resource]


@dataclass(frozen=True)
class ApiModel:
    """Root container of a resolved RAML API."""

    title: str
    version: str
    base_uri: str
    media_type: str
    types: list[TypeDeclaration]
    traits: dict[str, Trait]
    resources: list[Resource]

    @property
    def default_base_url(self) -> str:
        return self.base_uri.replace("{version}", self.version).rstrip("/")

    def find_type(self, name: str) -> TypeDeclaration | None:
        for declaration in self.types:
            if declaration.name == name:
                return declaration
        return None

    def walk_resources(self) -> Iterator[Resource]:
        """Yield every resource depth-first, parents before children."""

        def walk(resources: list[Resource]) -> Iterator[Resource]:
            for resource in resources:
                yield resource
                yield from walk(resource.resources)

        yield from walk(self.resources)


@dataclass(frozen=True)
class _BuildContext:
    media_type: str
    traits: dict[str, Trait]


def build_model(document: Mapping[str, object]) -> ApiModel:
    """Build an API model from a parsed RAML document.

    Args:
        document: The RAML document as a mapping, with ``!include`` already expanded

    Returns:
        An ApiModel containing types, traits and resources

    Raises:
        ModelLoadError: If a section has an unexpected shape or a trait is unknown
    """
    media_type = document.get("mediaType", DEFAULT_MEDIA_TYPE)
    if isinstance(media_type, list):
        media_type = media_type[0] if media_type else DEFAULT_MEDIA_TYPE
    if not isinstance(media_type, str):
        raise ModelLoadError("'mediaType' must be a string")

    raw_types = document.get("types", document.get("schemas")) or {}
    types = [_build_type_declaration(str(name), raw) for name, raw in _as_mapping(raw_types, "types").items()]

    media = str(media_type)
    traits = _build_traits(document.get("traits"), media)
    ctx = _BuildContext(media_type=media, traits=traits)
    return ApiModel(
        title=str(document.get("title", "")),
        version=str(document.get("version", "")),
        base_uri=str(document.get("baseUri", "")),
        media_type=media,
        types=types,
        traits=traits,
        resources=list(_build_resources(document, "", [], ctx)),
    )


def parse_type_expression(expression: str, required: bool = True) -> TypeDescriptor:
    """Parse a RAML type expression such as ``User[]`` or ``string | nil``.

    Example:
        >>> parse_type_expression("integer[][]").items.items.kind
        'integer'
    """
    text = expression.strip()
    if not text:
        return TypeDescriptor(kind="string", required=required)
    if text.startswith(("{", "<")):
        # Inline JSON or XML schema.
        return TypeDescriptor(kind="any", required=required)

    members = _split_union(text)
    if len(members) > 1:
        concrete = [member for member in members if member != "nil"]
        if not concrete:
            return TypeDescriptor(kind="nil", required=False)
        if len(concrete) == 1:
            return parse_type_expression(concrete[0], required=False)
        return TypeDescriptor(kind="union", required=required, union_members=tuple(concrete))
    if text.endswith("[]"):
        return TypeDescriptor(kind="array", required=required, items=parse_type_expression(text[:-2]))
    if text.startswith("(") and text.endswith(")"):
        return parse_type_expression(text[1:-1], required)
    return TypeDescriptor(kind=text, required=required)


def _split_union(text: str) -> list[str]:
    """Split a type expression on ``|`` outside parentheses."""
    members: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "|" and depth == 0:
            members.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    members.append("".join(current).strip())
    return [member for member in members if member]


def _as_mapping(raw: object, what: str) -> Mapping[str, object]:
    if raw is None:
        return {}
    if isinstance(raw, list):
        # RAML 0.8 style: a list of single-key mappings.
        merged: dict[str, object] = {}
        for item in raw:
            if not isinstance(item, Mapping):
                raise ModelLoadError(f"'{what}' entries must be mappings")
            merged.update(cast(Mapping[str, object], item))
        return merged
    if not isinstance(raw, Mapping):
        raise ModelLoadError(f"'{what}' must be a mapping")
    return cast(Mapping[str, object], raw)


def _build_descriptor(raw: object, required: bool) -> TypeDescriptor:
    if raw is None:
        return TypeDescriptor(kind="string", required=required)
    if isinstance(raw, str):
        return parse_type_expression(raw, required)
    if not isinstance(raw, Mapping):
        raise ModelLoadError(f"Invalid type declaration: {raw!r}")

    type_value = raw.get("type", raw.get("schema"))
    if type_value is None:
        if "properties" in raw:
            type_value = "object"
        elif "items" in raw:
            type_value = "array"
        else:
            type_value = "string"
    if isinstance(type_value, list):
        type_value = type_value[0] if type_value else "object"
    if isinstance(type_value, Mapping):
        return replace(_build_descriptor(type_value, required), required=required)
    if not isinstance(type_value, str):
        raise ModelLoadError(f"Invalid type: {type_value!r}")

    if type_value == "array":
        items = raw.get("items")
        item_type = _build_descriptor(items, True) if items is not None else TypeDescriptor(kind="any")
        return TypeDescriptor(kind="array", required=required, items=item_type)
    return parse_type_expression(type_value, required)


def _build_properties(raw: object) -> list[PropertyDescriptor]:
    properties: list[PropertyDescriptor] = []
    for key, value in _as_mapping(raw, "properties").items():
        name = str(key)
        required = True
        if name.endswith("?"):
            name = name[:-1]
            required = False
        if isinstance(value, Mapping) and "required" in value:
            required = bool(value["required"])
        properties.append(
            PropertyDescriptor(name=name, type=_build_descriptor(value, required), wire_name=name),
        )
    return properties


def _build_parameters(raw: object) -> list[Parameter]:
    return [Parameter(name=prop.name, type=prop.type) for prop in _build_properties(raw)]


def _build_type_declaration(name: str, raw: object) -> TypeDeclaration:
    supertypes: tuple[str, ...] = ()
    properties: list[PropertyDescriptor] = []
    if isinstance(raw, str):
        supertypes = _supertypes(raw)
    elif isinstance(raw, Mapping):
        type_value = raw.get("type", raw.get("schema"))
        if isinstance(type_value, str):
            supertypes = _supertypes(type_value)
        elif isinstance(type_value, list):
            supertypes = tuple(str(item) for item in type_value)
        elif type_value is None and "properties" in raw:
            supertypes = ("object",)
        properties = _build_properties(raw.get("properties"))
    elif raw is not None:
        raise ModelLoadError(f"Invalid declaration for type '{name}'")
    return TypeDeclaration(
        name=name,
        supertypes=supertypes,
        properties=properties,
        descriptor=_build_descriptor(raw, True),
    )


def _supertypes(expression: str) -> tuple[str, ...]:
    descriptor = parse_type_expression(expression)
    if descriptor.is_array or descriptor.is_union or not descriptor.required:
        return ()
    return (descriptor.kind,)


def _build_traits(raw: object, media_type: str) -> dict[str, Trait]:
    traits: dict[str, Trait] = {}
    for name, value in _as_mapping(raw, "traits").items():
        body = _as_mapping(value, f"traits.{name}")
        traits[name] = Trait(
            name=name,
            query_parameters=_build_parameters(body.get("queryParameters")),
            bodies=_build_bodies(body.get("body"), media_type),
        )
    return traits


def _trait_refs(raw: object, traits: dict[str, Trait]) -> list[Trait]:
    if raw is None:
        return []
    refs = raw if isinstance(raw, list) else [raw]
    result: list[Trait] = []
    for ref in refs:
        # Parameterized traits are written as {name: {param: value}}.
        names: Iterable[object] = ref.keys() if isinstance(ref, Mapping) else [ref]
        for name in names:
            trait = traits.get(str(name))
            if trait is None:
                raise ModelLoadError(f"Unknown trait: {name}")
            result.append(trait)
    return result


def _build_bodies(raw: object, media_type: str) -> list[Body]:
    if raw is None:
        return []
    if isinstance(raw, Mapping) and raw and all("/" in str(key) for key in raw):
        return [_build_body(str(content_type), value) for content_type, value in raw.items()]
    return [_build_body(media_type, raw)]


def _build_body(content_type: str, raw: object) -> Body:
    if raw is None:
        return Body(content_type=content_type, type=TypeDescriptor(kind="any"), properties=[])
    properties = _build_properties(raw.get("properties")) if isinstance(raw, Mapping) else []
    return Body(content_type=content_type, type=_build_descriptor(raw, True), properties=properties)


def _build_responses(raw: object, media_type: str) -> list[Response]:
    responses: list[Response] = []
    for code, value in _as_mapping(raw, "responses").items():
        body = value.get("body") if isinstance(value, Mapping) else None
        responses.append(Response(code=str(code), bodies=_build_bodies(body, media_type)))
    return responses


def _build_method(
    verb: str,
    raw: Mapping[str, object],
    inherited: list[Trait],
    ctx: _BuildContext,
) -> Method:
    display_name = raw.get("displayName")
    return Method(
        method=verb,
        display_name=str(display_name) if display_name is not None else None,
        query_parameters=_build_parameters(raw.get("queryParameters")),
        bodies=_build_bodies(raw.get("body"), ctx.media_type),
        responses=_build_responses(raw.get("responses"), ctx.media_type),
        traits=inherited + _trait_refs(raw.get("is"), ctx.traits),
    )


def _build_resources(
    raw: Mapping[str, object],
    parent_path: str,
    parent_params: list[Parameter],
    ctx: _BuildContext,
) -> Iterator[Resource]:
    for key, value in raw.items():
        if not isinstance(key, str) or not key.startswith("/"):
            continue
        yield _build_resource(key, _as_mapping(value, key), parent_path, parent_params, ctx)


def _build_resource(
    relative_uri: str,
    raw: Mapping[str, object],
    parent_path: str,
    parent_params: list[Parameter],
    ctx: _BuildContext,
) -> Resource:
    path = parent_path.rstrip("/") + relative_uri
    declared = {param.name: param for param in _build_parameters(raw.get("uriParameters"))}
    params = list(parent_params)
    for name in _URI_PARAMETER.findall(relative_uri):
        param = declared.get(name, Parameter(name=name, type=TypeDescriptor(kind="string")))
        params.append(Parameter(name=param.name, type=replace(param.type, required=True)))

    traits = _trait_refs(raw.get("is"), ctx.traits)
    methods = [
        _build_method(str(key), _as_mapping(value, str(key)), traits, ctx)
        for key, value in raw.items()
        if key in HTTP_METHODS
    ]
    return Resource(
        relative_uri=relative_uri,
        path=path,
        uri_parameters=params,
        methods=methods,
        resources=list(_build_resources(raw, path, params, ctx)),
    )
