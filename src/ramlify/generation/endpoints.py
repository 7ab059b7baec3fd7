"""Client function generation.

Every method of every resource becomes one method on the generated
``Client``. Generation for a single operation is straight-line:

1. name the function
2. take path arguments from the resource's URI chain
3. serialize query parameters into ``q``
4. marshal the request body
5. issue the request and decode the first successful response

Example output for ``GET /users/{userId}`` returning ``User``::

    func (c *Client) GetUser(userID string) (*http.Response, User, error) {
        var typ User
        q := ""
        req, err := http.NewRequest("GET", c.url(fmt.Sprintf("/users/%s", userID)+q), nil)
        ...
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from textwrap import indent

from ..errors import UnsupportedConstructError
from ..log import get_logger
from ..model import BUILTIN_KINDS, ApiModel, Body, Method, Parameter, Resource, TypeDeclaration, TypeDescriptor
from .models import generate_struct, is_object_type
from .naming import infer_method_name, to_identifier
from .profile import GenerationProfile
from .source import Arg, File, Func, Struct, TypeDef, call
from .type_emitter import TypeTranslator

logger = get_logger(__name__)

CLIENT_RECEIVER = "c *Client"
BASE_URL_FUNC = "defaultBaseURL"

_NUMERIC_KINDS = frozenset({"integer", "number", "uint"})

# Identifiers a generated function body already uses, package names included.
LOCAL_NAMES = frozenset(
    {
        "body",
        "bytes",
        "c",
        "err",
        "fmt",
        "http",
        "item",
        "json",
        "payload",
        "q",
        "query",
        "req",
        "res",
        "typ",
        "url",
        "v",
    }
)


def go_string(text: str) -> str:
    """Quote text as a Go interpreted string literal."""
    return json.dumps(text, ensure_ascii=False)


def is_json_content_type(content_type: str) -> bool:
    media = content_type.split(";", 1)[0].strip().lower()
    return media == "application/json" or media.endswith("+json")


def path_arg_name(name: str) -> str:
    """Get the Go argument name of a path parameter, clear of LOCAL_NAMES.

    Example:
        >>> path_arg_name("query")
        'queryParam'
    """
    identifier = to_identifier(name, exported=False)
    if identifier in LOCAL_NAMES:
        return f"{identifier}Param"
    return identifier


def path_placeholder(descriptor: TypeDescriptor) -> str:
    """Get the fmt verb used to substitute a path parameter."""
    if descriptor.kind in _NUMERIC_KINDS:
        return "%d"
    if descriptor.kind == "boolean":
        return "%t"
    if descriptor.kind == "string":
        return "%s"
    return "%v"


@dataclass
class _RequestParts:
    """Code fragments collected while generating one operation."""

    before: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)
    body_reader: str = "nil"


class EndpointGenerator:
    """Generates one client function per resource method into a File.

    Attributes:
        file: The File receiving the functions and their helper structs
        api: The API model being generated
        profile: Generation settings (name prefix depth)
        translator: Type translator shared by every operation of the File
    """

    def __init__(self, source_file: File, api: ApiModel, profile: GenerationProfile) -> None:
        self.file = source_file
        self.api = api
        self.profile = profile
        self.translator = TypeTranslator()

    def generate(self) -> None:
        """Generate the base URL helper and every operation of the API."""
        base_url = self.file.func(BASE_URL_FUNC)
        base_url.add_return("string")
        base_url.write(f"\treturn {go_string(self.api.default_base_url)}\n")

        for resource in self.api.walk_resources():
            for method in resource.methods:
                self.method(resource, method)
        self.file.add_import(*self.translator.imports)

    def method(self, resource: Resource, method: Method) -> Func:
        """Generate the client function for one method of a resource.

        Raises:
            UnsupportedConstructError: If the request body cannot be generated, or
                the function name is already taken by another operation
        """
        name = infer_method_name(resource, method, self.profile.prefix_depth)
        if self.file.module.is_declared(name):
            raise UnsupportedConstructError(
                f"{method.method.upper()} {resource.path}: function name '{name}' is already used; "
                "declare a displayName for one of the methods"
            )

        self.file.add_import("net/http")
        func = self.file.func(name)
        func.set_receiver(CLIENT_RECEIVER)
        path_args = self._path_args(resource)
        func.add_args(*path_args)

        result_type = self._result_type(method)
        failure = "nil, typ, err" if result_type else "nil, err"
        parts = _RequestParts()
        if result_type:
            parts.before.append(f"\tvar typ {result_type}\n")

        self._query_params(func, method, parts)
        self._body_params(func, resource, method, parts, failure)
        self._returns(func, method, result_type, parts)

        url = f"c.url({self._path_expression(resource, path_args)} + q)"
        func.write("".join(parts.before))
        func.write(
            f"\treq, err := http.NewRequest({go_string(method.method.upper())}, {url}, {parts.body_reader})\n"
            "\tif err != nil {\n"
            f"\t\treturn {failure}\n"
            "\t}\n"
        )
        func.write("".join(parts.headers))
        func.write("".join(parts.after))
        logger.debug("%s %s -> %s", method.method.upper(), resource.path, name)
        return func

    def _path_args(self, resource: Resource) -> list[Arg]:
        return [
            Arg(name=path_arg_name(param.name), type=self.translator.translate(param.type))
            for param in resource.uri_parameters
        ]

    def _path_expression(self, resource: Resource, args: list[Arg]) -> str:
        if not args:
            return go_string(resource.path)
        self.file.add_import("fmt")
        template = resource.path.replace("%", "%%")
        for param in resource.uri_parameters:
            template = template.replace(f"{{{param.name}}}", path_placeholder(param.type))
        return call("fmt.Sprintf", go_string(template), *(arg.name for arg in args))

    def _query_params(self, func: Func, method: Method, parts: _RequestParts) -> None:
        params = method.all_query_parameters()
        if not params:
            parts.before.append('\tq := ""\n')
            return

        self.file.add_import("net/url", "fmt")
        type_name = f"{func.name}Params"
        declared = self.file.has_struct(type_name)
        struct = self.file.struct(type_name)
        func.add_arg("query", type_name)

        parts.before.append("\tv := url.Values{}\n")
        for param in params:
            field_name = to_identifier(param.name)
            if not declared:
                struct.add_field(field_name, self.translator.translate(param.type))
            parts.before.append(_query_setter(param, field_name))
        parts.before.append('\tq := "?" + v.Encode()\n')

    def _body_params(
        self,
        func: Func,
        resource: Resource,
        method: Method,
        parts: _RequestParts,
        failure: str,
    ) -> None:
        bodies = method.all_bodies()
        if not bodies:
            return
        body = bodies[0]
        if not is_json_content_type(body.content_type):
            raise UnsupportedConstructError(
                f"{method.method.upper()} {resource.path}: unsupported request body type '{body.content_type}'"
            )

        func.add_arg("payload", self._payload_type(func.name, body))
        self.file.add_import("bytes", "encoding/json")
        parts.before.append(
            "\tbody, err := json.Marshal(payload)\n"
            "\tif err != nil {\n"
            f"\t\treturn {failure}\n"
            "\t}\n"
        )
        parts.body_reader = "bytes.NewReader(body)"
        parts.headers.append(f'\treq.Header.Set("Content-Type", {go_string(body.content_type)})\n')

    def _payload_type(self, func_name: str, body: Body) -> str:
        """Get the payload type, declaring a ``<Func>Payload`` struct when needed."""
        descriptor = body.type
        translated = self.translator.translate(descriptor)
        if not body.properties:
            if descriptor.is_array or descriptor.is_union:
                return translated
            if isinstance(self.file.module.lookup(translated), (Struct, TypeDef)):
                return translated
            if descriptor.kind in BUILTIN_KINDS and descriptor.kind != "object":
                return translated
            declaration = self.api.find_type(descriptor.kind)
            if declaration is not None and not is_object_type(self.api, declaration):
                return translated

        payload_name = f"{func_name}Payload"
        if self.file.has_struct(payload_name):
            return payload_name
        supertypes = (descriptor.kind,) if self.api.find_type(descriptor.kind) is not None else ()
        declaration = TypeDeclaration(
            name=payload_name,
            supertypes=supertypes,
            properties=body.properties,
            descriptor=descriptor,
        )
        generate_struct(self.file, self.api, payload_name, declaration, self.translator)
        return payload_name

    def _result_type(self, method: Method) -> str | None:
        response = method.success_response()
        if response is None or not response.bodies:
            return None
        return self.translator.translate(response.bodies[0].type)

    def _returns(self, func: Func, method: Method, result_type: str | None, parts: _RequestParts) -> None:
        func.add_return("*http.Response")
        if result_type:
            func.add_return(result_type)
        func.add_return("error")

        if method.success_response() is None:
            parts.after.append("\treturn c.do(req)\n")
            return

        prefix = "res, typ, " if result_type else "res, "
        parts.after.append(
            "\tres, err := c.do(req)\n"
            "\tif err != nil {\n"
            f"\t\treturn {prefix}err\n"
            "\t}\n"
            "\tif res.StatusCode >= 300 {\n"
            f"\t\treturn {prefix}&StatusError{{Response: res}}\n"
            "\t}\n"
        )
        if not result_type:
            parts.after.append("\treturn res, nil\n")
            return

        self.file.add_import("encoding/json")
        parts.after.append(
            "\tdefer res.Body.Close()\n"
            "\tif err := json.NewDecoder(res.Body).Decode(&typ); err != nil {\n"
            "\t\treturn res, typ, err\n"
            "\t}\n"
            "\treturn res, typ, nil\n"
        )


def generate_endpoints(api: ApiModel, source_file: File, profile: GenerationProfile) -> None:
    EndpointGenerator(source_file, api, profile).generate()


def _query_setter(param: Parameter, field_name: str) -> str:
    """Render the statements adding one query parameter to ``v``."""
    key = go_string(param.name)
    value = f"query.{field_name}" if param.type.required else f"*query.{field_name}"
    if param.type.is_array:
        setter = f"\tfor _, item := range {value} {{\n\t\tv.Add({key}, fmt.Sprint(item))\n\t}}\n"
    else:
        setter = f"\tv.Set({key}, fmt.Sprint({value}))\n"
    if param.type.required:
        return setter
    nested = indent(setter, "\t")
    return f"\tif query.{field_name} != nil {{\n{nested}\t}}\n"
