"""Identifier derivation for generated Go code.

Names in a RAML document are free-form (``user_id``, ``oauth-token``,
``/users/{userId}``); Go needs camel-cased identifiers whose initial
letter decides visibility. Everything here is a pure function.
"""

from __future__ import annotations

import re

from ..model import Method, Resource

_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")
_URI_PARAMETER = re.compile(r"^\{.+\}$")

# Applied in order, each across the whole string. A rule only matches a
# camel-case word: the match may not be followed by a lower-case letter.
ACRONYMS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"Id(?![a-z])"), "ID"),
    (re.compile(r"Oauth(?![a-z])"), "OAuth"),
    (re.compile(r"Url(?![a-z])"), "URL"),
    (re.compile(r"Uri(?![a-z])"), "URI"),
    (re.compile(r"Http(?![a-z])"), "HTTP"),
    (re.compile(r"Api(?![a-z])"), "API"),
    (re.compile(r"Json(?![a-z])"), "JSON"),
)

# Go keywords and the identifiers used in their place.
RESERVED = {
    "break": "brk",
    "case": "kase",
    "chan": "channel",
    "const": "constant",
    "continue": "cont",
    "default": "dflt",
    "defer": "deferred",
    "else": "otherwise",
    "fallthrough": "fallthru",
    "for": "forValue",
    "func": "fn",
    "go": "goValue",
    "goto": "gotoValue",
    "if": "ifValue",
    "import": "imp",
    "interface": "iface",
    "map": "mapping",
    "package": "pkg",
    "range": "rng",
    "return": "ret",
    "select": "sel",
    "struct": "strct",
    "switch": "swtch",
    "type": "kind",
    "var": "variable",
}

VERB_PREFIXES = {
    "get": "Get",
    "post": "Create",
    "put": "Update",
    "patch": "Update",
    "delete": "Delete",
}


def upper_first(text: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def fix_acronyms(text: str) -> str:
    """Apply the acronym rules in order.

    Example:
        >>> fix_acronyms("OauthId")
        'OAuthID'
    """
    for pattern, replacement in ACRONYMS:
        text = pattern.sub(replacement, text)
    return text


def to_identifier(name: str, exported: bool = True) -> str:
    """Convert a RAML name into a Go identifier.

    Example:
        >>> to_identifier("user_id")
        'UserID'
        >>> to_identifier("page-size", exported=False)
        'pageSize'
        >>> to_identifier("type", exported=False)
        'kind'
    """
    segments = [segment for segment in _SEPARATORS.split(name) if segment]
    joined = "".join(
        upper_first(segment) if (index > 0 or exported) else segment for index, segment in enumerate(segments)
    )
    joined = fix_acronyms(joined)
    return RESERVED.get(joined, joined)


def infer_method_name(resource: Resource, method: Method, prefix_depth: int = 0) -> str:
    """Derive the client function name for a method on a resource.

    An explicit ``displayName`` wins. Otherwise the name is built from the
    non-parameter path segments below ``prefix_depth``, where the primary
    type of a successful response may stand in for the last segment.

    Example:
        ``GET /users/{userId}/posts`` -> ``GetUsersPosts``
    """
    if method.display_name is not None:
        return to_identifier(method.display_name)

    parts = [
        to_identifier(segment)
        for segment in resource.path.split("/")
        if segment and not _URI_PARAMETER.match(segment)
    ][prefix_depth:]

    primary = _primary_response_type(method)
    if primary and primary[0].isupper():
        if parts:
            parts[-1] = to_identifier(primary)
        else:
            parts.append(to_identifier(primary))

    tail = fix_acronyms("".join(parts))
    prefix = VERB_PREFIXES.get(method.method, upper_first(method.method.lower()))
    return f"{prefix}{tail}"


def _primary_response_type(method: Method) -> str | None:
    response = method.success_response()
    if response is None or not response.bodies:
        return None
    descriptor = response.bodies[0].type
    while descriptor.items is not None:
        descriptor = descriptor.items
    return descriptor.kind
