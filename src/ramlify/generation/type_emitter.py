"""Type translation utilities for code generation.

This module provides the TypeTranslator class which converts RAML type
descriptors into Go type strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..model import TypeDescriptor
from .naming import to_identifier

ANY_TYPE = "interface{}"

SCALAR_TYPES = {
    "string": "string",
    "integer": "int",
    "number": "int",
    "uint": "uint",
    "boolean": "bool",
    "object": "map[string]interface{}",
    "any": ANY_TYPE,
    "nil": ANY_TYPE,
    "file": "io.Reader",
    "date-only": "time.Time",
    "time-only": "time.Time",
    "datetime-only": "time.Time",
    "datetime": "time.Time",
    "IsoDate": "time.Time",
    "UnixTimestampMillis": "time.Time",
}

# Qualified Go types and the package each one needs.
_TYPE_PACKAGES = {
    "io.": "io",
    "time.": "time",
}


@dataclass
class TypeTranslator:
    """Converts RAML type descriptors to Go type strings.

    Attributes:
        imports: Go packages required by the types translated so far

    Note:
        translate() and translate_name() have a side effect: they add the
        packages needed by the emitted type to self.imports. When one
        translator serves several types, the imports accumulate, and the
        caller is expected to copy them into the File being generated.

    Example:
        >>> translator = TypeTranslator()
        >>> translator.translate(TypeDescriptor(kind="integer", required=False))
        '*int'
        >>> translator.translate(TypeDescriptor(kind="array", items=TypeDescriptor(kind="datetime")))
        '[]time.Time'
        >>> translator.imports
        {'time'}
    """

    imports: set[str] = field(default_factory=set)

    def translate(self, descriptor: TypeDescriptor) -> str:
        """Convert a descriptor to a Go type, pointer-qualified when optional."""
        base = self._translate_base(descriptor)
        if not descriptor.required:
            return f"*{base}"
        return base

    def translate_name(self, kind: str) -> str:
        """Convert a bare kind or type name to a Go type."""
        scalar = SCALAR_TYPES.get(kind)
        if scalar is not None:
            self._track_imports(scalar)
            return scalar
        return to_identifier(kind)

    def _translate_base(self, descriptor: TypeDescriptor) -> str:
        if descriptor.is_union:
            # Unions are not modeled precisely.
            return ANY_TYPE
        if descriptor.items is not None:
            return f"[]{self._translate_base(descriptor.items)}"
        return self.translate_name(descriptor.kind)

    def _track_imports(self, go_type: str) -> None:
        for prefix, package in _TYPE_PACKAGES.items():
            if prefix in go_type:
                self.imports.add(package)
