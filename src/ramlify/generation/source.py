"""In-memory builder for generated Go source.

A Module owns Files; a File owns imports, TypeDefs, Structs and Funcs.
Everything is created lazily on first reference and only ever appended to.
Nothing touches the filesystem until Module.save().

Example:
    >>> module = Module(Path("out"), "client")
    >>> models = module.file("models.go")
    >>> models.struct("User").add_field("ID", "string", 'json:"id"')
    StructField(name='ID', type='string', tag='json:"id"')
    >>> models.struct("User") is models.struct("User")
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from ..errors import DuplicateIdentifierError

if TYPE_CHECKING:
    from .emitter import Formatter

Definition = Union["TypeDef", "Struct", "Func"]

# Stands in for definitions that live in included files.
_RESERVED: Any = object()


@dataclass(frozen=True)
class Arg:
    name: str
    type: str

    def __str__(self) -> str:
        return f"{self.name} {self.type}"


def call(function: str, *args: str) -> str:
    """Render a Go call expression."""
    return f"{function}({', '.join(args)})"


@dataclass(frozen=True)
class StructField:
    name: str
    type: str
    tag: str | None = None


@dataclass(frozen=True)
class TypeDef:
    """A named type defined over another type, e.g. ``type Users []User``."""

    name: str
    type: str


@dataclass
class Struct:
    name: str
    fields: list[StructField] = field(default_factory=list)

    def add_field(self, name: str, type_: str, tag: str | None = None) -> StructField:
        struct_field = StructField(name=name, type=type_, tag=tag)
        self.fields.append(struct_field)
        return struct_field


@dataclass
class Func:
    """A Go function or method under construction.

    Attributes:
        name: The function name
        receiver: The receiver declaration (e.g., "c *Client"), if a method
        args: Arguments in the order they were added
        return_types: Return types in the order they were added
        body: Free-form body segments, concatenated when rendered
    """

    name: str
    receiver: str | None = None
    args: list[Arg] = field(default_factory=list)
    return_types: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)

    def set_receiver(self, receiver: str) -> None:
        self.receiver = receiver

    def add_arg(self, name: str, type_: str) -> None:
        self.args.append(Arg(name=name, type=type_))

    def add_args(self, *args: Arg) -> None:
        self.args.extend(args)

    def add_return(self, type_: str) -> None:
        self.return_types.append(type_)

    def write(self, text: str) -> None:
        self.body.append(text)


class File:
    """A single generated source file.

    Note:
        Struct and Func names are claimed in the owning Module's identifier
        registry, so a name can only ever refer to one definition per Module.
    """

    def __init__(self, module: Module, path: str) -> None:
        self.module = module
        self.path = path
        self.imports: set[str] = set()
        self.typedefs: dict[str, TypeDef] = {}
        self.structs: dict[str, Struct] = {}
        self.funcs: dict[str, Func] = {}

    def add_import(self, *paths: str) -> None:
        self.imports.update(paths)

    def has_typedef(self, name: str) -> bool:
        return name in self.typedefs

    def typedef(self, name: str, type_: str) -> TypeDef:
        """Return the TypeDef with this name, creating it on first use."""
        existing = self.typedefs.get(name)
        if existing is not None:
            return existing
        typedef = TypeDef(name=name, type=type_)
        self.module.claim(name, typedef)
        self.typedefs[name] = typedef
        return typedef

    def has_struct(self, name: str) -> bool:
        return name in self.structs

    def struct(self, name: str) -> Struct:
        """Return the Struct with this name, creating it on first use."""
        existing = self.structs.get(name)
        if existing is not None:
            return existing
        struct = Struct(name=name)
        self.module.claim(name, struct)
        self.structs[name] = struct
        return struct

    def func(self, name: str) -> Func:
        """Return the Func with this name, creating it on first use."""
        existing = self.funcs.get(name)
        if existing is not None:
            return existing
        func = Func(name=name)
        self.module.claim(name, func)
        self.funcs[name] = func
        return func


class Module:
    """The top-level generation unit: one Go package in one output directory.

    Attributes:
        output_dir: Directory the package is written to
        package: The Go package name
        files: Files keyed by path relative to output_dir, in creation order
        includes: Static files copied into the package verbatim
        formatter: External formatter run after writing, if any
    """

    def __init__(
        self,
        output_dir: Path,
        package: str,
        formatter: Formatter | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.package = package
        self.formatter = formatter
        self.files: dict[str, File] = {}
        self.includes: list[Path] = []
        self._identifiers: dict[str, Definition] = {}

    def file(self, path: str) -> File:
        existing = self.files.get(path)
        if existing is not None:
            return existing
        source_file = File(self, path)
        self.files[path] = source_file
        return source_file

    def include(self, path: Path) -> None:
        if path not in self.includes:
            self.includes.append(path)

    def lookup(self, name: str) -> Definition | None:
        definition = self._identifiers.get(name)
        return None if definition is _RESERVED else definition

    def is_declared(self, name: str) -> bool:
        return name in self._identifiers

    def reserve(self, *names: str) -> None:
        """Claim names defined outside the builder, such as those of included files."""
        for name in names:
            self.claim(name, _RESERVED)

    def claim(self, name: str, definition: Definition) -> None:
        """Register a definition under a name unique across the Module.

        Raises:
            DuplicateIdentifierError: If the name already refers to another definition
        """
        existing = self._identifiers.get(name)
        if existing is not None and existing is not definition:
            raise DuplicateIdentifierError(f"Identifier '{name}' is already declared")
        self._identifiers[name] = definition

    def save(self) -> list[Path]:
        """Render every File into output_dir and run the formatter.

        Returns:
            The paths written, in write order
        """
        from .emitter import save_module

        return save_module(self)
