"""Rendering of the source builder to disk.

render_file() turns a File into Go source text; save_module() writes every
File of a Module (plus its static includes) into the output directory and
then runs the external formatter once over the whole directory.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ..errors import FormatError, WriteError
from ..log import get_logger
from .source import File, Func, Module, Struct

logger = get_logger(__name__)

GENERATED_HEADER = "// Code generated by ramlify. DO NOT EDIT."

_PACKAGE_CLAUSE = re.compile(r"^package\s+\w+", re.MULTILINE)


@dataclass(frozen=True)
class Formatter:
    """An external formatter invoked as ``<command...> <output_dir>``."""

    command: tuple[str, ...] = ("gofmt", "-w")

    @property
    def executable(self) -> str:
        return self.command[0]

    def is_available(self) -> bool:
        return bool(self.command) and shutil.which(self.executable) is not None

    def run(self, directory: Path) -> None:
        """Format every file under directory in place.

        Raises:
            FormatError: If the formatter cannot be started or exits non-zero
        """
        args = [*self.command, str(directory)]
        logger.debug("running formatter: %s", " ".join(args))
        try:
            result = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise FormatError(f"Cannot run formatter '{self.executable}': {exc}") from exc
        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise FormatError(f"Formatter '{self.executable}' failed with exit code {result.returncode}: {detail}")


def render_file(source_file: File, package: str) -> str:
    """Render a File as Go source: imports, type definitions, structs, then functions."""
    parts = [GENERATED_HEADER, "", f"package {package}", ""]
    if source_file.imports:
        parts.append("import (")
        parts.extend(f'\t"{path}"' for path in sorted(source_file.imports))
        parts.extend([")", ""])
    for typedef in source_file.typedefs.values():
        parts.extend([f"type {typedef.name} {typedef.type}", ""])
    for struct in source_file.structs.values():
        parts.extend([render_struct(struct), ""])
    for func in source_file.funcs.values():
        parts.extend([render_func(func), ""])
    return "\n".join(parts).rstrip() + "\n"


def render_struct(struct: Struct) -> str:
    lines = [f"type {struct.name} struct {{"]
    for struct_field in struct.fields:
        line = f"\t{struct_field.name} {struct_field.type}"
        if struct_field.tag:
            line += f" `{struct_field.tag}`"
        lines.append(line)
    lines.append("}")
    return "\n".join(lines)


def render_func(func: Func) -> str:
    receiver = f"({func.receiver}) " if func.receiver else ""
    args = ", ".join(str(arg) for arg in func.args)
    signature = f"func {receiver}{func.name}({args})"
    if len(func.return_types) == 1:
        signature += f" {func.return_types[0]}"
    elif func.return_types:
        signature += f" ({', '.join(func.return_types)})"
    body = "".join(func.body)
    if body and not body.endswith("\n"):
        body += "\n"
    return f"{signature} {{\n{body}}}"


def render_include(text: str, package: str) -> str:
    return _PACKAGE_CLAUSE.sub(f"package {package}", text, count=1)


def save_module(module: Module) -> list[Path]:
    """Write every File of the Module, then format the output directory.

    Files already written stay on disk when a later write or the formatter
    fails.

    Raises:
        WriteError: If a file or the output directory cannot be written
        FormatError: If the formatter fails
    """
    if not module.files and not module.includes:
        logger.debug("nothing to write for package %s", module.package)
        return []

    written: list[Path] = []
    try:
        module.output_dir.mkdir(parents=True, exist_ok=True)
        for include in module.includes:
            target = module.output_dir / include.name
            target.write_text(render_include(include.read_text(encoding="utf-8"), module.package), encoding="utf-8")
            written.append(target)
        for path, source_file in module.files.items():
            target = module.output_dir / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(render_file(source_file, module.package), encoding="utf-8")
            written.append(target)
    except OSError as exc:
        raise WriteError(f"Cannot write generated sources to {module.output_dir}: {exc}") from exc
    logger.debug("wrote %d files to %s", len(written), module.output_dir)

    if module.formatter is not None:
        module.formatter.run(module.output_dir)
    return written
