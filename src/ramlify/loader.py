from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Mapping, cast
from urllib.parse import urlparse

import yaml

from .errors import ModelLoadError
from .log import get_logger
from .model import ApiModel, build_model

logger = get_logger(__name__)

RamlSource = str | PathLike[str] | Mapping[str, object]

RAML_HEADER = "#%RAML"
_YAML_SUFFIXES = {".raml", ".yaml", ".yml", ".json"}


def load_raml(
    source: RamlSource,
    base_path: str | PathLike[str] | None = None,
) -> ApiModel:
    """Load a RAML document and build its API model.

    Args:
        source: Can be a file path (str or PathLike), URL, or a dict-like object
        base_path: Base path for resolving relative ``!include`` references

    Returns:
        The API model of the document

    Raises:
        ModelLoadError: If the document cannot be read or is malformed
    """
    resolved_base_path = Path(base_path) if base_path is not None else None
    document = read_document(source, resolved_base_path)
    title = document.get("title")
    if not isinstance(title, str) or not title:
        raise ModelLoadError("Missing or invalid 'title' field in document")
    model = build_model(document)
    logger.debug("loaded '%s': %d types, %d top-level resources", model.title, len(model.types), len(model.resources))
    return model


def read_document(source: RamlSource, base_path: Path | None = None) -> Mapping[str, object]:
    """Read a RAML document into a mapping, expanding ``!include`` tags."""
    if isinstance(source, Mapping):
        return dict(source)

    source_str = str(source) if isinstance(source, PathLike) else source

    if _is_url(source_str):
        text = _fetch_url(source_str)
        # Includes are resolved against the local base path only.
        data = _load_yaml(text, base_path or Path.cwd(), ())
        return _require_mapping(data, source_str)

    path = Path(source_str)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelLoadError(f"Cannot read RAML document: {path}") from exc
    if not text.lstrip().startswith(RAML_HEADER):
        raise ModelLoadError(f"Missing '{RAML_HEADER}' header: {path}")
    data = _load_yaml(text, base_path or path.parent, (path.resolve(),))
    return _require_mapping(data, str(path))


def _is_url(source: str) -> bool:
    """Check if the source string is a URL."""
    parsed = urlparse(source)
    return parsed.scheme in {"http", "https"}


def _fetch_url(url: str) -> str:
    """Fetch content from a URL.

    Raises:
        ModelLoadError: If the URL cannot be fetched
    """
    from urllib.request import Request, urlopen

    try:
        request = Request(url, headers={"User-Agent": "ramlify"})
        with urlopen(request, timeout=30) as response:  # noqa: S310
            return response.read().decode("utf-8")
    except Exception as exc:
        raise ModelLoadError(f"Failed to fetch URL: {url}") from exc


def _require_mapping(data: object, origin: str) -> Mapping[str, object]:
    if not isinstance(data, dict):
        raise ModelLoadError(f"RAML document must be a mapping: {origin}")
    return cast(Mapping[str, object], data)


class _RamlLoader(yaml.SafeLoader):
    """SafeLoader that understands the RAML ``!include`` tag.

    Subclasses are created per document so each one carries its own base
    directory and the chain of files currently being included.
    """

    base_path: Path = Path(".")
    include_stack: tuple[Path, ...] = ()


def _construct_include(loader: _RamlLoader, node: yaml.Node) -> object:
    target = (loader.base_path / str(loader.construct_scalar(cast(yaml.ScalarNode, node)))).resolve()
    if target in loader.include_stack:
        chain = " -> ".join(str(path) for path in (*loader.include_stack, target))
        raise ModelLoadError(f"Include cycle: {chain}")
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelLoadError(f"Cannot read included file: {target}") from exc
    if target.suffix.lower() not in _YAML_SUFFIXES:
        return text
    return _load_yaml(text, target.parent, (*loader.include_stack, target))


_RamlLoader.add_constructor("!include", _construct_include)


def _load_yaml(text: str, base_path: Path, include_stack: tuple[Path, ...]) -> object:
    loader_cls = cast(
        type[_RamlLoader],
        type("_DocumentLoader", (_RamlLoader,), {"base_path": base_path, "include_stack": include_stack}),
    )
    try:
        return yaml.load(text, Loader=loader_cls)  # noqa: S506
    except yaml.YAMLError as exc:
        raise ModelLoadError(f"Invalid RAML document: {exc}") from exc
