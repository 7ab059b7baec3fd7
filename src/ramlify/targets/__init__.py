from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..errors import DependencyMissingError
from .base import Target
from .go_target import GoTarget

TARGETS: Mapping[str, Target] = MappingProxyType({"go": GoTarget()})


def get_target(name: str) -> Target:
    """Look up a registered target by name.

    Raises:
        DependencyMissingError: If no target has that name
    """
    try:
        return TARGETS[name]
    except KeyError:
        available = ", ".join(sorted(TARGETS))
        raise DependencyMissingError(f'Invalid target "{name}" (available: {available})') from None


__all__ = [
    "GoTarget",
    "TARGETS",
    "Target",
    "get_target",
]
