"""Accessors extracting a comparable state value from a resource snapshot."""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from resilient_provisioning.domain.resilience import CHECKSET, Accessor, AccessorSpec

_INDEX = re.compile(r"^(?P<name>[^\[\]]*)((\[\d+\])*)$")
_INDEXES = re.compile(r"\[(\d+)\]")


def _split_path(path: str) -> list[Any]:
    path = path.strip()
    if path.startswith("$."):
        path = path[2:]
    elif path in ("$", ""):
        return []

    steps: list[Any] = []
    for part in path.split("."):
        match = _INDEX.match(part)
        if match is None:
            raise ValueError(f"Invalid accessor path segment '{part}' in '{path}'")
        if match.group("name"):
            steps.append(match.group("name"))
        steps.extend(int(index) for index in _INDEXES.findall(part))
    return steps


def _step(value: Any, key: Any) -> Any:
    if value is None:
        return None
    if isinstance(key, int):
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return value[key] if -len(value) <= key < len(value) else None
        return None
    if isinstance(value, Mapping):
        return value.get(key)
    return getattr(value, key, None)


def path_accessor(path: str) -> Accessor:
    """
    Build an accessor walking ``path`` through a snapshot.

    Paths are dotted keys with optional list indexes, optionally prefixed
    with ``$.``: ``State.Name``, ``$.Instances[0].State.Name``. Mappings are
    read by key, other objects by attribute. Missing pieces yield ``None``.
    """
    steps = _split_path(path)

    def accessor(snapshot: Any) -> Any:
        value = snapshot
        for key in steps:
            value = _step(value, key)
        return value

    accessor.__name__ = f"path_accessor({path})"
    return accessor


def checkset_accessor(path: str) -> Accessor:
    """Accessor returning ``CHECKSET`` when the value at ``path`` is populated, else ``""``."""
    inner = path_accessor(path)

    def accessor(snapshot: Any) -> Any:
        value = inner(snapshot)
        if value is None or value == "" or value == [] or value == {}:
            return ""
        return CHECKSET

    accessor.__name__ = f"checkset_accessor({path})"
    return accessor


def as_accessor(spec: AccessorSpec) -> Accessor:
    """Coerce a path string or callable into an accessor."""
    if isinstance(spec, str):
        return path_accessor(spec)
    if callable(spec):
        return spec
    raise TypeError(f"Accessor must be a path string or a callable, got {type(spec).__name__}")
