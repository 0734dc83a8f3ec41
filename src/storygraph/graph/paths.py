"""Dotted-path access into cached documents.

Paths like ``nodes.<id>.locationId`` or ``nodes.<id>.dialogues.0.text``
address a value inside a document. Each segment is resolved against the
current value:

- model: field by python name or serialized alias (extension fields too)
- mapping: key
- sequence: integer index

Reads are total: any unset or out-of-range segment yields None. Writes create
missing mapping levels, and values written into typed model fields are
validated, so the document keeps its typed shape.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any

from pydantic import BaseModel, ValidationError

from storygraph.graph.errors import PathError
from storygraph.models.story_graph import NODE_ADAPTER, BaseNode, Edge, StoryGraph


_MISSING = object()


def split_path(path: str) -> list[str]:
    """Split a dotted path into segments.

    Raises:
        PathError: If the path is empty or has an empty segment.
    """
    if not path:
        raise PathError(path, "empty path")
    parts = path.split(".")
    if any(not p for p in parts):
        raise PathError(path, "empty segment")
    return parts


def _field_name(model: BaseModel, segment: str) -> str | None:
    """Map a segment to a declared field name (accepting aliases)."""
    fields = type(model).model_fields
    if segment in fields:
        return segment
    for name, info in fields.items():
        if info.alias == segment:
            return name
    return None


def _child(value: Any, segment: str) -> Any:
    """Return the child at *segment*, or _MISSING."""
    if isinstance(value, BaseModel):
        name = _field_name(value, segment)
        if name is not None:
            return getattr(value, name)
        extra = value.model_extra or {}
        return extra.get(segment, _MISSING)
    if isinstance(value, Mapping):
        return value.get(segment, _MISSING)
    if isinstance(value, (list, tuple)):
        try:
            index = int(segment)
        except ValueError:
            return _MISSING
        if -len(value) <= index < len(value):
            return value[index]
    return _MISSING


def get_path(root: Any, path: str) -> Any:
    """Read the value at *path*, or None if any segment is unset."""
    current = root
    for segment in split_path(path):
        if current is None:
            return None
        current = _child(current, segment)
        if current is _MISSING:
            return None
    return current


def _keyed_record(value: Mapping[str, Any], key: str, path: str) -> dict[str, Any]:
    """Default a record's ``id`` to its map key; a different id is rejected."""
    data = dict(value)
    record_id = data.setdefault("id", key)
    if record_id != key:
        raise PathError(path, f"id '{record_id}' does not match key '{key}'")
    return data


def _coerce_entry(root: Any, container: Any, key: str, existing: Any, value: Any, path: str) -> Any:
    """Validate a mapping written over a model (or into nodes/edges)."""
    if not isinstance(value, Mapping):
        return value
    if isinstance(root, StoryGraph) and container is root.nodes:
        return NODE_ADAPTER.validate_python(_keyed_record(value, key, path))
    if isinstance(root, StoryGraph) and container is root.edges:
        return Edge.model_validate(_keyed_record(value, key, path))
    if isinstance(existing, BaseNode):
        return NODE_ADAPTER.validate_python(value)
    if isinstance(existing, BaseModel):
        return type(existing).model_validate(value)
    return value


def _assign(root: Any, container: Any, segment: str, value: Any, path: str) -> None:
    try:
        if isinstance(container, BaseModel):
            name = _field_name(container, segment)
            if name is None and container.model_config.get("extra") != "allow":
                raise PathError(path, f"{type(container).__name__} has no field '{segment}'")
            setattr(container, name or segment, value)
        elif isinstance(container, MutableMapping):
            existing = container.get(segment)
            container[segment] = _coerce_entry(root, container, segment, existing, value, path)
        elif isinstance(container, MutableSequence):
            try:
                index = int(segment)
            except ValueError:
                raise PathError(path, f"'{segment}' is not a list index") from None
            if not -len(container) <= index < len(container):
                raise PathError(path, f"index {index} out of range")
            container[index] = _coerce_entry(
                root, container, segment, container[index], value, path
            )
        else:
            raise PathError(path, f"can't set '{segment}' on {type(container).__name__}")
    except ValidationError as e:
        raise PathError(path, str(e)) from e


def set_path(root: Any, path: str, value: Any) -> None:
    """Write *value* at *path*, creating missing mapping levels.

    Raises:
        PathError: If the path is malformed, crosses a scalar, or the value
            fails validation for a typed field.
    """
    segments = split_path(path)
    current = root
    for segment in segments[:-1]:
        child = _child(current, segment)
        if child is _MISSING or child is None:
            child = {}
            _assign(root, current, segment, child, path)
            # Typed fields may have converted the new level
            child = _child(current, segment)
        current = child
    _assign(root, current, segments[-1], value, path)
