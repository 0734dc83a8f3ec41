"""Constructors for well-formed story graph records.

Pure functions: no I/O and no shared state. Every constructor accepts
overrides; anything not overridden gets the variant default. An ``id`` is
generated unless the caller supplies one (e.g. to match an id assigned by a
UI).
"""

from __future__ import annotations

import secrets
import string
import time
from typing import Any

from storygraph.models.story_graph import (
    Choice,
    Dialogue,
    Edge,
    EndNode,
    SceneNode,
    StartNode,
    StoryGraph,
    StoryMetadata,
    utc_now,
)

DEFAULT_START_POSITION = (100.0, 200.0)

_BASE36 = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 10


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Generate an opaque, URL- and filename-safe identifier.

    Format is ``<base36 milliseconds>-<10 random base36 chars>``. Unique with
    overwhelming probability within a process; not ordered and not a
    security token.
    """
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_RANDOM_LENGTH))
    return f"{_to_base36(millis)}-{suffix}"


def _with_id(overrides: dict[str, Any]) -> dict[str, Any]:
    data = dict(overrides)
    if not data.get("id"):
        data["id"] = generate_id()
    return data


def new_start(**overrides: Any) -> StartNode:
    """Create a start node (default name 'Start' at the origin)."""
    return StartNode.model_validate(_with_id(overrides))


def new_scene(**overrides: Any) -> SceneNode:
    """Create a scene node (default name 'New Scene', no characters/dialogue/choices)."""
    return SceneNode.model_validate(_with_id(overrides))


def new_end(**overrides: Any) -> EndNode:
    """Create an end node (default name 'End', no ending type)."""
    return EndNode.model_validate(_with_id(overrides))


def new_edge(
    from_id: str,
    to_id: str,
    *,
    edge_id: str | None = None,
    choice_id: str | None = None,
    condition: str | None = None,
    priority: float | None = None,
) -> Edge:
    """Create an edge. It is a ``choice`` edge iff *choice_id* is given."""
    return Edge(
        id=edge_id or generate_id(),
        from_=from_id,
        to=to_id,
        choice_id=choice_id,
        condition=condition,
        priority=priority,
    )


def new_dialogue(**fields: Any) -> Dialogue:
    """Create a dialogue line with a fresh id (any supplied id is replaced)."""
    return Dialogue.model_validate({**fields, "id": generate_id()})


def new_choice(**fields: Any) -> Choice:
    """Create a choice with a fresh id (any supplied id is replaced)."""
    return Choice.model_validate({**fields, "id": generate_id()})


def new_document(title: str | None = None, description: str = "") -> StoryGraph:
    """Create a story graph with a single start node and no edges."""
    now = utc_now()
    metadata = StoryMetadata(description=description, created_at=now, updated_at=now)
    if title is not None:
        metadata.title = title
    pos_x, pos_y = DEFAULT_START_POSITION
    start = new_start(pos_x=pos_x, pos_y=pos_y)
    return StoryGraph(metadata=metadata, nodes={start.id: start})
