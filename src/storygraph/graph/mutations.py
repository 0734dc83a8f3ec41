"""Mutations on a story graph document.

Every mutation checks its preconditions first and is all-or-nothing: on
failure it returns False (or None where it would return a created record)
and leaves the document untouched. Unknown ids are routine and never raise.

These functions only touch the document passed in. Going through
StoryGraphEditor additionally marks the cached document dirty.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from storygraph.graph.factories import generate_id, new_edge, new_end, new_scene
from storygraph.graph.queries import edges_for_choice
from storygraph.models.entities import CharacterData, CharacterRelationship, LocationData
from storygraph.models.story_graph import (
    NODE_ADAPTER,
    Choice,
    Dialogue,
    Edge,
    EndNode,
    SceneCharacter,
    SceneNode,
    StartNode,
    StoryGraph,
    utc_now,
)
from storygraph.observability.logging import get_logger

log = get_logger(__name__)

AnyNode = StartNode | SceneNode | EndNode


def _normalize_keys(model: type[BaseModel], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Translate serialized aliases (``posX``) to field names (``pos_x``)."""
    by_alias = {info.alias: name for name, info in model.model_fields.items() if info.alias}
    return {by_alias.get(key, key): value for key, value in updates.items()}


def _merged(record: BaseModel, updates: Mapping[str, Any]) -> dict[str, Any]:
    data = record.model_dump(exclude_unset=False)
    data.update(_normalize_keys(type(record), updates))
    return data


# -----------------------------------------------------------------------------
# Nodes
# -----------------------------------------------------------------------------


def add_node(doc: StoryGraph, node: AnyNode) -> AnyNode | None:
    """Insert a node. Fails if a node with the same id exists."""
    if node.id in doc.nodes:
        log.warning("node_exists", node_id=node.id)
        return None
    doc.nodes[node.id] = node
    return node


def create_scene(doc: StoryGraph, **fields: Any) -> SceneNode | None:
    """Create a scene node from overrides and add it to the document.

    Returns:
        The new scene, or None if the id is taken or the fields are invalid.
    """
    try:
        scene = new_scene(**fields)
    except ValidationError as e:
        log.warning("scene_invalid", error=str(e))
        return None
    return add_node(doc, scene)  # type: ignore[return-value]


def create_end(doc: StoryGraph, **fields: Any) -> EndNode | None:
    """Create an end node from overrides and add it to the document."""
    try:
        end = new_end(**fields)
    except ValidationError as e:
        log.warning("end_invalid", error=str(e))
        return None
    return add_node(doc, end)  # type: ignore[return-value]


def update_node(doc: StoryGraph, node_id: str, updates: Mapping[str, Any]) -> bool:
    """Merge *updates* into a node.

    The node's id and variant can't be changed. Updates are validated
    against the node's variant; invalid updates fail without change.
    """
    node = doc.nodes.get(node_id)
    if node is None:
        return False
    data = _merged(node, updates)
    if data.get("id") != node.id or data.get("node_type") != node.node_type:
        log.warning("node_identity_change_refused", node_id=node_id)
        return False
    try:
        doc.nodes[node_id] = NODE_ADAPTER.validate_python(data)
    except ValidationError as e:
        log.warning("node_update_invalid", node_id=node_id, error=str(e))
        return False
    return True


def delete_node(doc: StoryGraph, node_id: str) -> bool:
    """Delete a node and every edge that starts or ends at it.

    Start nodes can't be deleted.
    """
    node = doc.nodes.get(node_id)
    if node is None:
        return False
    if isinstance(node, StartNode):
        log.warning("start_node_delete_refused", node_id=node_id)
        return False

    del doc.nodes[node_id]
    for edge_id in [eid for eid, e in doc.edges.items() if e.touches(node_id)]:
        del doc.edges[edge_id]
    return True


# -----------------------------------------------------------------------------
# Edges
# -----------------------------------------------------------------------------


def create_edge(
    doc: StoryGraph,
    from_id: str,
    to_id: str,
    *,
    choice_id: str | None = None,
    condition: str | None = None,
    priority: float | None = None,
) -> Edge | None:
    """Connect two existing nodes.

    Returns:
        The new edge, or None if either endpoint does not exist.
    """
    if from_id not in doc.nodes or to_id not in doc.nodes:
        log.warning("edge_endpoint_missing", from_id=from_id, to_id=to_id)
        return None
    edge = new_edge(from_id, to_id, choice_id=choice_id, condition=condition, priority=priority)
    doc.edges[edge.id] = edge
    return edge


def connect_choice(doc: StoryGraph, scene_id: str, choice_id: str, to_id: str) -> Edge | None:
    """Create a choice edge from a scene's choice to a target node.

    Fails unless *choice_id* is a choice of *scene_id*.
    """
    scene = doc.get_scene(scene_id)
    if scene is None or scene.get_choice(choice_id) is None:
        return None
    return create_edge(doc, scene_id, to_id, choice_id=choice_id)


def update_edge(doc: StoryGraph, edge_id: str, updates: Mapping[str, Any]) -> bool:
    """Merge *updates* into an edge.

    The id can't change, ``edgeType`` is ignored (it follows ``choiceId``),
    and moved endpoints must exist.
    """
    edge = doc.edges.get(edge_id)
    if edge is None:
        return False
    data = _merged(edge, {k: v for k, v in updates.items() if k not in ("edge_type", "edgeType")})
    if data.get("id") != edge_id:
        return False
    if data.get("from_") not in doc.nodes or data.get("to") not in doc.nodes:
        return False
    try:
        doc.edges[edge_id] = Edge.model_validate(data)
    except ValidationError as e:
        log.warning("edge_update_invalid", edge_id=edge_id, error=str(e))
        return False
    return True


def delete_edge(doc: StoryGraph, edge_id: str) -> bool:
    """Delete an edge by id."""
    if edge_id not in doc.edges:
        return False
    del doc.edges[edge_id]
    return True


# -----------------------------------------------------------------------------
# Scene contents
# -----------------------------------------------------------------------------


def add_dialogue(doc: StoryGraph, scene_id: str, dialogue: Mapping[str, Any]) -> str | None:
    """Append a dialogue line to a scene.

    Returns:
        The generated dialogue id, or None if the scene doesn't exist or
        the dialogue is invalid.
    """
    scene = doc.get_scene(scene_id)
    if scene is None:
        return None
    try:
        line = Dialogue.model_validate({**dialogue, "id": generate_id()})
    except ValidationError as e:
        log.warning("dialogue_invalid", scene_id=scene_id, error=str(e))
        return None
    scene.dialogues.append(line)
    return line.id


def update_dialogue(
    doc: StoryGraph, scene_id: str, dialogue_id: str, updates: Mapping[str, Any]
) -> bool:
    """Merge *updates* into a dialogue line (its id can't change)."""
    scene = doc.get_scene(scene_id)
    if scene is None:
        return False
    for index, line in enumerate(scene.dialogues):
        if line.id == dialogue_id:
            data = {**_merged(line, updates), "id": dialogue_id}
            try:
                scene.dialogues[index] = Dialogue.model_validate(data)
            except ValidationError:
                return False
            return True
    return False


def remove_dialogue(doc: StoryGraph, scene_id: str, dialogue_id: str) -> bool:
    """Remove a dialogue line from a scene."""
    scene = doc.get_scene(scene_id)
    if scene is None or scene.get_dialogue(dialogue_id) is None:
        return False
    scene.dialogues = [d for d in scene.dialogues if d.id != dialogue_id]
    return True


def add_choice(doc: StoryGraph, scene_id: str, choice: Mapping[str, Any]) -> str | None:
    """Append a choice to a scene.

    Returns:
        The generated choice id, or None if the scene doesn't exist or the
        choice is invalid.
    """
    scene = doc.get_scene(scene_id)
    if scene is None:
        return None
    try:
        option = Choice.model_validate({**choice, "id": generate_id()})
    except ValidationError as e:
        log.warning("choice_invalid", scene_id=scene_id, error=str(e))
        return None
    scene.choices.append(option)
    return option.id


def update_choice(
    doc: StoryGraph, scene_id: str, choice_id: str, updates: Mapping[str, Any]
) -> bool:
    """Merge *updates* into a choice (its id can't change)."""
    scene = doc.get_scene(scene_id)
    if scene is None:
        return False
    for index, option in enumerate(scene.choices):
        if option.id == choice_id:
            data = {**_merged(option, updates), "id": choice_id}
            try:
                scene.choices[index] = Choice.model_validate(data)
            except ValidationError:
                return False
            return True
    return False


def remove_choice(doc: StoryGraph, scene_id: str, choice_id: str) -> bool:
    """Remove a choice and the edges it activates from this scene."""
    scene = doc.get_scene(scene_id)
    if scene is None or scene.get_choice(choice_id) is None:
        return False
    scene.choices = [c for c in scene.choices if c.id != choice_id]
    for edge in edges_for_choice(doc, scene_id, choice_id):
        del doc.edges[edge.id]
    return True


def add_character_to_scene(
    doc: StoryGraph, scene_id: str, character: SceneCharacter | Mapping[str, Any]
) -> bool:
    """Place a character in a scene. A character can appear only once."""
    scene = doc.get_scene(scene_id)
    if scene is None:
        return False
    try:
        placed = (
            character
            if isinstance(character, SceneCharacter)
            else SceneCharacter.model_validate(character)
        )
    except ValidationError:
        return False
    if scene.has_character(placed.character_id):
        return False
    scene.characters.append(placed)
    return True


def remove_character_from_scene(doc: StoryGraph, scene_id: str, character_id: str) -> bool:
    """Remove a character from a scene."""
    scene = doc.get_scene(scene_id)
    if scene is None or not scene.has_character(character_id):
        return False
    scene.characters = [c for c in scene.characters if c.character_id != character_id]
    return True


def set_scene_location(doc: StoryGraph, scene_id: str, location_id: str | None) -> bool:
    """Set (or clear, with None) the location of a scene."""
    scene = doc.get_scene(scene_id)
    if scene is None:
        return False
    scene.location_id = location_id
    return True


# -----------------------------------------------------------------------------
# Metadata
# -----------------------------------------------------------------------------


def update_metadata(doc: StoryGraph, updates: Mapping[str, Any]) -> bool:
    """Merge *updates* into the story metadata and refresh ``updatedAt``."""
    data = _merged(doc.metadata, updates)
    data["updated_at"] = utc_now()
    try:
        doc.metadata = type(doc.metadata).model_validate(data)
    except ValidationError as e:
        log.warning("metadata_update_invalid", error=str(e))
        return False
    return True


# -----------------------------------------------------------------------------
# Entities
# -----------------------------------------------------------------------------


def connect_locations(location: LocationData, target_location_id: str) -> bool:
    """Link a location to another location id. Already-linked ids fail."""
    if target_location_id in location.connected_locations:
        return False
    location.connected_locations.append(target_location_id)
    return True


def disconnect_locations(location: LocationData, target_location_id: str) -> bool:
    """Unlink a location from another location id."""
    if target_location_id not in location.connected_locations:
        return False
    location.connected_locations.remove(target_location_id)
    return True


def add_trait(character: CharacterData, trait: str) -> bool:
    """Add a trait to a character. Duplicate traits fail."""
    if trait in character.traits:
        return False
    character.traits.append(trait)
    return True


def remove_trait(character: CharacterData, trait: str) -> bool:
    """Remove a trait from a character."""
    if trait not in character.traits:
        return False
    character.traits.remove(trait)
    return True


def add_relationship(
    character: CharacterData, relationship: CharacterRelationship | Mapping[str, Any]
) -> bool:
    """Record a relationship from this character to another."""
    try:
        entry = (
            relationship
            if isinstance(relationship, CharacterRelationship)
            else CharacterRelationship.model_validate(relationship)
        )
    except ValidationError:
        return False
    character.relationships.append(entry)
    return True
