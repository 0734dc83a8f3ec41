"""Read-only queries over a story graph.

All queries are linear scans over ``nodes``/``edges``; documents are small
enough that no adjacency index is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storygraph.models.story_graph import EndNode, SceneNode, StartNode

if TYPE_CHECKING:
    from storygraph.models.story_graph import Edge, StoryGraph


def find_scene_nodes(doc: StoryGraph) -> list[SceneNode]:
    """Return all scene nodes in document order."""
    return [n for n in doc.nodes.values() if isinstance(n, SceneNode)]


def find_start_node(doc: StoryGraph) -> StartNode | None:
    """Return the first start node, or None.

    Does not check that the start node is unique; see validation.
    """
    return next((n for n in doc.nodes.values() if isinstance(n, StartNode)), None)


def find_start_nodes(doc: StoryGraph) -> list[StartNode]:
    """Return every start node (more than one is a validation error)."""
    return [n for n in doc.nodes.values() if isinstance(n, StartNode)]


def find_end_nodes(doc: StoryGraph) -> list[EndNode]:
    """Return all end nodes in document order."""
    return [n for n in doc.nodes.values() if isinstance(n, EndNode)]


def outgoing_edges(doc: StoryGraph, node_id: str) -> list[Edge]:
    """Return edges leaving *node_id*."""
    return [e for e in doc.edges.values() if e.from_ == node_id]


def incoming_edges(doc: StoryGraph, node_id: str) -> list[Edge]:
    """Return edges arriving at *node_id*."""
    return [e for e in doc.edges.values() if e.to == node_id]


def connected_node_ids(doc: StoryGraph, node_id: str) -> list[str]:
    """Return ids of nodes one edge away in either direction, deduplicated."""
    outgoing = [e.to for e in outgoing_edges(doc, node_id)]
    incoming = [e.from_ for e in incoming_edges(doc, node_id)]
    return list(dict.fromkeys([*outgoing, *incoming]))


def edges_for_choice(doc: StoryGraph, scene_id: str, choice_id: str) -> list[Edge]:
    """Return edges from *scene_id* activated by *choice_id*."""
    return [e for e in outgoing_edges(doc, scene_id) if e.choice_id == choice_id]


def referenced_character_ids(doc: StoryGraph) -> list[str]:
    """Distinct character ids placed in any scene, in first-seen order."""
    ids = (c.character_id for scene in find_scene_nodes(doc) for c in scene.characters)
    return list(dict.fromkeys(ids))


def referenced_location_ids(doc: StoryGraph) -> list[str]:
    """Distinct location ids used by any scene, in first-seen order."""
    ids = (scene.location_id for scene in find_scene_nodes(doc) if scene.location_id)
    return list(dict.fromkeys(ids))
