"""Graph package - story graph operations.

The DocumentCache holds parsed documents keyed by id. Factories build
well-formed records, queries and mutations operate on a document, and the
editor facades apply mutations to a cached document while tracking unsaved
edits. Validation and summary are pure read-only passes.
"""

from storygraph.graph.autosave import DebouncedSaver
from storygraph.graph.context import build_story_context
from storygraph.graph.editor import AssetEditor, CharacterEditor, LocationEditor, StoryGraphEditor
from storygraph.graph.errors import PathError
from storygraph.graph.factories import (
    generate_id,
    new_choice,
    new_dialogue,
    new_document,
    new_edge,
    new_end,
    new_scene,
    new_start,
)
from storygraph.graph.mutations import (
    add_character_to_scene,
    add_choice,
    add_dialogue,
    add_node,
    add_relationship,
    add_trait,
    connect_choice,
    connect_locations,
    create_edge,
    create_end,
    create_scene,
    delete_edge,
    delete_node,
    disconnect_locations,
    remove_character_from_scene,
    remove_choice,
    remove_dialogue,
    remove_trait,
    set_scene_location,
    update_choice,
    update_dialogue,
    update_edge,
    update_metadata,
    update_node,
)
from storygraph.graph.queries import (
    connected_node_ids,
    edges_for_choice,
    find_end_nodes,
    find_scene_nodes,
    find_start_node,
    find_start_nodes,
    incoming_edges,
    outgoing_edges,
    referenced_character_ids,
    referenced_location_ids,
)
from storygraph.graph.store import DocumentCache
from storygraph.graph.summary import summarize
from storygraph.graph.validation import ValidationResult, validate

__all__ = [
    "AssetEditor",
    "CharacterEditor",
    "DebouncedSaver",
    "DocumentCache",
    "LocationEditor",
    "PathError",
    "StoryGraphEditor",
    "ValidationResult",
    "add_character_to_scene",
    "add_choice",
    "add_dialogue",
    "add_node",
    "add_relationship",
    "add_trait",
    "build_story_context",
    "connect_choice",
    "connect_locations",
    "connected_node_ids",
    "create_edge",
    "create_end",
    "create_scene",
    "delete_edge",
    "delete_node",
    "disconnect_locations",
    "edges_for_choice",
    "find_end_nodes",
    "find_scene_nodes",
    "find_start_node",
    "find_start_nodes",
    "generate_id",
    "incoming_edges",
    "new_choice",
    "new_dialogue",
    "new_document",
    "new_edge",
    "new_end",
    "new_scene",
    "new_start",
    "outgoing_edges",
    "referenced_character_ids",
    "referenced_location_ids",
    "remove_character_from_scene",
    "remove_choice",
    "remove_dialogue",
    "remove_trait",
    "set_scene_location",
    "summarize",
    "update_choice",
    "update_dialogue",
    "update_edge",
    "update_metadata",
    "update_node",
    "validate",
]
