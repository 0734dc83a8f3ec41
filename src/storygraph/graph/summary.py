"""Plain-text digest of a story graph.

The line order and labels are consumed verbatim by downstream prompt
templates. Changing them is a breaking change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storygraph.graph.queries import (
    find_end_nodes,
    find_scene_nodes,
    referenced_character_ids,
    referenced_location_ids,
)

if TYPE_CHECKING:
    from storygraph.models.story_graph import StoryGraph


def summarize(doc: StoryGraph) -> str:
    """Render the fixed-format summary of *doc*."""
    scenes = find_scene_nodes(doc)
    lines = [
        f'Story: "{doc.metadata.title}"',
        f"Description: {doc.metadata.description or 'No description'}",
        f"Scenes: {len(scenes)}",
        f"Total Dialogues: {sum(len(s.dialogues) for s in scenes)}",
        f"Total Choices: {sum(len(s.choices) for s in scenes)}",
        f"Unique Characters: {len(referenced_character_ids(doc))}",
        f"Unique Locations: {len(referenced_location_ids(doc))}",
        f"End Nodes: {len(find_end_nodes(doc))}",
    ]
    return "\n".join(lines)
