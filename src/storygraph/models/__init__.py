"""Pydantic models for story graph documents and the entities they reference."""

from storygraph.models.entities import (
    CharacterData,
    CharacterRelationship,
    CharacterVisuals,
    ItemData,
    LocationData,
    MbtiSliders,
    PersonalityProfile,
)
from storygraph.models.story_graph import (
    DEFAULT_STORY_TITLE,
    NODE_ADAPTER,
    STORY_GRAPH_VERSION,
    Choice,
    Dialogue,
    Edge,
    EdgeType,
    EndNode,
    EntityTrigger,
    Node,
    NodeType,
    SceneCharacter,
    SceneEffect,
    SceneNode,
    StartNode,
    StoryGraph,
    StoryMetadata,
)

__all__ = [
    "DEFAULT_STORY_TITLE",
    "NODE_ADAPTER",
    "STORY_GRAPH_VERSION",
    "CharacterData",
    "CharacterRelationship",
    "CharacterVisuals",
    "Choice",
    "Dialogue",
    "Edge",
    "EdgeType",
    "EndNode",
    "EntityTrigger",
    "ItemData",
    "LocationData",
    "MbtiSliders",
    "Node",
    "NodeType",
    "PersonalityProfile",
    "SceneCharacter",
    "SceneEffect",
    "SceneNode",
    "StartNode",
    "StoryGraph",
    "StoryMetadata",
]
