"""Pydantic models for the story graph document.

A story graph is a directed graph of narrative nodes connected by edges:

- start: the entry point (conventionally exactly one per document)
- scene: the interactive unit holding characters, dialogue and choices
- end: a story ending, optionally classified by ``endingType``

Edges are either ``flow`` (plain continuation) or ``choice`` (activated by a
choice inside the source scene). The edge type is derived from ``choiceId``
and cannot be set directly.

Python attributes are snake_case; the serialized form uses camelCase keys
(``nodeType``, ``posX``, ``locationId``...) so documents stay compatible with
files written by the editor plugin.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, computed_field
from pydantic.alias_generators import to_camel

STORY_GRAPH_VERSION = 1
DEFAULT_STORY_TITLE = "Untitled"

EdgeType = Literal["flow", "choice"]
NodeType = Literal["start", "scene", "end"]
CharacterPosition = Literal["left", "center", "right"]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class StoryModel(BaseModel):
    """Base for story records: camelCase aliases, validated assignment."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        protected_namespaces=(),
    )


class ExtensibleModel(StoryModel):
    """Story record that keeps unknown (extension) fields on round-trip."""

    model_config = ConfigDict(extra="allow")


# -----------------------------------------------------------------------------
# Scene sub-records
# -----------------------------------------------------------------------------


class SceneCharacter(ExtensibleModel):
    """A character placed in a scene (weak reference by ``characterId``)."""

    character_id: str = Field(min_length=1)
    position: CharacterPosition | None = None
    expression: str | None = None


class Dialogue(ExtensibleModel):
    """A single line of narrative text within a scene.

    ``speaker_id`` is a character id, or None for narration.
    """

    id: str = Field(min_length=1)
    speaker_id: str | None = None
    text: str = ""
    emotion: str | None = None
    voice_asset_id: int | None = None


class Choice(ExtensibleModel):
    """A player-facing branching option within a scene."""

    id: str = Field(min_length=1)
    text: str = ""
    condition: str | None = None
    target_node_id: str | None = None


class SceneEffect(ExtensibleModel):
    """Presentation effect applied when a scene plays (fadeIn, shake...)."""

    type: str
    params: dict[str, Any] | None = None


class EntityTrigger(ExtensibleModel):
    """Action on a tagged entity in the host scene (show, hide, play...)."""

    tag: str
    action: str
    params: dict[str, Any] | None = None


# -----------------------------------------------------------------------------
# Nodes
# -----------------------------------------------------------------------------


class BaseNode(StoryModel):
    """Fields shared by every node variant.

    Unknown fields are rejected so that variant-specific data (for example an
    ``endingType`` on a scene) cannot appear on the wrong variant.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    pos_x: float = 0.0
    pos_y: float = 0.0
    name: str = ""


class StartNode(BaseNode):
    """Entry point of the story."""

    node_type: Literal["start"] = "start"
    name: str = "Start"


class SceneNode(BaseNode):
    """The main interaction unit."""

    node_type: Literal["scene"] = "scene"
    name: str = "New Scene"
    location_id: str | None = None
    characters: list[SceneCharacter] = Field(default_factory=list)
    dialogues: list[Dialogue] = Field(default_factory=list)
    choices: list[Choice] = Field(default_factory=list)
    effects: list[SceneEffect] | None = None
    entity_triggers: list[EntityTrigger] | None = None

    def get_dialogue(self, dialogue_id: str) -> Dialogue | None:
        """Return the dialogue with this id, or None."""
        return next((d for d in self.dialogues if d.id == dialogue_id), None)

    def get_choice(self, choice_id: str) -> Choice | None:
        """Return the choice with this id, or None."""
        return next((c for c in self.choices if c.id == choice_id), None)

    def has_character(self, character_id: str) -> bool:
        """True if the character is already placed in this scene."""
        return any(c.character_id == character_id for c in self.characters)


class EndNode(BaseNode):
    """A story ending."""

    node_type: Literal["end"] = "end"
    name: str = "End"
    ending_type: str | None = None


Node = Annotated[StartNode | SceneNode | EndNode, Field(discriminator="node_type")]

NODE_ADAPTER: TypeAdapter[StartNode | SceneNode | EndNode] = TypeAdapter(Node)


# -----------------------------------------------------------------------------
# Edges
# -----------------------------------------------------------------------------


class Edge(StoryModel):
    """Directed connection between two nodes.

    ``edge_type`` is derived: ``choice`` iff ``choice_id`` is set. Any
    ``edgeType`` key on input is ignored and recomputed.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
    choice_id: str | None = None
    condition: str | None = None
    priority: float | None = None

    @computed_field(alias="edgeType")  # type: ignore[prop-decorator]
    @property
    def edge_type(self) -> EdgeType:
        """``choice`` when this edge is activated by a choice, else ``flow``."""
        return "choice" if self.choice_id else "flow"

    def touches(self, node_id: str) -> bool:
        """True if *node_id* is either endpoint of this edge."""
        return node_id in (self.from_, self.to)


# -----------------------------------------------------------------------------
# Document
# -----------------------------------------------------------------------------


class StoryMetadata(ExtensibleModel):
    """Story title, description and timestamps, plus extension fields."""

    title: str = DEFAULT_STORY_TITLE
    description: str = ""
    cover_asset_id: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class StoryGraph(StoryModel):
    """Root narrative document: metadata plus nodes and edges keyed by id.

    Key order of ``nodes`` and ``edges`` is preserved for stable
    re-serialization but carries no meaning.
    """

    version: int = STORY_GRAPH_VERSION
    metadata: StoryMetadata = Field(default_factory=StoryMetadata)
    nodes: dict[str, Node] = Field(default_factory=dict)
    edges: dict[str, Edge] = Field(default_factory=dict)

    def get_node(self, node_id: str) -> StartNode | SceneNode | EndNode | None:
        """Return the node with this id, or None."""
        return self.nodes.get(node_id)

    def get_scene(self, scene_id: str) -> SceneNode | None:
        """Return the node with this id if it is a scene, else None."""
        node = self.nodes.get(scene_id)
        return node if isinstance(node, SceneNode) else None

    def get_edge(self, edge_id: str) -> Edge | None:
        """Return the edge with this id, or None."""
        return self.edges.get(edge_id)

    def __repr__(self) -> str:
        return (
            f"StoryGraph(title={self.metadata.title!r}, "
            f"nodes={len(self.nodes)}, edges={len(self.edges)})"
        )
