"""Pydantic models for entities referenced by a story graph.

Characters, locations and items live in their own documents outside the
story graph. Scenes point at them by id only (weak references); these
models describe what such a document holds.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from storygraph.models.story_graph import ExtensibleModel, StoryModel

Pose = Literal["standing", "sitting", "action", "portrait"]
Expression = Literal["neutral", "happy", "sad", "angry", "surprised", "thoughtful"]
CameraAngle = Literal["front", "side", "three-quarter"]
ArtStyle = Literal["anime", "realistic", "painted", "pixel", "comic"]


class CharacterRelationship(StoryModel):
    """Relationship from one character to another (friend, enemy, family...)."""

    character_id: str = Field(min_length=1)
    type: str
    description: str = ""


class CharacterVisuals(StoryModel):
    """Visual attributes used when generating character portraits."""

    pose: Pose = "portrait"
    expression: Expression = "neutral"
    camera_angle: CameraAngle = "front"
    costume: str = ""
    style: ArtStyle = "anime"


class MbtiSliders(StoryModel):
    """MBTI-style personality sliders, each 0-100."""

    ei: int = Field(default=50, ge=0, le=100)
    sn: int = Field(default=50, ge=0, le=100)
    tf: int = Field(default=50, ge=0, le=100)
    jp: int = Field(default=50, ge=0, le=100)


class PersonalityProfile(StoryModel):
    """Personality sliders plus an optional alignment (e.g. 'chaotic-neutral')."""

    mbti_sliders: MbtiSliders = Field(default_factory=MbtiSliders)
    alignment: str | None = None


class CharacterData(ExtensibleModel):
    """A character document."""

    name: str = "New Character"
    biography: str = ""
    age: str | None = None
    portrait_asset_id: int | None = None
    full_body_asset_id: int | None = None
    model_asset_id: int | None = None
    expression_assets: dict[str, int] = Field(default_factory=dict)
    traits: list[str] = Field(default_factory=list)
    relationships: list[CharacterRelationship] = Field(default_factory=list)
    voice_id: str | None = None
    visuals: CharacterVisuals | None = Field(default_factory=CharacterVisuals)
    personality: PersonalityProfile | None = Field(default_factory=PersonalityProfile)
    generation_prompt: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class LocationData(ExtensibleModel):
    """A location document.

    ``connected_locations``, ``items`` and ``npcs`` hold ids of other
    location, item and character documents.
    """

    name: str = "New Location"
    description: str = ""
    background_asset_id: int | None = None
    thumbnail_asset_id: int | None = None
    ambient_sound_id: int | None = None
    music_asset_id: int | None = None
    mood: str = "neutral"
    connected_locations: list[str] = Field(default_factory=list)
    items: list[str] = Field(default_factory=list)
    npcs: list[str] = Field(default_factory=list)
    scene_asset_id: int | None = None
    entity_tags: list[str] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ItemData(ExtensibleModel):
    """An item document."""

    name: str = "New Item"
    description: str = ""
    icon_asset_id: int | None = None
    model_asset_id: int | None = None
    sprite_asset_id: int | None = None
    item_type: str = "misc"
    properties: dict[str, Any] = Field(default_factory=dict)
    usable: bool = False
    combinable: bool = False
    combines_with: list[str] | None = None
    stackable: bool = False
    max_stack: int | None = Field(default=None, ge=1)
    metadata: dict[str, Any] = Field(default_factory=dict)
