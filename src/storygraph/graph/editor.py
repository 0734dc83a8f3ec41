"""Editing facades that bind mutations to a cached document.

An editor pairs a DocumentCache with one document id. Each operation looks
up the cached document, applies the matching function from
``storygraph.graph.mutations`` and, if it succeeded, marks the id dirty.
Nothing is loaded implicitly: without a cached document every operation
returns False (or None for operations that return a created record).

Example::

    cache = DocumentCache.for_story_graphs(storage)
    await cache.load("intro.storygraph")
    editor = StoryGraphEditor(cache, "intro.storygraph")
    scene = editor.create_scene(name="Tavern")
    editor.create_edge(start_id, scene.id)
    await editor.save()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from storygraph.graph import mutations
from storygraph.graph.summary import summarize
from storygraph.graph.validation import ValidationResult, validate
from storygraph.models.entities import CharacterData, CharacterRelationship, LocationData
from storygraph.models.story_graph import StoryGraph

if TYPE_CHECKING:
    from storygraph.graph.store import DocumentCache
    from storygraph.models.story_graph import Edge, EndNode, SceneCharacter, SceneNode

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


class AssetEditor(Generic[T]):
    """Base facade: resolves the cached document and tracks dirtiness."""

    def __init__(self, cache: DocumentCache[T], doc_id: str) -> None:
        self.cache = cache
        self.doc_id = doc_id

    @property
    def document(self) -> T | None:
        """The cached document, or None if it isn't loaded."""
        return self.cache.get_cached(self.doc_id)

    def _apply(self, mutation: Callable[..., R], *args: Any, **kwargs: Any) -> R | None:
        document = self.document
        if document is None:
            return None
        result = mutation(document, *args, **kwargs)
        if result is not None and result is not False:
            self.cache.mark_dirty(self.doc_id)
        return result

    def _apply_flag(self, mutation: Callable[..., bool], *args: Any) -> bool:
        return bool(self._apply(mutation, *args))

    @property
    def is_dirty(self) -> bool:
        """True if the document has unsaved edits."""
        return self.cache.is_dirty(self.doc_id)

    async def save(self) -> bool:
        """Persist the document through the cache."""
        return await self.cache.save(self.doc_id)


class StoryGraphEditor(AssetEditor[StoryGraph]):
    """Mutations, validation and summary for one cached story graph."""

    # Nodes

    def create_scene(self, **fields: Any) -> SceneNode | None:
        return self._apply(mutations.create_scene, **fields)

    def create_end(self, **fields: Any) -> EndNode | None:
        return self._apply(mutations.create_end, **fields)

    def update_node(self, node_id: str, updates: Mapping[str, Any]) -> bool:
        return self._apply_flag(mutations.update_node, node_id, updates)

    def delete_node(self, node_id: str) -> bool:
        return self._apply_flag(mutations.delete_node, node_id)

    # Edges

    def create_edge(
        self,
        from_id: str,
        to_id: str,
        *,
        choice_id: str | None = None,
        condition: str | None = None,
        priority: float | None = None,
    ) -> Edge | None:
        return self._apply(
            mutations.create_edge,
            from_id,
            to_id,
            choice_id=choice_id,
            condition=condition,
            priority=priority,
        )

    def connect_choice(self, scene_id: str, choice_id: str, to_id: str) -> Edge | None:
        return self._apply(mutations.connect_choice, scene_id, choice_id, to_id)

    def update_edge(self, edge_id: str, updates: Mapping[str, Any]) -> bool:
        return self._apply_flag(mutations.update_edge, edge_id, updates)

    def delete_edge(self, edge_id: str) -> bool:
        return self._apply_flag(mutations.delete_edge, edge_id)

    # Scene contents

    def add_dialogue(self, scene_id: str, dialogue: Mapping[str, Any]) -> str | None:
        return self._apply(mutations.add_dialogue, scene_id, dialogue)

    def update_dialogue(
        self, scene_id: str, dialogue_id: str, updates: Mapping[str, Any]
    ) -> bool:
        return self._apply_flag(mutations.update_dialogue, scene_id, dialogue_id, updates)

    def remove_dialogue(self, scene_id: str, dialogue_id: str) -> bool:
        return self._apply_flag(mutations.remove_dialogue, scene_id, dialogue_id)

    def add_choice(self, scene_id: str, choice: Mapping[str, Any]) -> str | None:
        return self._apply(mutations.add_choice, scene_id, choice)

    def update_choice(self, scene_id: str, choice_id: str, updates: Mapping[str, Any]) -> bool:
        return self._apply_flag(mutations.update_choice, scene_id, choice_id, updates)

    def remove_choice(self, scene_id: str, choice_id: str) -> bool:
        return self._apply_flag(mutations.remove_choice, scene_id, choice_id)

    def add_character(
        self, scene_id: str, character: SceneCharacter | Mapping[str, Any]
    ) -> bool:
        return self._apply_flag(mutations.add_character_to_scene, scene_id, character)

    def remove_character(self, scene_id: str, character_id: str) -> bool:
        return self._apply_flag(mutations.remove_character_from_scene, scene_id, character_id)

    def set_location(self, scene_id: str, location_id: str | None) -> bool:
        return self._apply_flag(mutations.set_scene_location, scene_id, location_id)

    # Document

    def update_metadata(self, updates: Mapping[str, Any]) -> bool:
        return self._apply_flag(mutations.update_metadata, updates)

    def validate(self) -> ValidationResult | None:
        """Validate the cached document (None if not loaded)."""
        document = self.document
        return validate(document) if document is not None else None

    def summarize(self) -> str | None:
        """Summarize the cached document (None if not loaded)."""
        document = self.document
        return summarize(document) if document is not None else None


class CharacterEditor(AssetEditor[CharacterData]):
    """Trait and relationship edits for one cached character."""

    def add_trait(self, trait: str) -> bool:
        return self._apply_flag(mutations.add_trait, trait)

    def remove_trait(self, trait: str) -> bool:
        return self._apply_flag(mutations.remove_trait, trait)

    def add_relationship(
        self, relationship: CharacterRelationship | Mapping[str, Any]
    ) -> bool:
        return self._apply_flag(mutations.add_relationship, relationship)


class LocationEditor(AssetEditor[LocationData]):
    """Connection edits for one cached location."""

    def connect(self, target_location_id: str) -> bool:
        return self._apply_flag(mutations.connect_locations, target_location_id)

    def disconnect(self, target_location_id: str) -> bool:
        return self._apply_flag(mutations.disconnect_locations, target_location_id)
