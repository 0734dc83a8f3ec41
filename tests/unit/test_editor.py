"""Tests for the editor facades over DocumentCache."""

from __future__ import annotations

import pytest

from storygraph.artifacts.codec import CHARACTER_CODEC, LOCATION_CODEC
from storygraph.artifacts.storage import MemoryTextStorage
from storygraph.graph.editor import CharacterEditor, LocationEditor, StoryGraphEditor
from storygraph.graph.queries import find_start_node
from storygraph.graph.store import DocumentCache
from storygraph.models.entities import CharacterData, LocationData
from storygraph.models.story_graph import StoryGraph

DOC_ID = "tavern.storygraph"


@pytest.fixture
def cache(story_storage: MemoryTextStorage) -> DocumentCache[StoryGraph]:
    return DocumentCache.for_story_graphs(story_storage)


async def _loaded_editor(cache: DocumentCache[StoryGraph]) -> StoryGraphEditor:
    await cache.load(DOC_ID)
    return StoryGraphEditor(cache, DOC_ID)


class TestStoryGraphEditor:
    """Mutations through the facade mark the document dirty."""

    def test_without_cached_document(self, cache: DocumentCache[StoryGraph]) -> None:
        """Nothing is loaded implicitly; every operation fails."""
        editor = StoryGraphEditor(cache, DOC_ID)

        assert editor.document is None
        assert editor.create_scene(name="x") is None
        assert editor.delete_node("tavern") is False
        assert editor.validate() is None
        assert editor.summarize() is None
        assert not editor.is_dirty

    @pytest.mark.asyncio
    async def test_mutation_marks_dirty(self, cache: DocumentCache[StoryGraph]) -> None:
        """A successful edit marks the cached document dirty."""
        editor = await _loaded_editor(cache)
        assert not editor.is_dirty

        scene = editor.create_scene(name="Cellar")

        assert scene is not None
        assert editor.is_dirty

    @pytest.mark.asyncio
    async def test_failed_mutation_stays_clean(self, cache: DocumentCache[StoryGraph]) -> None:
        """A refused edit leaves the dirty flag alone."""
        editor = await _loaded_editor(cache)
        start = find_start_node(editor.document)  # type: ignore[arg-type]
        assert start is not None

        assert editor.delete_node(start.id) is False
        assert editor.create_edge("tavern", "missing") is None
        assert editor.add_character("tavern", {"characterId": "char-barkeep"}) is False
        assert not editor.is_dirty

    @pytest.mark.asyncio
    async def test_build_and_save(
        self, cache: DocumentCache[StoryGraph], story_storage: MemoryTextStorage
    ) -> None:
        """A branching edit session ends valid and persisted."""
        editor = await _loaded_editor(cache)
        choice_id = editor.add_choice("tavern", {"text": "Stay the night"})
        assert choice_id is not None
        inn = editor.create_end(name="Rested", ending_type="good")
        assert inn is not None
        assert editor.connect_choice("tavern", choice_id, inn.id) is not None
        assert editor.set_location("tavern", "loc-inn")
        assert editor.update_metadata({"title": "The Inn"})

        result = editor.validate()
        assert result is not None
        assert result.valid, result.errors
        assert "End Nodes: 2" in (editor.summarize() or "")

        assert await editor.save() is True
        assert not editor.is_dirty
        assert "title: The Inn" in story_storage.texts[DOC_ID]

    @pytest.mark.asyncio
    async def test_dialogue_round(self, cache: DocumentCache[StoryGraph]) -> None:
        """Dialogue can be added, edited and removed through the facade."""
        editor = await _loaded_editor(cache)
        line_id = editor.add_dialogue("tavern", {"speakerId": "char-barkeep", "text": "Hm?"})
        assert line_id is not None

        assert editor.update_dialogue("tavern", line_id, {"text": "Yes?"})
        assert editor.remove_dialogue("tavern", line_id)
        assert not editor.remove_dialogue("tavern", line_id)


class TestEntityEditors:
    """Character and location facades."""

    @pytest.mark.asyncio
    async def test_character_editor(self) -> None:
        """Trait edits mark the character dirty only when they apply."""
        storage = MemoryTextStorage(
            {"hero.character": CHARACTER_CODEC.serialize(CharacterData(name="Mira"))}
        )
        cache = DocumentCache(storage, CHARACTER_CODEC)
        await cache.load("hero.character")
        editor = CharacterEditor(cache, "hero.character")

        assert not editor.remove_trait("brave")
        assert not editor.is_dirty
        assert editor.add_trait("brave")
        assert editor.add_relationship({"characterId": "char-tom", "type": "friend"})
        assert editor.is_dirty

        assert await editor.save()
        assert "- brave" in storage.texts["hero.character"]

    @pytest.mark.asyncio
    async def test_location_editor(self) -> None:
        """Connections are made and removed through the facade."""
        storage = MemoryTextStorage(
            {"harbor.location": LOCATION_CODEC.serialize(LocationData(name="Harbor"))}
        )
        cache = DocumentCache(storage, LOCATION_CODEC)
        await cache.load("harbor.location")
        editor = LocationEditor(cache, "harbor.location")

        assert editor.connect("loc-market")
        assert not editor.connect("loc-market")
        assert editor.disconnect("loc-market")
        assert editor.document is not None
        assert editor.document.connected_locations == []
