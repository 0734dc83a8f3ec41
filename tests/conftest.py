"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from storygraph.artifacts.codec import serialize
from storygraph.artifacts.storage import MemoryTextStorage
from storygraph.graph.factories import new_document, new_edge, new_end, new_scene
from storygraph.graph.queries import find_start_node
from storygraph.models.story_graph import Choice, Dialogue, SceneCharacter, StoryGraph


@pytest.fixture(autouse=True)
def clear_storygraph_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of config tests."""
    monkeypatch.delenv("SG_STORIES_DIR", raising=False)
    monkeypatch.delenv("SG_AUTOSAVE_DELAY", raising=False)


@pytest.fixture
def linear_story() -> StoryGraph:
    """start -> tavern -> end, connected by two flow edges."""
    doc = new_document(title="The Tavern", description="A short visit.")
    start = find_start_node(doc)
    assert start is not None

    scene = new_scene(
        id="tavern",
        name="Tavern",
        location_id="loc-tavern",
        characters=[SceneCharacter(character_id="char-barkeep", position="center")],
        dialogues=[Dialogue(id="d1", speaker_id="char-barkeep", text="What'll it be?")],
    )
    end = new_end(id="end-good", name="Home", ending_type="good")
    doc.nodes[scene.id] = scene
    doc.nodes[end.id] = end
    doc.edges["e1"] = new_edge(start.id, scene.id, edge_id="e1")
    doc.edges["e2"] = new_edge(scene.id, end.id, edge_id="e2")
    return doc


@pytest.fixture
def branching_story() -> StoryGraph:
    """start -> crossroads, whose two choices lead to distinct endings."""
    doc = new_document(title="Crossroads")
    start = find_start_node(doc)
    assert start is not None

    scene = new_scene(
        id="crossroads",
        name="Crossroads",
        location_id="loc-road",
        characters=[
            SceneCharacter(character_id="char-hero"),
            SceneCharacter(character_id="char-guide"),
        ],
        dialogues=[
            Dialogue(id="d1", speaker_id="char-guide", text="Choose your path."),
            Dialogue(id="d2", text="The wind picks up."),
        ],
        choices=[
            Choice(id="go-left", text="Go left"),
            Choice(id="go-right", text="Go right"),
        ],
    )
    doc.nodes[scene.id] = scene
    doc.nodes["end-good"] = new_end(id="end-good", name="Safe", ending_type="good")
    doc.nodes["end-bad"] = new_end(id="end-bad", name="Lost", ending_type="bad")
    doc.edges["e-start"] = new_edge(start.id, scene.id, edge_id="e-start")
    doc.edges["e-left"] = new_edge(scene.id, "end-good", edge_id="e-left", choice_id="go-left")
    doc.edges["e-right"] = new_edge(scene.id, "end-bad", edge_id="e-right", choice_id="go-right")
    return doc


@pytest.fixture
def story_storage(linear_story: StoryGraph) -> MemoryTextStorage:
    """Memory storage holding the linear story under ``tavern.storygraph``."""
    return MemoryTextStorage({"tavern.storygraph": serialize(linear_story)})
