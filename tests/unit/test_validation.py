"""Tests for structural validation."""

from __future__ import annotations

from storygraph.graph import mutations
from storygraph.graph.factories import new_document, new_edge, new_scene, new_start
from storygraph.graph.queries import find_start_node
from storygraph.graph.validation import ValidationResult, validate
from storygraph.models.story_graph import StoryGraph


def _matching(result: ValidationResult, fragment: str) -> list[str]:
    return [e for e in result.errors if fragment in e]


class TestValidate:
    """Scenario tests for validate()."""

    def test_minimal_story_missing_end(self) -> None:
        """A fresh document lacks an end node but has its start node."""
        result = validate(new_document())

        assert result.valid is False
        assert len(_matching(result, "missing an end node")) == 1
        assert _matching(result, "missing a start node") == []

    def test_linear_story_is_valid(self, linear_story: StoryGraph) -> None:
        """start -> scene -> end is structurally valid."""
        result = validate(linear_story)

        assert result.valid is True
        assert result.errors == []

    def test_branching_story_is_valid(self, branching_story: StoryGraph) -> None:
        """Choice edges to two endings are valid."""
        assert validate(branching_story).valid

    def test_missing_start(self, linear_story: StoryGraph) -> None:
        """No start node gives exactly one missing-start error."""
        start = find_start_node(linear_story)
        assert start is not None
        del linear_story.nodes[start.id]

        result = validate(linear_story)

        assert len(_matching(result, "missing a start node")) == 1
        assert _matching(result, "multiple start nodes") == []

    def test_multiple_starts(self, linear_story: StoryGraph) -> None:
        """Two start nodes give exactly one multiple-start error."""
        extra = new_start(id="start-2")
        linear_story.nodes[extra.id] = extra

        result = validate(linear_story)

        assert len(_matching(result, "multiple start nodes")) == 1
        # Start nodes are never orphans
        assert _matching(result, "start-2") == []

    def test_orphan_scene(self, linear_story: StoryGraph) -> None:
        """An unconnected scene produces exactly one orphan diagnostic naming it."""
        orphan = new_scene(id="lonely", name="Lonely Room")
        linear_story.nodes[orphan.id] = orphan

        result = validate(linear_story)

        orphans = _matching(result, "no incoming connections")
        assert orphans == ['Node "Lonely Room" (lonely) has no incoming connections']

    def test_dangling_edge_after_deleted_node(self, linear_story: StoryGraph) -> None:
        """Edges pointing at a removed node are reported by edge id."""
        del linear_story.nodes["end-good"]

        result = validate(linear_story)

        dangling = _matching(result, "Edge e2")
        assert dangling == ["Edge e2 references non-existent target node end-good"]

    def test_dangling_source(self, linear_story: StoryGraph) -> None:
        """Missing source nodes are reported too."""
        linear_story.edges["ghost"] = new_edge("nowhere", "tavern", edge_id="ghost")

        result = validate(linear_story)

        assert "Edge ghost references non-existent source node nowhere" in result.errors

    def test_dangling_choice_reference(self, branching_story: StoryGraph) -> None:
        """A choice edge whose choice no longer exists is flagged."""
        scene = branching_story.nodes["crossroads"]
        scene.choices = [c for c in scene.choices if c.id != "go-left"]  # type: ignore[union-attr]

        result = validate(branching_story)

        assert _matching(result, "non-existent choice go-left")

    def test_remove_choice_leaves_valid_references(self, branching_story: StoryGraph) -> None:
        """remove_choice cascades, so no dangling choice remains."""
        mutations.remove_choice(branching_story, "crossroads", "go-left")

        result = validate(branching_story)

        assert _matching(result, "choice") == []

    def test_all_checks_accumulate(self) -> None:
        """Checks don't short-circuit."""
        doc = StoryGraph()
        doc.nodes["s"] = new_scene(id="s", name="S")
        doc.edges["x"] = new_edge("s", "gone", edge_id="x")

        result = validate(doc)

        assert len(result.errors) == 4
        assert result.errors[0] == "Story is missing a start node"

    def test_does_not_mutate(self, branching_story: StoryGraph) -> None:
        """Validation is read-only."""
        before = branching_story.model_copy(deep=True)
        validate(branching_story)
        assert branching_story == before

    def test_to_dict(self) -> None:
        """The verdict exports as a plain {valid, errors} record."""
        assert ValidationResult().to_dict() == {"valid": True, "errors": []}
