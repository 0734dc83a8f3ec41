"""Structural validation of story graph documents.

Pure, read-only checks. Every check runs (no short-circuit) and contributes
zero or more diagnostic strings; a document is valid iff there are none.
Structural problems are a normal result here, not an error channel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from storygraph.graph.queries import find_end_nodes, find_start_nodes
from storygraph.models.story_graph import SceneNode, StartNode

if TYPE_CHECKING:
    from storygraph.models.story_graph import StoryGraph

__all__ = [
    "ValidationResult",
    "check_choice_references",
    "check_edge_endpoints",
    "check_end_nodes",
    "check_orphan_nodes",
    "check_start_nodes",
    "validate",
]


@dataclass
class ValidationResult:
    """Outcome of validating a document.

    Attributes:
        errors: Diagnostics in check order; empty when the document is valid.
    """

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True if no check reported a problem."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Plain ``{valid, errors}`` record for external consumers."""
        return {"valid": self.valid, "errors": list(self.errors)}


def check_start_nodes(doc: StoryGraph) -> list[str]:
    """Exactly one start node must exist."""
    count = len(find_start_nodes(doc))
    if count == 0:
        return ["Story is missing a start node"]
    if count > 1:
        return [f"Story has multiple start nodes ({count}); it should have only one"]
    return []


def check_end_nodes(doc: StoryGraph) -> list[str]:
    """At least one end node must exist."""
    if not find_end_nodes(doc):
        return ["Story is missing an end node"]
    return []


def check_orphan_nodes(doc: StoryGraph) -> list[str]:
    """Every non-start node needs at least one incoming edge."""
    targets = {edge.to for edge in doc.edges.values()}
    return [
        f'Node "{node.name}" ({node.id}) has no incoming connections'
        for node in doc.nodes.values()
        if not isinstance(node, StartNode) and node.id not in targets
    ]


def check_edge_endpoints(doc: StoryGraph) -> list[str]:
    """Both endpoints of every edge must be existing nodes."""
    errors = []
    for edge in doc.edges.values():
        if edge.from_ not in doc.nodes:
            errors.append(f"Edge {edge.id} references non-existent source node {edge.from_}")
        if edge.to not in doc.nodes:
            errors.append(f"Edge {edge.id} references non-existent target node {edge.to}")
    return errors


def check_choice_references(doc: StoryGraph) -> list[str]:
    """A choice edge's ``choiceId`` must name a choice of its source scene.

    Edges from missing nodes are left to check_edge_endpoints.
    """
    errors = []
    for edge in doc.edges.values():
        if not edge.choice_id or edge.from_ not in doc.nodes:
            continue
        source = doc.nodes[edge.from_]
        if not isinstance(source, SceneNode) or source.get_choice(edge.choice_id) is None:
            errors.append(
                f"Edge {edge.id} references non-existent choice {edge.choice_id} "
                f"in node {edge.from_}"
            )
    return errors


_CHECKS = (
    check_start_nodes,
    check_end_nodes,
    check_orphan_nodes,
    check_edge_endpoints,
    check_choice_references,
)


def validate(doc: StoryGraph) -> ValidationResult:
    """Run every structural check against *doc*."""
    errors: list[str] = []
    for check in _CHECKS:
        errors.extend(check(doc))
    return ValidationResult(errors=errors)
