"""Story context for AI consumers.

Bundles a story graph with the character and location documents its
scenes reference, plus the summary and validation verdict, as plain data
ready to be handed to a generation service.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from storygraph.graph.queries import referenced_character_ids, referenced_location_ids
from storygraph.graph.summary import summarize
from storygraph.graph.validation import validate
from storygraph.observability.logging import get_logger

if TYPE_CHECKING:
    from storygraph.graph.store import DocumentCache
    from storygraph.models.story_graph import StoryGraph

log = get_logger(__name__)

Resolver = Callable[[str], Awaitable[BaseModel | None]]


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


async def _resolve_all(ids: list[str], resolver: Resolver, kind: str) -> list[dict[str, Any]]:
    resolved = []
    for entity_id in ids:
        entity = await resolver(entity_id)
        if entity is None:
            log.debug("context_entity_unresolved", kind=kind, entity_id=entity_id)
            continue
        resolved.append({"id": entity_id, **_dump(entity)})
    return resolved


async def build_story_context(
    cache: DocumentCache[StoryGraph],
    doc_id: str,
    *,
    resolve_character: Resolver,
    resolve_location: Resolver,
) -> dict[str, Any] | None:
    """Build the AI context record for a story.

    Loads the story through *cache* if needed. Referenced characters and
    locations are resolved in first-seen order; ids a resolver can't find
    are skipped.

    Returns:
        ``{assetId, story, characters, locations, summary, validation}``, or
        None if the story can't be loaded.
    """
    document = await cache.load(doc_id)
    if document is None:
        return None

    characters = await _resolve_all(
        referenced_character_ids(document), resolve_character, "character"
    )
    locations = await _resolve_all(referenced_location_ids(document), resolve_location, "location")

    return {
        "assetId": doc_id,
        "story": _dump(document),
        "characters": characters,
        "locations": locations,
        "summary": summarize(document),
        "validation": validate(document).to_dict(),
    }
