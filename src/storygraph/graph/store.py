"""Document cache: parsed documents keyed by id, with dirty tracking.

DocumentCache sits between callers and a TextStorage backend. It loads
documents once (fetch + parse), hands out the live in-memory instance, tracks
which ids have unsaved edits, and writes documents back through the codec.

The cache is an explicit object, not module state: construct one per
application or session and pass it to whatever needs it. It runs on a single
event loop and does no locking. Callers must serialize multi-step edits
against one document id themselves.

Failure policy:
- ``load`` returns None when the document is missing, unreadable or fails to
  parse. The cause is logged, never raised.
- ``save`` returns False when nothing is cached or the storage write fails;
  the dirty flag stays set so a retry is meaningful.
- Malformed paths passed to ``get_path``/``set_path`` are programming errors
  and raise PathError.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from storygraph.artifacts.codec import STORY_GRAPH_CODEC, ParseError, YamlCodec
from storygraph.graph import paths
from storygraph.observability.logging import get_logger

if TYPE_CHECKING:
    from storygraph.artifacts.storage import TextStorage
    from storygraph.models.story_graph import StoryGraph

log = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class DocumentCache(Generic[T]):
    """Process-wide store of parsed documents for one codec.

    Attributes:
        storage: Backend that fetches and persists raw document text.
        codec: Codec converting between text and documents.
    """

    def __init__(self, storage: TextStorage, codec: YamlCodec[T]) -> None:
        self.storage = storage
        self.codec = codec
        self._documents: dict[str, T] = {}
        self._dirty: set[str] = set()
        self._revisions: dict[str, int] = {}
        self._inflight: dict[str, asyncio.Future[T | None]] = {}

    @classmethod
    def for_story_graphs(cls, storage: TextStorage) -> DocumentCache[StoryGraph]:
        """Create a cache for story graph documents."""
        return DocumentCache(storage, STORY_GRAPH_CODEC)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self, doc_id: str) -> T | None:
        """Return the document for *doc_id*, fetching and parsing it if needed.

        Returns the cached instance without I/O when present. Concurrent calls
        for the same id share a single fetch.

        Returns:
            The document, or None if it does not exist or can't be read.
        """
        cached = self._documents.get(doc_id)
        if cached is not None:
            return cached

        pending = self._inflight.get(doc_id)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_and_parse(doc_id))
            self._inflight[doc_id] = pending
        # Shield so one cancelled caller doesn't cancel the shared fetch
        return await asyncio.shield(pending)

    async def _fetch_and_parse(self, doc_id: str) -> T | None:
        try:
            try:
                text = await self.storage.fetch_text(doc_id)
            except Exception as e:
                log.error("document_fetch_failed", doc_id=doc_id, error=str(e))
                return None

            if not text:
                log.warning("document_not_found", doc_id=doc_id)
                return None

            try:
                document = self.codec.deserialize(text)
            except ParseError as e:
                log.error("document_parse_failed", doc_id=doc_id, error=str(e))
                return None

            # A document put() while we were fetching is newer than storage
            existing = self._documents.get(doc_id)
            if existing is not None:
                log.debug("document_load_superseded", doc_id=doc_id)
                return existing

            self._documents[doc_id] = document
            log.info("document_loaded", doc_id=doc_id)
            return document
        finally:
            self._inflight.pop(doc_id, None)

    # -------------------------------------------------------------------------
    # Synchronous access
    # -------------------------------------------------------------------------

    def get_cached(self, doc_id: str) -> T | None:
        """Return the cached document, or None. Never performs I/O."""
        return self._documents.get(doc_id)

    def is_cached(self, doc_id: str) -> bool:
        """True if a document is cached for *doc_id*."""
        return doc_id in self._documents

    def put(self, doc_id: str, document: T) -> None:
        """Replace the cached document for *doc_id* and mark it dirty."""
        self._documents[doc_id] = document
        self.mark_dirty(doc_id)

    def get_path(self, doc_id: str, path: str) -> Any:
        """Read a dotted path from the cached document.

        Returns:
            The value, or None if nothing is cached or any segment is unset.

        Raises:
            PathError: If *path* is malformed.
        """
        document = self._documents.get(doc_id)
        if document is None:
            paths.split_path(path)
            return None
        return paths.get_path(document, path)

    def set_path(self, doc_id: str, path: str, value: Any) -> bool:
        """Write a dotted path in the cached document and mark it dirty.

        Intermediate mapping levels are created as needed. Nothing is loaded
        implicitly.

        Returns:
            True if written, False if no document is cached for *doc_id*.

        Raises:
            PathError: If *path* is malformed or *value* is invalid there.
        """
        document = self._documents.get(doc_id)
        if document is None:
            log.warning("set_path_not_cached", doc_id=doc_id, path=path)
            return False
        paths.set_path(document, path, value)
        self.mark_dirty(doc_id)
        return True

    # -------------------------------------------------------------------------
    # Dirty tracking
    # -------------------------------------------------------------------------

    def mark_dirty(self, doc_id: str) -> None:
        """Record an unsaved edit to *doc_id*."""
        self._dirty.add(doc_id)
        self._revisions[doc_id] = self._revisions.get(doc_id, 0) + 1

    def is_dirty(self, doc_id: str) -> bool:
        """True if *doc_id* has edits that have not been saved."""
        return doc_id in self._dirty

    def dirty_ids(self) -> list[str]:
        """Return ids with unsaved edits."""
        return list(self._dirty)

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    async def save(self, doc_id: str) -> bool:
        """Serialize the cached document and persist it.

        The dirty flag is cleared only if the write succeeds and no further
        edit was recorded while it was in flight. There is no automatic retry.

        Returns:
            True on success, False if nothing is cached or the write failed.
        """
        document = self._documents.get(doc_id)
        if document is None:
            log.warning("save_not_cached", doc_id=doc_id)
            return False

        revision = self._revisions.get(doc_id, 0)
        text = self.codec.serialize(document)

        try:
            result = await self.storage.persist_text(doc_id, text)
        except Exception as e:
            log.error("document_save_failed", doc_id=doc_id, error=str(e))
            return False
        if isinstance(result, BaseException):
            log.error("document_save_failed", doc_id=doc_id, error=str(result))
            return False

        if self._revisions.get(doc_id, 0) == revision:
            self._dirty.discard(doc_id)
        log.info("document_saved", doc_id=doc_id, size=len(text))
        return True

    # -------------------------------------------------------------------------
    # Eviction
    # -------------------------------------------------------------------------

    def clear_cache(self, doc_id: str) -> None:
        """Drop the cached document and its dirty flag."""
        self._documents.pop(doc_id, None)
        self._dirty.discard(doc_id)
        self._revisions.pop(doc_id, None)

    def clear_all(self) -> None:
        """Drop every cached document and dirty flag."""
        self._documents.clear()
        self._dirty.clear()
        self._revisions.clear()

    def __repr__(self) -> str:
        return (
            f"DocumentCache({self.codec.model.__name__}, cached={len(self._documents)}, "
            f"dirty={len(self._dirty)})"
        )
