"""Debounced auto-save for cached documents.

Editors that fire on every keystroke call ``schedule(doc_id)``; the save
runs once the document has been quiet for ``delay`` seconds. Must be used
from within a running event loop.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from storygraph.config import DEFAULT_AUTOSAVE_DELAY
from storygraph.observability.logging import get_logger

if TYPE_CHECKING:
    from storygraph.config import ProjectConfig
    from storygraph.graph.store import DocumentCache

log = get_logger(__name__)


class DebouncedSaver:
    """Coalesce bursts of edits into one ``cache.save`` per document.

    Attributes:
        cache: Cache whose documents are saved.
        delay: Quiet period in seconds before a scheduled save fires.
    """

    def __init__(self, cache: DocumentCache, delay: float = DEFAULT_AUTOSAVE_DELAY) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.cache = cache
        self.delay = delay
        self._pending: dict[str, asyncio.Task[bool]] = {}
        # Every live task, including timers that already fired and are saving
        self._tasks: set[asyncio.Task[bool]] = set()

    @classmethod
    def for_project(cls, cache: DocumentCache, config: ProjectConfig) -> DebouncedSaver:
        """Create a saver using the project's configured ``autosave_delay``."""
        return cls(cache, delay=config.autosave_delay)

    def schedule(self, doc_id: str) -> None:
        """Start (or restart) the save timer for *doc_id*."""
        existing = self._pending.pop(doc_id, None)
        if existing is not None:
            existing.cancel()
        task = asyncio.create_task(self._save_later(doc_id))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        self._pending[doc_id] = task

    def pending_ids(self) -> list[str]:
        """Ids with a save timer running."""
        return list(self._pending)

    def active_count(self) -> int:
        """Number of timers and in-progress saves not yet finished."""
        return len(self._tasks)

    async def _save_later(self, doc_id: str) -> bool:
        await asyncio.sleep(self.delay)
        # Past this point the save is no longer cancellable via schedule/cancel
        self._pending.pop(doc_id, None)
        saved = await self.cache.save(doc_id)
        if not saved:
            log.warning("autosave_failed", doc_id=doc_id)
        return saved

    def _task_done(self, task: asyncio.Task[bool]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error("autosave_crashed", error=str(error))

    async def flush(self, doc_id: str | None = None) -> dict[str, bool]:
        """Save pending documents now instead of waiting for their timers.

        Args:
            doc_id: Only flush this id; flush every pending id when None.

        Returns:
            Save result per flushed id.
        """
        ids = [doc_id] if doc_id is not None else list(self._pending)
        results: dict[str, bool] = {}
        for pending_id in ids:
            task = self._pending.pop(pending_id, None)
            if task is None:
                continue
            task.cancel()
            results[pending_id] = await self.cache.save(pending_id)
        return results

    def cancel(self, doc_id: str | None = None) -> None:
        """Drop pending timers without saving."""
        ids = [doc_id] if doc_id is not None else list(self._pending)
        for pending_id in ids:
            task = self._pending.pop(pending_id, None)
            if task is not None:
                task.cancel()
