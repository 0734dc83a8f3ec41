"""Raw document text storage.

The document cache never touches storage directly; it goes through a
TextStorage implementation that fetches and persists the serialized text of
a document by id. Implementations handle raw I/O only; parsing and caching
happen above them.

MemoryTextStorage keeps text in a dict (tests, embedding). DirectoryTextStorage
maps ids to files under a root directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable

from storygraph.observability.logging import get_logger

log = get_logger(__name__)


class StorageError(Exception):
    """Raised when document text can't be read or written."""

    def __init__(self, doc_id: str, reason: str) -> None:
        self.doc_id = doc_id
        self.reason = reason
        super().__init__(f"Storage failure for {doc_id}: {reason}")


@runtime_checkable
class TextStorage(Protocol):
    """Storage collaborator for serialized document text.

    ``fetch_text`` returns None when the id does not exist. ``persist_text``
    signals failure by raising, or by returning an exception instance.
    """

    async def fetch_text(self, doc_id: str) -> str | None:
        """Return the stored text for *doc_id*, or None if absent."""
        ...

    async def persist_text(self, doc_id: str, text: str) -> BaseException | None:
        """Store *text* as the content of *doc_id*."""
        ...


class MemoryTextStorage:
    """In-memory dict-based text storage."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self.texts: dict[str, str] = dict(texts or {})

    async def fetch_text(self, doc_id: str) -> str | None:
        return self.texts.get(doc_id)

    async def persist_text(self, doc_id: str, text: str) -> BaseException | None:
        self.texts[doc_id] = text
        return None


class DirectoryTextStorage:
    """File-backed text storage rooted at a directory.

    Document ids are paths relative to the root, e.g.
    ``chapter1/intro.storygraph.yaml``. Ids that would escape the root are
    rejected.
    """

    def __init__(self, root: Path, encoding: str = "utf-8") -> None:
        self.root = root
        self.encoding = encoding

    def path_for(self, doc_id: str) -> Path:
        """Resolve *doc_id* to a file path under the root.

        Raises:
            StorageError: If the id resolves outside the root directory.
        """
        root = self.root.resolve()
        path = (root / doc_id).resolve()
        if not path.is_relative_to(root):
            raise StorageError(doc_id, "path escapes storage root")
        return path

    async def fetch_text(self, doc_id: str) -> str | None:
        path = self.path_for(doc_id)
        if not path.is_file():
            return None
        try:
            return await asyncio.to_thread(path.read_text, encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(doc_id, str(e)) from e

    async def persist_text(self, doc_id: str, text: str) -> BaseException | None:
        path = self.path_for(doc_id)
        try:
            await asyncio.to_thread(self._write_atomic, path, text)
        except OSError as e:
            raise StorageError(doc_id, str(e)) from e
        log.debug("document_text_written", doc_id=doc_id, path=str(path), size=len(text))
        return None

    def _write_atomic(self, path: Path, text: str) -> None:
        """Write via temp file + rename so readers never see a partial file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_text(text, encoding=self.encoding)
            tmp_path.replace(path)
        except OSError:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
