"""Asset kind classification by name suffix.

Story documents are recognized purely by naming convention: an asset named
``intro.storygraph`` (stored as ``intro.storygraph.yaml``) is a story graph,
``hero.character`` a character, and so on. Matching is case-sensitive.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from storygraph.artifacts.codec import (
    CHARACTER_CODEC,
    ITEM_CODEC,
    LOCATION_CODEC,
    STORY_GRAPH_CODEC,
    YamlCodec,
)

FILE_EXTENSION = ".yaml"


class AssetKind(StrEnum):
    """Kinds of document this package knows how to read and write."""

    STORY_GRAPH = "storygraph"
    CHARACTER = "character"
    LOCATION = "location"
    ITEM = "item"

    @property
    def name_suffix(self) -> str:
        """Suffix on the asset name, e.g. ``.storygraph``."""
        return f".{self.value}"

    @property
    def file_suffix(self) -> str:
        """Suffix on the file name, e.g. ``.storygraph.yaml``."""
        return f"{self.name_suffix}{FILE_EXTENSION}"


_CODECS: dict[AssetKind, YamlCodec[Any]] = {
    AssetKind.STORY_GRAPH: STORY_GRAPH_CODEC,
    AssetKind.CHARACTER: CHARACTER_CODEC,
    AssetKind.LOCATION: LOCATION_CODEC,
    AssetKind.ITEM: ITEM_CODEC,
}


def asset_kind_for_name(name: str | None) -> AssetKind | None:
    """Classify an asset by the suffix of its name (``*.storygraph`` etc.)."""
    if not name:
        return None
    for kind in AssetKind:
        if name.endswith(kind.name_suffix):
            return kind
    return None


def asset_kind_for_filename(filename: str | None) -> AssetKind | None:
    """Classify a file by the suffix of its name (``*.storygraph.yaml`` etc.)."""
    if not filename:
        return None
    for kind in AssetKind:
        if filename.endswith(kind.file_suffix):
            return kind
    return None


def is_story_asset(name: str | None) -> bool:
    """True if the asset name carries any known suffix."""
    return asset_kind_for_name(name) is not None


def codec_for_kind(kind: AssetKind) -> YamlCodec[Any]:
    """Return the codec that reads and writes documents of *kind*."""
    return _CODECS[kind]
