"""Serialized forms of story documents and the storage they live in."""

from storygraph.artifacts.codec import (
    CHARACTER_CODEC,
    ITEM_CODEC,
    LOCATION_CODEC,
    STORY_GRAPH_CODEC,
    ParseError,
    YamlCodec,
    deserialize,
    serialize,
)
from storygraph.artifacts.kinds import (
    AssetKind,
    asset_kind_for_filename,
    asset_kind_for_name,
    codec_for_kind,
    is_story_asset,
)
from storygraph.artifacts.storage import (
    DirectoryTextStorage,
    MemoryTextStorage,
    StorageError,
    TextStorage,
)

__all__ = [
    "CHARACTER_CODEC",
    "ITEM_CODEC",
    "LOCATION_CODEC",
    "STORY_GRAPH_CODEC",
    "AssetKind",
    "DirectoryTextStorage",
    "MemoryTextStorage",
    "ParseError",
    "StorageError",
    "TextStorage",
    "YamlCodec",
    "asset_kind_for_filename",
    "asset_kind_for_name",
    "codec_for_kind",
    "deserialize",
    "is_story_asset",
    "serialize",
]
