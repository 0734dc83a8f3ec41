"""YAML codec for story documents.

This is the only place where documents cross between their in-memory
pydantic form and their at-rest text form. Output is block-style YAML with
a fixed indentation, no line wrapping, no anchors/aliases, and keys in
insertion order, so hand edits and diffs stay readable.
"""

from __future__ import annotations

import io
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from storygraph.models.entities import CharacterData, ItemData, LocationData
from storygraph.models.story_graph import StoryGraph

T = TypeVar("T", bound=BaseModel)

# Long dialogue lines must not be folded
_NO_WRAP = 2**31 - 1


class ParseError(Exception):
    """Raised when serialized text can't be turned into a document."""

    def __init__(self, message: str, reason: str | None = None) -> None:
        self.message = message
        self.reason = reason
        detail = f"{message}: {reason}" if reason else message
        super().__init__(detail)


def _make_yaml() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = _NO_WRAP
    yaml.representer.ignore_aliases = lambda *args: True
    return yaml


def _format_validation_error(error: ValidationError) -> str:
    """Condense pydantic errors into one line per problem."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _drop_unset_optionals(value: Any, data: Any) -> None:
    """Remove None-valued declared fields from dumped *data*, in place."""
    if isinstance(value, BaseModel):
        for name, info in type(value).model_fields.items():
            key = info.serialization_alias or info.alias or name
            child = getattr(value, name)
            if child is None:
                data.pop(key, None)
            elif key in data:
                _drop_unset_optionals(child, data[key])
    elif isinstance(value, dict):
        for key, child in value.items():
            if key in data:
                _drop_unset_optionals(child, data[key])
    elif isinstance(value, (list, tuple)):
        for child, item in zip(value, data, strict=False):
            _drop_unset_optionals(child, item)


class YamlCodec(Generic[T]):
    """Convert documents of one model type to and from YAML text."""

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._yaml = _make_yaml()

    def to_data(self, document: T) -> dict[str, Any]:
        """Dump a document to plain data using its serialized (camelCase) keys.

        Declared fields left at None are omitted; extension fields are kept
        as-is, None included.
        """
        data = document.model_dump(mode="json", by_alias=True)
        _drop_unset_optionals(document, data)
        return data

    def serialize(self, document: T) -> str:
        """Render a document as YAML text.

        Deterministic for a given document: the same input always yields the
        same text.
        """
        stream = io.StringIO()
        self._yaml.dump(self.to_data(document), stream)
        return stream.getvalue()

    def deserialize(self, text: str) -> T:
        """Parse YAML text into a validated document.

        Raises:
            ParseError: If the text is not valid YAML, is empty, is not a
                mapping, or does not describe a valid document.
        """
        try:
            data = self._yaml.load(text)
        except (YAMLError, ValueError, TypeError, RecursionError) as e:
            # ruamel's scalar constructors raise ValueError on dates like 2024-13-45
            raise ParseError(f"Invalid YAML for {self.model.__name__}", str(e)) from e

        if data is None:
            raise ParseError(f"Empty {self.model.__name__} document")
        if not isinstance(data, dict):
            raise ParseError(
                f"Expected a mapping at the top level of {self.model.__name__}",
                f"got {type(data).__name__}",
            )

        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                f"Invalid {self.model.__name__} document", _format_validation_error(e)
            ) from e

    def __repr__(self) -> str:
        return f"YamlCodec({self.model.__name__})"


STORY_GRAPH_CODEC: YamlCodec[StoryGraph] = YamlCodec(StoryGraph)
CHARACTER_CODEC: YamlCodec[CharacterData] = YamlCodec(CharacterData)
LOCATION_CODEC: YamlCodec[LocationData] = YamlCodec(LocationData)
ITEM_CODEC: YamlCodec[ItemData] = YamlCodec(ItemData)


def serialize(document: StoryGraph) -> str:
    """Render a story graph as YAML text."""
    return STORY_GRAPH_CODEC.serialize(document)


def deserialize(text: str) -> StoryGraph:
    """Parse YAML text into a story graph.

    Raises:
        ParseError: If the text does not describe a valid story graph.
    """
    return STORY_GRAPH_CODEC.deserialize(text)
