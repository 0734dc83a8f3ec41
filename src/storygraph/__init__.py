"""storygraph - branching story graph documents.

Typed models, a YAML codec, an async document cache with dirty tracking,
and the graph operations (queries, mutations, validation, summary) used by
story editors and AI context builders.
"""

from storygraph.artifacts.codec import ParseError, deserialize, serialize
from storygraph.graph.store import DocumentCache
from storygraph.models.story_graph import StoryGraph

__version__ = "0.1.0"

__all__ = [
    "DocumentCache",
    "ParseError",
    "StoryGraph",
    "__version__",
    "deserialize",
    "serialize",
]
