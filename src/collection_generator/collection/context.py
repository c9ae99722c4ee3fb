"""Per-call resolution context."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from collection_generator.collection.models import Descriptor
from collection_generator.schema.nodes import SchemaNode
from collection_generator.schema.temporal import Clock

JSON_INDENT = 4


@dataclass(frozen=True)
class ResolutionContext:
    """Everything an endpoint needs from the enclosing specification.

    Built fresh at the start of every ``generate`` call and passed down
    explicitly; nothing here is mutated afterwards.
    """

    base_url: str
    base_headers: Mapping[str, Descriptor] = field(default_factory=dict)
    resources: Mapping[str, SchemaNode] = field(default_factory=dict)
    clock: Clock | None = None
    indent: int = JSON_INDENT

    def __post_init__(self):
        object.__setattr__(self, "base_headers", MappingProxyType(dict(self.base_headers)))
        object.__setattr__(self, "resources", MappingProxyType(dict(self.resources)))
