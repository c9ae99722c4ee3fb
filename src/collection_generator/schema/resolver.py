"""Schema resolver — materializes one representative sample value per node."""

import logging
from collections.abc import Mapping
from typing import Any

from collection_generator.errors import (
    CyclicReferenceError,
    Location,
    ResolutionError,
    UnrecognizedSchemaError,
    UnresolvedReferenceError,
    UnsupportedCombinatorError,
)
from collection_generator.schema.nodes import (
    ArrayNode,
    CombinatorNode,
    EnumNode,
    MapNode,
    NullNode,
    OneOfNode,
    ReferenceNode,
    ScalarNode,
    SchemaNode,
    TemporalNode,
    parse_node,
)
from collection_generator.schema.temporal import Clock, resolve_temporal

logger = logging.getLogger(__name__)


def resolve(
    node: SchemaNode | dict,
    resources: Mapping[str, SchemaNode],
    *,
    clock: Clock | None = None,
    location: Location = (),
) -> Any:
    """Resolve ``node`` into a JSON-compatible sample.

    ``node`` may be a parsed node or a raw schema mapping. ``resources`` is
    the resource table that ``reference`` nodes are looked up in; it is never
    modified.

    Raises a ``ResolutionError`` subclass carrying the failing location.
    """
    return _resolve(parse_node(node, location), resources, clock, location, ())


def _resolve(
    node: SchemaNode,
    resources: Mapping[str, SchemaNode],
    clock: Clock | None,
    location: Location,
    in_flight: tuple[str, ...],
) -> Any:
    if isinstance(node, ReferenceNode):
        if node.name in in_flight:
            raise CyclicReferenceError((*in_flight, node.name), location)
        if node.name not in resources:
            raise UnresolvedReferenceError(node.name, location)
        logger.debug("Resolving reference %s", node.name)
        try:
            target = parse_node(resources[node.name], ("resources", node.name))
            return _resolve(target, resources, clock, ("resources", node.name), (*in_flight, node.name))
        except ResolutionError as e:
            # outermost reference wins
            e.via = location
            raise

    if isinstance(node, OneOfNode):
        if not node.alternatives:
            raise UnrecognizedSchemaError("'oneOf' without alternatives", location)
        return _resolve(node.alternatives[0], resources, clock, (*location, "oneOf", 0), in_flight)

    if isinstance(node, CombinatorNode):
        raise UnsupportedCombinatorError(node.kind, location)

    if isinstance(node, EnumNode):
        if node.sample is not None:
            return node.sample
        return node.values[0] if node.values else None

    if isinstance(node, TemporalNode):
        return resolve_temporal(node, clock)

    if isinstance(node, ArrayNode):
        return [_resolve(node.item, resources, clock, (*location, "item"), in_flight)]

    if isinstance(node, MapNode):
        return {
            name: _resolve(child, resources, clock, (*location, "properties", name), in_flight)
            for name, child in node.properties.items()
        }

    if isinstance(node, NullNode):
        return None

    if isinstance(node, ScalarNode):
        if node.sample is not None:
            return node.sample
        return node.type_tag

    raise UnrecognizedSchemaError(f"unknown node {type(node).__name__}", location)
