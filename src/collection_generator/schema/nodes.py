"""Tagged-union schema nodes.

Raw specification mappings are turned into exactly one node variant by
``parse_node``. All the key sniffing (``reference``, ``oneOf``, ``enum``,
``type: "map|null"`` ...) happens here, once; the resolver only switches on
the variant.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from collection_generator.errors import Location, UnrecognizedSchemaError

TEMPORAL_KINDS = ("date", "datetime", "localdatetime")
COMBINATOR_KINDS = ("allOf", "anyOf")


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class ScalarNode(_Node):
    """string / float / int / bool / email, or any unknown type tag.

    Resolution only reads ``sample`` and ``type_tag``; ``kind`` and
    ``nullable`` describe the declared type for callers inspecting parsed
    nodes and do not change the sample.
    """

    tag: Literal["scalar"] = "scalar"
    type_tag: str | None = None
    kind: str | None = None
    sample: Any = None
    nullable: bool = False


class EnumNode(_Node):
    tag: Literal["enum"] = "enum"
    values: list[Any]
    sample: Any = None


class MapNode(_Node):
    tag: Literal["map"] = "map"
    properties: dict[str, "SchemaNode"] = {}


class ArrayNode(_Node):
    tag: Literal["array"] = "array"
    item: "SchemaNode"


class OneOfNode(_Node):
    tag: Literal["oneOf"] = "oneOf"
    alternatives: list["SchemaNode"]


class ReferenceNode(_Node):
    tag: Literal["reference"] = "reference"
    name: str


class TemporalNode(_Node):
    tag: Literal["temporal"] = "temporal"
    kind: Literal["date", "datetime", "localdatetime"]
    sample: Any = None


class NullNode(_Node):
    tag: Literal["null"] = "null"


class CombinatorNode(_Node):
    """allOf / anyOf. Parsed so resolution can reject it with its location."""

    tag: Literal["combinator"] = "combinator"
    kind: Literal["allOf", "anyOf"]


SchemaNode = Annotated[
    Union[
        ScalarNode,
        EnumNode,
        MapNode,
        ArrayNode,
        OneOfNode,
        ReferenceNode,
        TemporalNode,
        NullNode,
        CombinatorNode,
    ],
    Field(discriminator="tag"),
]

MapNode.model_rebuild()
ArrayNode.model_rebuild()
OneOfNode.model_rebuild()

ResourceTable = dict[str, SchemaNode]


def _split_types(raw: dict, location: Location) -> list[str]:
    type_tag = raw.get("type")
    if type_tag is None:
        return []
    if not isinstance(type_tag, str):
        raise UnrecognizedSchemaError(f"'type' must be a string, got {type_tag!r}", location)
    return type_tag.split("|")


def parse_node(raw: Any, location: Location = ()) -> SchemaNode:
    """Parse a raw schema mapping into its node variant.

    Precedence mirrors resolution order: null type, reference, oneOf,
    allOf/anyOf, enum, temporal kinds, array, map, then scalar.
    """
    if isinstance(raw, _Node):
        return raw
    if not isinstance(raw, dict):
        raise UnrecognizedSchemaError(f"expected a mapping, got {type(raw).__name__}", location)

    types = _split_types(raw, location)

    if types and types[0] == "null":
        return NullNode()

    if raw.get("reference") is not None:
        return ReferenceNode(name=str(raw["reference"]))

    if raw.get("oneOf") is not None:
        alternatives = raw["oneOf"]
        if not isinstance(alternatives, list):
            raise UnrecognizedSchemaError("'oneOf' must be a list", location)
        return OneOfNode(
            alternatives=[
                parse_node(alt, (*location, "oneOf", i)) for i, alt in enumerate(alternatives)
            ]
        )

    for kind in COMBINATOR_KINDS:
        if raw.get(kind) is not None:
            return CombinatorNode(kind=kind)

    if raw.get("enum") is not None:
        values = raw["enum"]
        if not isinstance(values, list):
            raise UnrecognizedSchemaError("'enum' must be a list", location)
        return EnumNode(values=values, sample=raw.get("sample"))

    for kind in TEMPORAL_KINDS:
        if kind in types:
            return TemporalNode(kind=kind, sample=raw.get("sample"))

    if "array" in types:
        if "item" not in raw:
            raise UnrecognizedSchemaError("array without 'item'", location)
        return ArrayNode(item=parse_node(raw["item"], (*location, "item")))

    if "map" in types:
        properties = raw.get("properties") or {}
        if not isinstance(properties, dict):
            raise UnrecognizedSchemaError("'properties' must be a mapping", location)
        return MapNode(
            properties={
                name: parse_node(child, (*location, "properties", name))
                for name, child in properties.items()
            }
        )

    return ScalarNode(
        type_tag=raw.get("type"),
        kind=types[0] if types else None,
        sample=raw.get("sample"),
        nullable="null" in types[1:],
    )


def parse_resources(raw: dict | None, location: Location = ("resources",)) -> ResourceTable:
    """Parse a ``resources`` mapping into a name -> node table."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise UnrecognizedSchemaError("'resources' must be a mapping", location)
    return {name: parse_node(node, (*location, name)) for name, node in raw.items()}
