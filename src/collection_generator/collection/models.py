"""Input specification and output collection models.

The input side is deliberately loose: schema trees stay raw mappings and are
turned into nodes by ``collection_generator.schema.nodes.parse_node``. The
output side mirrors the Postman Collection v2.1 shape.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


# --- input ---


class Descriptor(BaseModel):
    """A header or parameter descriptor."""

    model_config = ConfigDict(extra="allow")

    sample: Any = None
    description: str | None = None
    optional: bool = False


class Prefix(BaseModel):
    url: str
    parameters: dict[str, Any] = {}
    headers: dict[str, Descriptor] = {}

    @field_validator("parameters", "headers", mode="before")
    @classmethod
    def empty_when_null(cls, value):
        return {} if value is None else value


class RequestDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class MethodDefinition(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    parameters: dict[str, Any] | None = None
    headers: dict[str, Descriptor] | None = None
    request: RequestDefinition | None = None


class SectionDefinition(BaseModel):
    title: str
    endpoints: dict[str, dict[str, Any]] = {}

    @field_validator("endpoints", mode="before")
    @classmethod
    def empty_when_null(cls, value):
        return {} if value is None else value


class ApiSpecification(BaseModel):
    title: str
    prefix: Prefix
    resources: dict[str, Any] = {}
    sections: list[SectionDefinition] = []

    @field_validator("resources", mode="before")
    @classmethod
    def empty_when_null(cls, value):
        """A bare `resources:` key in YAML loads as None."""
        return {} if value is None else value

    @field_validator("sections", mode="before")
    @classmethod
    def no_sections_when_null(cls, value):
        return [] if value is None else value


# --- output ---


class QueryParam(BaseModel):
    key: str
    value: Any = None
    description: str | None = None
    disabled: bool = False


class Header(BaseModel):
    key: str
    value: Any = None
    description: str | None = None


class Url(BaseModel):
    protocol: str | None
    host: list[str]
    path: list[str]
    query: list[QueryParam]


class Body(BaseModel):
    mode: str = "raw"
    raw: str | None = None


class Request(BaseModel):
    method: str
    header: list[Header]
    url: Url
    body: Body


class RequestItem(BaseModel):
    name: str
    request: Request


class Folder(BaseModel):
    name: str
    item: list[RequestItem]


class Info(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    postman_id: str = Field(alias="_postman_id")
    name: str
    schema_url: str = Field(default=POSTMAN_SCHEMA_URL, alias="schema")


class CollectionDocument(BaseModel):
    info: Info
    item: list[Folder]
