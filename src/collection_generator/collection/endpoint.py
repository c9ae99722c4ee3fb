"""Endpoint assembly — one request item per supported method of a path."""

import json
import logging
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError

from collection_generator.collection.context import ResolutionContext
from collection_generator.collection.models import (
    Body,
    Descriptor,
    Header,
    MethodDefinition,
    QueryParam,
    Request,
    RequestItem,
    Url,
)
from collection_generator.errors import Location, SpecificationError, format_location
from collection_generator.schema.resolver import resolve

logger = logging.getLogger(__name__)

REQUEST_METHODS = ("GET", "POST", "PUT", "DELETE")


def _parameter_properties(parameters: dict | None) -> dict:
    """Parameters may be a map schema (``properties``) or a flat name -> descriptor mapping."""
    if not parameters:
        return {}
    properties = parameters.get("properties")
    if isinstance(properties, dict):
        return properties
    return parameters


def _render_sample(sample: Any) -> str:
    if isinstance(sample, bool):
        return "true" if sample else "false"
    return str(sample)


def replace_inline_parameters(url: str, parameters: dict | None) -> str:
    """Substitute ``{name}`` placeholders that have a sample; leave the rest literal."""
    for name, descriptor in _parameter_properties(parameters).items():
        if isinstance(descriptor, dict) and descriptor.get("sample") is not None:
            url = url.replace(f"{{{name}}}", _render_sample(descriptor["sample"]))
    return url


def parse_descriptors(raw: dict | None, location: Location) -> dict[str, Descriptor]:
    """Validate a name -> header descriptor mapping."""
    try:
        return {name: Descriptor.model_validate(value) for name, value in (raw or {}).items()}
    except ValidationError as e:
        raise SpecificationError(f"Invalid headers at {format_location(location)}: {e}") from e


def build_query(parameters: dict | None, path: str, location: Location = ()) -> list[QueryParam]:
    """Query entries for every parameter property not bound into ``path``."""
    if not parameters or not isinstance(parameters.get("properties"), dict):
        return []

    result = []
    for name, parameter in parameters["properties"].items():
        if f"{{{name}}}" in path:
            continue
        parameter = parameter if isinstance(parameter, dict) else {}
        try:
            query = QueryParam(
                key=name,
                value=parameter.get("sample"),
                description=parameter.get("description"),
                disabled=bool(parameter.get("optional", False)),
            )
        except ValidationError as e:
            param_location = (*location, "properties", name)
            raise SpecificationError(f"Invalid parameter at {format_location(param_location)}: {e}") from e
        result.append(query)
    return result


def build_headers(headers: dict[str, Descriptor]) -> list[Header]:
    return [
        Header(key=name, value=header.sample, description=header.description)
        for name, header in headers.items()
    ]


def build_body(schema: dict | None, context: ResolutionContext, location: Location) -> Body:
    if not schema:
        return Body(raw=None)

    data = resolve(schema, context.resources, clock=context.clock, location=location)
    if data is None or data == {} or data == []:
        return Body(raw=None)
    return Body(raw=json.dumps(data, indent=context.indent, ensure_ascii=False, default=str))


def _build_url(url: str, query: list[QueryParam]) -> Url:
    parts = urlsplit(url)
    return Url(
        protocol=parts.scheme or None,
        host=(parts.hostname or "").split("."),
        path=parts.path.strip("/").split("/"),
        query=query,
    )


def build_endpoint(
    path: str,
    endpoint: dict[str, Any],
    context: ResolutionContext,
    location: Location = (),
) -> list[RequestItem]:
    """Build one request item per GET/POST/PUT/DELETE key of ``endpoint``.

    Other keys (``parameters``, ``headers``, unsupported methods) are skipped.
    """
    headers = {**context.base_headers, **parse_descriptors(endpoint.get("headers"), (*location, "headers"))}

    result = []
    for method, values in endpoint.items():
        if str(method).upper() not in REQUEST_METHODS:
            if method not in ("parameters", "headers"):
                logger.debug("Skipping unsupported method %s %s", method, path)
            continue

        method_location = (*location, method)
        try:
            definition = MethodDefinition.model_validate(values or {})
        except ValidationError as e:
            raise SpecificationError(f"Invalid endpoint at {format_location(method_location)}: {e}") from e

        if definition.parameters is not None:
            parameters = definition.parameters
            parameters_location = (*method_location, "parameters")
        else:
            parameters = endpoint.get("parameters") or {}
            parameters_location = (*location, "parameters")

        url = replace_inline_parameters(context.base_url + path, parameters)
        schema = definition.request.schema_ if definition.request else None

        result.append(
            RequestItem(
                name=definition.title,
                request=Request(
                    method=str(method).upper(),
                    header=build_headers(headers),
                    url=_build_url(url, build_query(parameters, path, parameters_location)),
                    body=build_body(schema, context, (*method_location, "request", "schema")),
                ),
            )
        )
    return result
