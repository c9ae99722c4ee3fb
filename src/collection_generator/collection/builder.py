"""Collection builder — turns an API specification into a Postman collection."""

import json
import logging
import re
import unicodedata
from typing import Any

from pydantic import ValidationError

from collection_generator.collection.context import JSON_INDENT, ResolutionContext
from collection_generator.collection.endpoint import (
    build_endpoint,
    replace_inline_parameters,
)
from collection_generator.collection.models import (
    ApiSpecification,
    CollectionDocument,
    Folder,
    Info,
    RequestItem,
)
from collection_generator.errors import SpecificationError
from collection_generator.schema.nodes import parse_resources
from collection_generator.schema.temporal import Clock

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Convert a title to a lowercase, dash-separated ASCII slug."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return text.strip("-")


def _section_sort_key(folder: Folder) -> tuple[str, str]:
    """Title first, then the serialized items."""
    items = [item.model_dump(by_alias=True) for item in folder.item]
    return folder.name, json.dumps(items, ensure_ascii=False, default=str)


class CollectionBuilder:
    """Generates Postman collection documents from API specifications.

    The builder only keeps configuration; all per-specification state lives in
    a ``ResolutionContext`` created for each call, so one instance can serve
    concurrent calls.
    """

    def __init__(self, clock: Clock | None = None, indent: int = JSON_INDENT):
        self.clock = clock
        self.indent = indent

    def generate(self, specification: ApiSpecification | dict[str, Any]) -> str:
        """Generate the collection and return it as pretty-printed JSON text."""
        document = self.build_document(specification)
        return json.dumps(
            document.model_dump(by_alias=True),
            indent=self.indent,
            ensure_ascii=False,
            default=str,
        )

    def build_document(self, specification: ApiSpecification | dict[str, Any]) -> CollectionDocument:
        spec = self._validate(specification)
        context = self._build_context(spec)

        sections = []
        for index, section in enumerate(spec.sections):
            items = self._build_section(section.endpoints, context, ("sections", index, "endpoints"))
            sections.append(Folder(name=section.title, item=items))
            logger.debug("Built section %r with %d requests", section.title, len(items))

        sections.sort(key=_section_sort_key)
        return CollectionDocument(
            info=Info(postman_id=slugify(spec.title), name=spec.title),
            item=sections,
        )

    def _validate(self, specification) -> ApiSpecification:
        if isinstance(specification, ApiSpecification):
            return specification
        try:
            return ApiSpecification.model_validate(specification)
        except ValidationError as e:
            raise SpecificationError(f"Invalid API specification: {e}") from e

    def _build_context(self, spec: ApiSpecification) -> ResolutionContext:
        base_url = replace_inline_parameters(spec.prefix.url.strip("/"), spec.prefix.parameters)
        return ResolutionContext(
            base_url=base_url,
            base_headers=spec.prefix.headers,
            resources=parse_resources(spec.resources),
            clock=self.clock,
            indent=self.indent,
        )

    def _build_section(self, endpoints: dict, context: ResolutionContext, location) -> list[RequestItem]:
        items: list[RequestItem] = []
        for path, endpoint in endpoints.items():
            items.extend(build_endpoint(path, endpoint, context, (*location, path)))
        return items


def generate(specification: ApiSpecification | dict[str, Any], *, clock: Clock | None = None) -> str:
    """Shortcut for ``CollectionBuilder(clock=clock).generate(specification)``."""
    return CollectionBuilder(clock=clock).generate(specification)
