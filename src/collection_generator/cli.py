"""CLI entry point for api-collection-generator."""

import json
import logging
from pathlib import Path

import click

from collection_generator.collection.builder import CollectionBuilder
from collection_generator.collection.context import JSON_INDENT
from collection_generator.errors import CollectionGeneratorError
from collection_generator.loader import load_specification
from collection_generator.schema.nodes import parse_resources
from collection_generator.schema.resolver import resolve


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Collection Generator — build Postman collections with sample data from API specs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file for the collection JSON (stdout if omitted).")
@click.option("--indent", default=JSON_INDENT, show_default=True, type=click.IntRange(min=0), help="JSON indentation.")
def generate(spec_path: Path, output: Path | None, indent: int):
    """Generate a Postman collection from an API specification."""
    try:
        specification = load_specification(spec_path)
        result = CollectionBuilder(indent=indent).generate(specification)
    except CollectionGeneratorError as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result + "\n", encoding="utf-8")
    click.echo(f"Collection saved to {output}", err=True)


@main.command("resolve")
@click.argument("spec_path", type=click.Path(exists=True, path_type=Path))
@click.argument("resource")
@click.option("--indent", default=JSON_INDENT, show_default=True, type=click.IntRange(min=0), help="JSON indentation.")
def resolve_resource(spec_path: Path, resource: str, indent: int):
    """Print the resolved sample of a single RESOURCE."""
    try:
        specification = load_specification(spec_path)
        resources = parse_resources(specification.get("resources"))
        value = resolve({"reference": resource}, resources, location=("resources", resource))
    except CollectionGeneratorError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(value, indent=indent, ensure_ascii=False, default=str))
