"""Load an API specification file (YAML or JSON)."""

from pathlib import Path

import yaml

from collection_generator.errors import SpecificationError


def load_specification(file_path: Path) -> dict:
    """Read ``file_path`` and return the specification mapping.

    JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecificationError(f"Cannot parse {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise SpecificationError(f"{file_path} does not contain a mapping at the top level")
    return data
