"""Error taxonomy for collection generation.

Every failure aborts the whole ``generate`` call. Resolution errors carry the
location of the failing node inside the specification so the caller can point
at it.
"""

Location = tuple[str | int, ...]


def format_location(location: Location) -> str:
    """Render a location tuple as ``sections[0].endpoints./users.post``."""
    out = ""
    for part in location:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out or "<root>"


class CollectionGeneratorError(Exception):
    """Base class for all errors raised by collection_generator."""


class SpecificationError(CollectionGeneratorError):
    """The specification could not be loaded or does not fit the expected shape."""


class ResolutionError(CollectionGeneratorError):
    """A schema node could not be turned into a sample value."""

    def __init__(self, message: str, location: Location = ()):
        self.message = message
        self.location = tuple(location)
        # Set while unwinding through references: where the resource was used from.
        self.via: Location = ()
        super().__init__(message)

    def __str__(self):
        text = f"{self.message} (at {format_location(self.location)}"
        if self.via and self.via != self.location:
            text += f", via {format_location(self.via)}"
        return text + ")"


class UnresolvedReferenceError(ResolutionError):
    def __init__(self, name: str, location: Location = ()):
        self.name = name
        super().__init__(f"Unresolved reference '{name}'", location)


class UnsupportedCombinatorError(ResolutionError):
    def __init__(self, kind: str, location: Location = ()):
        self.kind = kind
        super().__init__(f"Combinator '{kind}' is not supported", location)


class UnrecognizedSchemaError(ResolutionError):
    def __init__(self, detail: str, location: Location = ()):
        self.detail = detail
        super().__init__(f"Unrecognized schema: {detail}", location)


class CyclicReferenceError(ResolutionError):
    def __init__(self, chain: tuple[str, ...], location: Location = ()):
        self.chain = tuple(chain)
        super().__init__(f"Cyclic reference: {' -> '.join(self.chain)}", location)
