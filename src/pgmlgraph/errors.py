"""Exceptions raised while reading PGML documents.

Only some of them abort a parse. ``UnknownTypeError`` is raised by the type
registry and caught by the dispatch factory, which logs it and carries on
without a hinted instance.
"""


class PgmlError(Exception):
    """Base class for all errors raised by this package."""


class MalformedDocumentError(PgmlError):
    """Document is not well formed, or an attribute value cannot be parsed."""


class UnknownTypeError(PgmlError):
    """Type hint names a type that is not in the type registry."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Type {type_name} is not registered")
        self.type_name = type_name


class ShapeConstructionError(PgmlError):
    """Registered constructor for a type failed."""


class OwnerResolutionError(PgmlError):
    """``href`` attribute has no matching element in the owner registry."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"Found href of {owner_id} with no matching element in model")
        self.owner_id = owner_id


class ParserStateError(PgmlError):
    """Parser was used in a way its handlers do not support."""
