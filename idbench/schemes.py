"""Identifier schemes under test."""

import uuid
from enum import Enum
from typing import Any, Callable, Union

from bson import ObjectId

Identifier = Union[ObjectId, uuid.UUID]


class IdentifierScheme(Enum):
    """Closed set of document key encodings.

    The value is the label used in result rows.
    """

    OBJECT_ID = "OID"
    UUID = "GUID"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "IdentifierScheme":
        """Look up a scheme by member name or label (case-insensitive)."""
        key = name.strip().upper()
        for scheme in cls:
            if key in (scheme.name, scheme.value):
                return scheme
        valid = ", ".join(s.name.lower() for s in cls)
        raise ValueError(f"Unknown identifier scheme: {name!r} (expected one of {valid})")

    def new_id(self) -> Identifier:
        """Generate a fresh identifier for this scheme."""
        return _GENERATORS[self]()

    def new_record(self) -> dict[str, Any]:
        """Build a single-field document keyed by a fresh identifier."""
        return {"_id": self.new_id()}


_GENERATORS: dict[IdentifierScheme, Callable[[], Identifier]] = {
    IdentifierScheme.OBJECT_ID: ObjectId,
    IdentifierScheme.UUID: uuid.uuid4,
}
