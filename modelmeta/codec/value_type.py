# ==============================================
# Value Types (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that describe the OUTPUT of encoding: the type
#   tag written next to every stored value, the (tag, raw) pair
#   itself, and the parsed form of a reference string.
#
# ENUMS:
# ------
# - ValueType(Enum): BOOLEAN, INTEGER, FLOAT, STRING, NULL,
#                    ARRAY, OBJECT, REFERENCE, DATETIME
#
# CLASSES:
# --------
# - EncodedValue (dataclass)
#     - type: ValueType
#     - raw: str | None         → What goes into the single value column
#
# - EntityRef (dataclass)
#     - type_name: str          → Entity type identifier, e.g. "User"
#     - entity_id: Any          → Primary key of the referenced entity
#
#     Methods:
#     --------
#     - to_raw() -> str                       → "User#7"
#     - from_raw(raw: str) -> EntityRef       (classmethod)
#
# ==============================================

from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional

from modelmeta.errors import DecodeError


class ValueType(Enum):
    """
    Discriminator stored alongside every metadata value.

    - Primitives (BOOLEAN, INTEGER, FLOAT, STRING, NULL) are stored as text
    - ARRAY and OBJECT are stored as JSON
    - REFERENCE is stored as "<type>#<id>"
    - DATETIME is stored as ISO-8601 text
    """
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    REFERENCE = "reference"
    DATETIME = "datetime"

    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional["ValueType"]:
        """
        Map a stored tag back to a ValueType.

        Returns None for missing or unrecognized tags. The legacy
        "model" tag is read as REFERENCE.
        """
        if not tag:
            return None
        if tag == "model":
            return cls.REFERENCE
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def is_primitive(self) -> bool:
        return self in PRIMITIVE_TYPES


PRIMITIVE_TYPES = frozenset({
    ValueType.BOOLEAN,
    ValueType.INTEGER,
    ValueType.FLOAT,
    ValueType.STRING,
    ValueType.NULL,
})


@dataclass(frozen=True)
class EncodedValue:
    """A (type tag, raw column value) pair ready for storage."""
    type: ValueType
    raw: Optional[str]


REFERENCE_SEPARATOR = "#"


@dataclass(frozen=True)
class EntityRef:
    """Parsed form of a `"<type>#<id>"` reference string."""
    type_name: str
    entity_id: Any

    def to_raw(self) -> str:
        return f"{self.type_name}{REFERENCE_SEPARATOR}{self.entity_id}"

    @classmethod
    def from_raw(cls, raw: str) -> "EntityRef":
        """
        Split a stored reference on the first '#'.

        Ids written by an integer key ("7") come back as int. Anything
        that would not survive the round trip through int, such as
        "007", stays the original string.
        """
        if not isinstance(raw, str) or REFERENCE_SEPARATOR not in raw:
            raise DecodeError(f"Malformed reference {raw!r}: expected '<type>#<id>'")
        type_name, entity_id = raw.split(REFERENCE_SEPARATOR, 1)
        if not type_name or not entity_id:
            raise DecodeError(f"Malformed reference {raw!r}: expected '<type>#<id>'")
        if entity_id.isascii() and entity_id.isdigit() and str(int(entity_id)) == entity_id:
            return cls(type_name, int(entity_id))
        return cls(type_name, entity_id)
