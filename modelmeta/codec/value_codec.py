# ==============================================
# ValueCodec
# ==============================================
#
# PURPOSE:
#   Turn any runtime value into a (type tag, raw text) pair that
#   fits in one storage column, and turn the pair back into the
#   typed value on read.
#
# ENCODE PRIORITY (first match wins):
# -----------------------------------
#   1. list / tuple / set / dict        → ARRAY      JSON text
#   2. Entity                           → REFERENCE  "<type>#<id>"
#                                         (unsaved entity → InvalidReferenceError)
#   3. datetime / date                  → DATETIME   ISO-8601 text
#   4. bool / int / float / str / None  → matching primitive tag
#   5. Decimal / UUID / Enum / bytes    → STRING     text form
#   6. any other object                 → OBJECT     JSON of to_dict(),
#                                                    dataclass fields or __dict__
#      (objects with none of those fall back to STRING)
#
# DECODE:
# -------
#   ARRAY / OBJECT  → json.loads (DecodeError on corrupt text)
#   REFERENCE       → EntityRegistry.find (NotFoundError if gone)
#   primitives      → TypeDetector.coerce
#   missing tag     → raw value returned untouched
#
# ==============================================

import dataclasses
import json
from datetime import date
from typing import Any, Optional, Union

from modelmeta.codec.type_detector import TypeDetector
from modelmeta.codec.value_type import EncodedValue, EntityRef, ValueType
from modelmeta.entity import Entity
from modelmeta.errors import DecodeError, EncodeError, InvalidReferenceError
from modelmeta.registry import EntityRegistry

COMPOSITE_TYPES = (list, tuple, set, frozenset, dict)


class ValueCodec:
    def __init__(self, registry: Optional[EntityRegistry] = None):
        self.registry = registry if registry is not None else EntityRegistry()

    # ------------------------------------------
    # Encoding
    # ------------------------------------------

    def encode(self, value: Any) -> EncodedValue:
        if isinstance(value, COMPOSITE_TYPES):
            return EncodedValue(ValueType.ARRAY, self._dumps(value))

        if isinstance(value, Entity):
            return EncodedValue(ValueType.REFERENCE, self._reference(value))

        if isinstance(value, date):
            return EncodedValue(ValueType.DATETIME, value.isoformat())

        primitive = TypeDetector.detect(value)
        if primitive is not None:
            return EncodedValue(primitive, TypeDetector.to_raw(value, primitive))

        if TypeDetector.is_text_like(value):
            return EncodedValue(ValueType.STRING, TypeDetector.to_raw(value, ValueType.STRING))

        structure = self._structure(value)
        if structure is None:
            return EncodedValue(ValueType.STRING, str(value))
        return EncodedValue(ValueType.OBJECT, self._dumps(structure))

    def _reference(self, entity: Entity) -> str:
        if not entity.exists:
            raise InvalidReferenceError(
                f"Cannot reference unsaved {entity.entity_type()}: it has no id yet"
            )
        return EntityRef(entity.entity_type(), entity.id).to_raw()

    def _structure(self, value: Any) -> Optional[dict]:
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return dataclasses.asdict(value)
        if hasattr(value, "__dict__"):
            return {k: v for k, v in vars(value).items() if not k.startswith("_")}
        return None

    def _dumps(self, value: Any) -> str:
        try:
            return json.dumps(value, default=self._json_default, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Value is not JSON serializable: {exc}") from exc

    def _json_default(self, value: Any) -> Any:
        # Nested values inside arrays/objects
        if isinstance(value, (set, frozenset)):
            return list(value)
        if isinstance(value, Entity):
            return self._reference(value)
        if isinstance(value, date):
            return value.isoformat()
        if TypeDetector.is_text_like(value):
            return TypeDetector.to_raw(value, ValueType.STRING)
        structure = self._structure(value)
        if structure is None:
            raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
        return structure

    # ------------------------------------------
    # Decoding
    # ------------------------------------------

    def decode(self, type_tag: Union[ValueType, str, None], raw: Any) -> Any:
        value_type = type_tag if isinstance(type_tag, ValueType) else ValueType.parse(type_tag)
        if value_type is None:
            return raw

        if value_type in (ValueType.ARRAY, ValueType.OBJECT):
            try:
                return json.loads(raw)
            except (TypeError, ValueError) as exc:
                raise DecodeError(f"Corrupt {value_type.value} payload: {exc}") from exc

        if value_type is ValueType.REFERENCE:
            return self.resolve(EntityRef.from_raw(raw))

        return TypeDetector.coerce(raw, value_type)

    def resolve(self, ref: EntityRef) -> Any:
        return self.registry.find(ref.type_name, ref.entity_id)
