import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from modelmeta.codec.value_type import ValueType
from modelmeta.errors import DecodeError


class TypeDetector:
    BOOL_TRUE_VARIANTS = {"1", "true", "yes"}
    BOOL_FALSE_VARIANTS = {"0", "false", "no", ""}

    INTEGRAL_FLOAT_PATTERN = re.compile(r'^[+-]?\d+\.0*$')

    DATETIME_FORMATS = [
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S.%f",
    ]

    # Values with no structured form that are stored as their text
    TEXT_LIKE_TYPES = (Decimal, UUID, bytes)

    @classmethod
    def detect(cls, value: Any) -> Optional[ValueType]:
        """
        Return the primitive kind of `value`, or None when it is not
        one of boolean, integer, float, string or null.
        """
        if value is None:
            return ValueType.NULL
        
        if isinstance(value, bool):
            return ValueType.BOOLEAN
        
        if isinstance(value, int):
            return ValueType.INTEGER
        
        if isinstance(value, float):
            return ValueType.FLOAT
        
        if isinstance(value, str):
            return ValueType.STRING
        
        return None

    @classmethod
    def is_text_like(cls, value: Any) -> bool:
        return isinstance(value, cls.TEXT_LIKE_TYPES) or isinstance(value, Enum)

    @classmethod
    def to_raw(cls, value: Any, value_type: ValueType) -> Optional[str]:
        """Render a primitive as the text stored in the value column."""
        if value_type is ValueType.NULL:
            return None
        if value_type is ValueType.BOOLEAN:
            return "1" if value else "0"
        if value_type is ValueType.FLOAT:
            return repr(float(value))
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    @classmethod
    def coerce(cls, raw: Any, target_type: ValueType) -> Any:
        """
        Coerce a stored raw value into `target_type`.

        Raises:
            DecodeError: raw text is not valid for the target kind
        """
        if target_type is ValueType.NULL:
            return None
        
        if target_type is ValueType.STRING:
            return raw if raw is None or isinstance(raw, str) else str(raw)
        
        if target_type is ValueType.BOOLEAN:
            if isinstance(raw, (bool, int)):
                return bool(raw)
            text = "" if raw is None else str(raw).strip().lower()
            if text in cls.BOOL_TRUE_VARIANTS:
                return True
            if text in cls.BOOL_FALSE_VARIANTS:
                return False
            raise DecodeError(f"Cannot read {raw!r} as boolean")
        
        if target_type is ValueType.INTEGER:
            if isinstance(raw, int) and not isinstance(raw, bool):
                return raw
            text = str(raw).strip()
            try:
                return int(text)
            except (ValueError, TypeError):
                if cls.INTEGRAL_FLOAT_PATTERN.match(text):
                    return int(float(text))
                raise DecodeError(f"Cannot read {raw!r} as integer")
        
        if target_type is ValueType.FLOAT:
            try:
                return float(raw)
            except (ValueError, TypeError):
                raise DecodeError(f"Cannot read {raw!r} as float")
        
        if target_type is ValueType.DATETIME:
            if isinstance(raw, (datetime, date)):
                return raw
            parsed = cls._parse_datetime(str(raw).strip())
            if parsed is None:
                raise DecodeError(f"Cannot read {raw!r} as datetime")
            return parsed
        
        return raw

    @classmethod
    def _parse_datetime(cls, value: str) -> Optional[date]:
        # A bare date round-trips as a date, not a midnight datetime
        if len(value) == 10:
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
        for fmt in cls.DATETIME_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        return None
