# ==============================================
# Tests for TypeDetector
# ==============================================

from enum import Enum

import pytest

from modelmeta.codec.type_detector import TypeDetector
from modelmeta.codec.value_type import ValueType
from modelmeta.errors import DecodeError


class Color(Enum):
    RED = "red"


class TestDetect:
    def test_bool_before_int(self):
        assert TypeDetector.detect(True) is ValueType.BOOLEAN
        assert TypeDetector.detect(1) is ValueType.INTEGER

    def test_other_primitives(self):
        assert TypeDetector.detect(1.0) is ValueType.FLOAT
        assert TypeDetector.detect("x") is ValueType.STRING
        assert TypeDetector.detect(None) is ValueType.NULL

    def test_non_primitive(self):
        assert TypeDetector.detect([1]) is None
        assert TypeDetector.detect(object()) is None

    def test_enum_is_text_like(self):
        assert TypeDetector.is_text_like(Color.RED)
        assert TypeDetector.to_raw(Color.RED, ValueType.STRING) == "red"


class TestCoerce:
    def test_integer_passthrough(self):
        assert TypeDetector.coerce(5, ValueType.INTEGER) == 5

    def test_boolean_from_int(self):
        assert TypeDetector.coerce(0, ValueType.BOOLEAN) is False

    def test_boolean_rejects_garbage(self):
        with pytest.raises(DecodeError):
            TypeDetector.coerce("maybe", ValueType.BOOLEAN)

    def test_float_rejects_garbage(self):
        with pytest.raises(DecodeError):
            TypeDetector.coerce("abc", ValueType.FLOAT)

    def test_string_from_number(self):
        assert TypeDetector.coerce(12, ValueType.STRING) == "12"
