# ==============================================
# CODEC: typed values <-> single-column storage
# ==============================================
#
# Modules:
# --------
# - value_type.py    → ValueType tags, EncodedValue, EntityRef
# - type_detector.py → Primitive kind detection and raw coercion
# - value_codec.py   → ValueCodec.encode / ValueCodec.decode
#
# ==============================================

from .value_type import ValueType, EncodedValue, EntityRef
from .type_detector import TypeDetector
from .value_codec import ValueCodec

__all__ = ["ValueType", "EncodedValue", "EntityRef", "TypeDetector", "ValueCodec"]
