"""
Normalization of example, default and enum payloads.

Canonical values are plain JSON shapes: None, bool, Decimal, str, list and
dict with string keys. Every number becomes a `decimal.Decimal` so that
precision survives until the document is written out.
"""

from decimal import Decimal
from typing import Any, Optional

from openapijsons.messages import JsonPath, Message, MessageListener


class _Absent:
    """Marker for 'no value', distinct from a JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'ABSENT'


ABSENT = _Absent()


class _UnsupportedValue(Exception):

    def __init__(self, value: Any):
        super().__init__(type(value).__name__)
        self.value = value


def normalize_value(value: Any, path: JsonPath, listener: Optional[MessageListener] = None) -> Any:
    """
    Convert a parsed example/default/enum value into a canonical value.

    Args:
        value: The value as produced by the JSON or YAML parser.
        path: Location used for the warning if the value cannot be converted.
        listener: Receives the warning.

    Returns:
        The canonical value, or ABSENT if the value has an unsupported type.
    """
    try:
        return _canonical(value)
    except _UnsupportedValue as e:
        if listener is not None:
            listener(Message.warning(
                f"value ignored, unsupported example/default type: {type(e.value).__name__}", path))
        return ABSENT


def _canonical(value: Any) -> Any:
    if value is None:
        return None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise _UnsupportedValue(value)
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float('inf'), float('-inf')):
            raise _UnsupportedValue(value)
        return Decimal(repr(value))
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise _UnsupportedValue(key)
            result[key] = _canonical(item)
        return result
    raise _UnsupportedValue(value)
