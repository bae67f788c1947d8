"""
The value model shared by every loader and the property store.

A Value is one of a closed set of shapes:

- NullValue, BoolValue, IntegerValue, FloatValue, StringValue
- SequenceValue (tuple of Values), MappingValue (read-only str -> Value)
- TimestampValue (datetime, date or time), BytesValue

Loaders convert what they parse with from_python(); the store keeps Values
and narrows them back to plain Python on lookup with narrow(). All Values
are immutable.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import datetime as _datetime
import decimal as _decimal
import enum as _enum
import pathlib as _pathlib
import plistlib as _plistlib
import types as _types
import typing as _typing
import uuid as _uuid

import pydantic as _pydantic

PropertyMap: _typing.TypeAlias = dict[str, "Value"]
"""Flat mapping of property keys to Values, as returned by loaders."""

Timestamp: _typing.TypeAlias = _datetime.datetime | _datetime.date | _datetime.time


class ValueKind(_enum.Enum):
    """Tag identifying the shape of a Value."""

    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    TIMESTAMP = "timestamp"
    BYTES = "bytes"


class Value:
    """Base class of all value shapes."""

    __slots__ = ()

    kind: _typing.ClassVar[ValueKind]

    def to_python(self) -> _typing.Any:
        """Return the equivalent plain Python object."""
        raise NotImplementedError


@_dataclasses.dataclass(frozen=True, slots=True)
class NullValue(Value):
    """An explicit null (JSON ``null``, YAML ``~``)."""

    kind = ValueKind.NULL

    def to_python(self) -> None:
        return None


@_dataclasses.dataclass(frozen=True, slots=True)
class BoolValue(Value):
    value: bool

    kind = ValueKind.BOOL

    def to_python(self) -> bool:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class IntegerValue(Value):
    value: int

    kind = ValueKind.INTEGER

    def to_python(self) -> int:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class FloatValue(Value):
    value: float

    kind = ValueKind.FLOAT

    def to_python(self) -> float:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class StringValue(Value):
    value: str

    kind = ValueKind.STRING

    def to_python(self) -> str:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class TimestampValue(Value):
    """A date, time or datetime (TOML dates, plist ``<date>``, YAML timestamps)."""

    value: Timestamp

    kind = ValueKind.TIMESTAMP

    def to_python(self) -> Timestamp:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class BytesValue(Value):
    """Binary data (plist ``<data>``, YAML ``!!binary``)."""

    value: bytes

    kind = ValueKind.BYTES

    def to_python(self) -> bytes:
        return self.value


@_dataclasses.dataclass(frozen=True, slots=True)
class SequenceValue(Value):
    """An ordered sequence of Values. Never flattened element-wise."""

    items: tuple[Value, ...]

    kind = ValueKind.SEQUENCE

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def to_python(self) -> list[_typing.Any]:
        return [item.to_python() for item in self.items]


@_dataclasses.dataclass(frozen=True, slots=True)
class MappingValue(Value):
    """A nested mapping of string keys to Values (read-only)."""

    entries: _abc.Mapping[str, Value]

    kind = ValueKind.MAPPING

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", _types.MappingProxyType(dict(self.entries)))

    def to_python(self) -> dict[str, _typing.Any]:
        return {key: value.to_python() for key, value in self.entries.items()}


# =============================================================================
# Conversion from plain Python
# =============================================================================

# Leaf objects stored by their string form
_STRING_LIKE = (_uuid.UUID, _pathlib.PurePath, _pydantic.AnyUrl)


def from_python(obj: _typing.Any) -> Value:
    """
    Convert a plain Python object to a Value.

    Args:
        obj: The object to convert. Mappings and sequences are converted
            recursively; mapping keys are coerced with ``str()``.

    Returns:
        The equivalent Value. An existing Value is returned unchanged.

    Raises:
        TypeError: If ``obj`` (or something nested in it) has no Value shape,
            or if a container contains itself (e.g. built from YAML anchors).
    """
    return _from_python(obj, set())


def _from_python(obj: _typing.Any, active: set[int]) -> Value:
    """from_python() with the ids of the containers on the current path."""
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NullValue()
    # Enum before bool/int/str: IntEnum and StrEnum members are also ints/strs
    if isinstance(obj, _enum.Enum):
        return _from_python(obj.value, active)
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntegerValue(int(obj))
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, _decimal.Decimal):
        return FloatValue(float(obj))
    if isinstance(obj, str):
        return StringValue(str(obj))
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BytesValue(bytes(obj))
    if isinstance(obj, (_datetime.datetime, _datetime.date, _datetime.time)):
        return TimestampValue(obj)
    if isinstance(obj, _STRING_LIKE):
        return StringValue(str(obj))
    if isinstance(obj, _plistlib.UID):
        return IntegerValue(obj.data)
    if isinstance(obj, (_abc.Mapping, list, tuple, set, frozenset)):
        identity = id(obj)
        if identity in active:
            raise TypeError(f"reference cycle through {type(obj).__name__}")
        active.add(identity)
        try:
            if isinstance(obj, _abc.Mapping):
                return MappingValue(
                    {str(key): _from_python(value, active) for key, value in obj.items()}
                )
            return SequenceValue(tuple(_from_python(item, active) for item in obj))
        finally:
            active.discard(identity)
    raise TypeError(f"cannot convert {type(obj).__name__} to a property value")


def from_mapping(mapping: _abc.Mapping[_typing.Any, _typing.Any]) -> PropertyMap:
    """Convert every entry of a mapping, keeping its (stringified) keys."""
    return {str(key): from_python(value) for key, value in mapping.items()}


# =============================================================================
# Narrowing to a requested Python type
# =============================================================================


class _NoMatch:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<NO MATCH>"


_NO_MATCH = _NoMatch()

_SCALAR_TARGETS: dict[type, type[Value]] = {
    bool: BoolValue,
    int: IntegerValue,
    float: FloatValue,
    str: StringValue,
    bytes: BytesValue,
}

_TIMESTAMP_TARGETS = (_datetime.datetime, _datetime.date, _datetime.time)


def narrow(value: Value, expected: _typing.Any = None) -> _typing.Any:
    """
    Narrow a Value to the Python shape a caller asked for.

    Supported targets:
        None, object, typing.Any: any value, returned as plain Python
        bool, int, float, str, bytes: the matching scalar (no widening,
            an integer never narrows to float, a bool never to int)
        datetime.datetime / date / time: a matching timestamp
        list, tuple, Sequence, and their parametrized forms: a sequence,
            with every element narrowed to the element type
        dict, Mapping, and their parametrized forms: a nested mapping
        A | B: the first member that matches
        a Value subclass: the Value itself, if it is of that class

    Returns:
        The narrowed value, or None if the shapes do not match.
    """
    result = _narrow(value, expected)
    if result is _NO_MATCH:
        return None
    return result


def _narrow(value: Value, expected: _typing.Any) -> _typing.Any:
    if expected is None or expected is _typing.Any or expected is object:
        return value.to_python()

    origin = _typing.get_origin(expected)
    args = _typing.get_args(expected)

    if origin is _typing.Union or origin is _types.UnionType:
        for member in args:
            result = _narrow(value, member)
            if result is not _NO_MATCH:
                return result
        return _NO_MATCH

    target = origin if origin is not None else expected
    if not isinstance(target, type):
        return _NO_MATCH

    if issubclass(target, Value):
        return value if isinstance(value, target) else _NO_MATCH

    value_class = _SCALAR_TARGETS.get(target)
    if value_class is not None:
        return value.to_python() if type(value) is value_class else _NO_MATCH

    if target in _TIMESTAMP_TARGETS:
        if isinstance(value, TimestampValue) and isinstance(value.value, target):
            return value.value
        return _NO_MATCH

    if target in (list, tuple, _abc.Sequence):
        if not isinstance(value, SequenceValue):
            return _NO_MATCH
        return _narrow_sequence(value, target, args)

    if target in (dict, _abc.Mapping):
        if not isinstance(value, MappingValue):
            return _NO_MATCH
        return _narrow_mapping(value, args)

    return _NO_MATCH


def _narrow_sequence(
    value: SequenceValue,
    target: type,
    args: tuple[_typing.Any, ...],
) -> _typing.Any:
    if target is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        # Fixed-length tuple: tuple[int, str]
        if len(args) != len(value.items):
            return _NO_MATCH
        element_types: _abc.Iterable[_typing.Any] = args
    else:
        element_type = args[0] if args else None
        element_types = [element_type] * len(value.items)

    narrowed = []
    for item, element_type in zip(value.items, element_types):
        result = _narrow(item, element_type)
        if result is _NO_MATCH:
            return _NO_MATCH
        narrowed.append(result)

    if target is tuple:
        return tuple(narrowed)
    return narrowed


def _narrow_mapping(
    value: MappingValue,
    args: tuple[_typing.Any, ...],
) -> _typing.Any:
    if args:
        key_type, value_type = args
        if key_type not in (str, _typing.Any, object):
            return _NO_MATCH
    else:
        value_type = None

    narrowed = {}
    for key, item in value.entries.items():
        result = _narrow(item, value_type)
        if result is _NO_MATCH:
            return _NO_MATCH
        narrowed[key] = result
    return narrowed
