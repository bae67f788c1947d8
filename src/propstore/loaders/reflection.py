"""
Object property loader.

Builds properties from a live configuration object instead of a file.
Nested records are flattened into dot-notation keys while walking:

    @dataclasses.dataclass
    class Api:
        base_url: str = "https://api.example.com"
        timeout: int = 30

    @dataclasses.dataclass
    class Config:
        app_name: str = "MyApp"
        api: Api = dataclasses.field(default_factory=Api)

    ObjectPropertyLoader(Config()).load()
    # {"app_name": "MyApp", "api.base_url": "...", "api.timeout": 30}

Records are objects whose named fields can be enumerated:
1. Objects implementing DescribesProperties
2. pydantic models (declared fields, then extra fields)
3. dataclass instances
4. named tuples
5. other user-defined objects (public instance attributes)

Scalars, strings, bytes, dates, UUIDs, paths, URLs, enums and containers
are always leaves. A field set to None is left out entirely. A record with
no fields produces no key. Records are identified by capability, never by
type name.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import dataclasses as _dataclasses
import datetime as _datetime
import decimal as _decimal
import enum as _enum
import logging as _logging
import pathlib as _pathlib
import types as _types
import typing as _typing
import uuid as _uuid

import pydantic as _pydantic

import propstore.errors as errors
import propstore.flatten as flatten_module
import propstore.loaders.base as base
import propstore.settings as settings_module
import propstore.values as values

_logger = _logging.getLogger(__name__)

Fields: _typing.TypeAlias = list[tuple[str, _typing.Any]]


@_typing.runtime_checkable
class DescribesProperties(_typing.Protocol):
    """
    Explicit field description for objects that reflection cannot enumerate.

    Implement this on a configuration type to control exactly which
    name -> value pairs the object loader sees.
    """

    def describe_properties(self) -> _abc.Mapping[str, _typing.Any]: ...


# Never walked as records, whatever attributes they carry
_LEAF_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    memoryview,
    _datetime.date,
    _datetime.time,
    _datetime.timedelta,
    _decimal.Decimal,
    _uuid.UUID,
    _pathlib.PurePath,
    _enum.Enum,
    _pydantic.AnyUrl,
    values.Value,
)

_CONTAINER_TYPES: tuple[type, ...] = (_abc.Mapping, list, tuple, set, frozenset)

_NON_RECORD_TYPES: tuple[type, ...] = (
    type,
    _types.ModuleType,
    _types.FunctionType,
    _types.BuiltinFunctionType,
    _types.MethodType,
)


def _is_named_tuple(obj: _typing.Any) -> bool:
    return isinstance(obj, tuple) and hasattr(type(obj), "_fields")


def fields_of(instance: _typing.Any) -> Fields | None:
    """
    Enumerate the named fields of a record.

    Returns:
        List of (name, value) pairs, possibly empty, or None if
        ``instance`` is a leaf or container rather than a record.
    """
    if isinstance(instance, _LEAF_TYPES) or isinstance(instance, _NON_RECORD_TYPES):
        return None
    if isinstance(instance, DescribesProperties):
        return [(str(name), value) for name, value in instance.describe_properties().items()]
    if isinstance(instance, _pydantic.BaseModel):
        fields = [(name, getattr(instance, name)) for name in type(instance).model_fields]
        fields.extend((instance.model_extra or {}).items())
        return fields
    if _dataclasses.is_dataclass(instance):
        return [(field.name, getattr(instance, field.name)) for field in _dataclasses.fields(instance)]
    if _is_named_tuple(instance):
        return list(zip(type(instance)._fields, instance))
    if isinstance(instance, _CONTAINER_TYPES) or type(instance).__module__ == "builtins":
        return None
    return _public_attributes(instance)


def _public_attributes(instance: _typing.Any) -> Fields | None:
    """Public instance attributes from ``__dict__`` and ``__slots__``."""
    names: list[str] = []
    enumerable = False

    if hasattr(instance, "__dict__"):
        enumerable = True
        names.extend(vars(instance))

    for cls in type(instance).__mro__:
        slots = cls.__dict__.get("__slots__")
        if slots is None:
            continue
        enumerable = True
        names.extend([slots] if isinstance(slots, str) else slots)

    if not enumerable:
        return None

    fields: Fields = []
    seen: set[str] = set()
    for name in names:
        if name.startswith("_") or name in seen:
            continue
        seen.add(name)
        try:
            value = getattr(instance, name)
        except AttributeError:
            # Declared slot that was never assigned
            continue
        fields.append((name, value))
    return fields


class _Walker:
    """Single reflection pass with cycle and depth guarding."""

    def __init__(self, source: str, max_depth: int) -> None:
        self._source = source
        self._max_depth = max_depth
        self._active: set[int] = set()

    @_contextlib.contextmanager
    def _entering(self, obj: _typing.Any, key: str) -> _typing.Iterator[None]:
        """Track ``obj`` as being on the current path while walking it."""
        identity = id(obj)
        where = key or "<root>"
        if identity in self._active:
            raise errors.CycleError(
                self._source, where, f"reference cycle through {type(obj).__name__}"
            )
        if len(self._active) >= self._max_depth:
            raise errors.CycleError(
                self._source, where, f"nesting deeper than {self._max_depth} levels"
            )
        self._active.add(identity)
        try:
            yield
        finally:
            self._active.discard(identity)

    def walk(
        self,
        instance: _typing.Any,
        fields: Fields,
        prefix: str,
        location: str | None = None,
    ) -> values.PropertyMap:
        """
        Reflect a record's fields under ``prefix``.

        ``location`` is the record's full path from the root, used in
        diagnostics. It differs from ``prefix`` for records inside
        containers, whose keys restart at their own mapping.
        """
        if location is None:
            location = prefix
        properties: values.PropertyMap = {}

        with self._entering(instance, location):
            for name, value in fields:
                key = flatten_module.join_key(prefix, name)
                where = flatten_module.join_key(location, name)

                if value is None:
                    continue

                nested = fields_of(value)
                if nested is not None:
                    properties.update(self.walk(value, nested, key, where))
                    continue

                leaf = self._leaf(value, key, where)
                if leaf is not None:
                    properties[key] = leaf

        return properties

    def _leaf(self, value: _typing.Any, key: str, where: str) -> values.Value | None:
        try:
            return self._convert(value, where)
        except TypeError as e:
            _logger.debug("Skipping %s in %s, whole value dropped: %s", key, self._source, e)
            return None

    def _convert(self, value: _typing.Any, where: str) -> values.Value:
        if isinstance(value, _abc.Mapping):
            with self._entering(value, where):
                return values.MappingValue(
                    {
                        str(k): self._convert_item(v, flatten_module.join_key(where, str(k)))
                        for k, v in value.items()
                    }
                )
        if isinstance(value, (list, tuple, set, frozenset)):
            with self._entering(value, where):
                return values.SequenceValue(
                    tuple(
                        self._convert_item(item, f"{where}[{index}]")
                        for index, item in enumerate(value)
                    )
                )
        try:
            return values.from_python(value)
        except TypeError as e:
            raise TypeError(f"{e} (at {where})") from e

    def _convert_item(self, item: _typing.Any, where: str) -> values.Value:
        """Convert a container element; records become nested mappings."""
        if item is None:
            return values.NullValue()
        fields = fields_of(item)
        if fields is not None:
            return values.MappingValue(self.walk(item, fields, "", where))
        return self._convert(item, where)


class ObjectPropertyLoader(base.PropertyLoader):
    """
    Loads properties from a configuration object by reflection.

    Never reads files. Fails only with CycleError, when the object graph
    loops back onto itself or nests deeper than
    ``settings.reflection_max_depth``.
    """

    def __init__(
        self,
        instance: _typing.Any,
        *,
        settings: settings_module.PropertySettings | None = None,
    ) -> None:
        """
        Initialize the loader.

        Args:
            instance: The record to extract properties from.
            settings: Settings to use (defaults to PropertySettings()).
        """
        self._instance = instance
        self._settings = settings or settings_module.PropertySettings()

    def describe(self) -> str:
        return f"object {type(self._instance).__qualname__}"

    def load(self) -> values.PropertyMap:
        fields = fields_of(self._instance)
        if not fields:
            _logger.debug("No fields to reflect on %s", self.describe())
            return {}

        walker = _Walker(self.describe(), self._settings.reflection_max_depth)
        properties = walker.walk(self._instance, fields, "")
        _logger.debug("Reflected %d properties from %s", len(properties), self.describe())
        return properties
