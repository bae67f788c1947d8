"""
The per-consumer property store.

A PropertyStore accumulates the output of successive loaders. Applying a
loader overwrites the keys it produces and leaves every other key alone,
so the order loaders are applied in decides precedence:

    store.apply({"message": "from A", "count": 10})
    store.apply({"message": "from B", "timeout": 4})
    # {"message": "from B", "count": 10, "timeout": 4}

Values are replaced whole: applying ``{"items": ["B"]}`` over
``{"items": ["A"]}`` leaves ``["B"]``, never a concatenation.

Thread safety: NOT thread-safe for concurrent writes.
- Multiple threads calling ``apply`` concurrently: UNSAFE
- One thread applying while another reads: UNSAFE
- Multiple threads reading once all loaders are applied: SAFE
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import types as _types
import typing as _typing

import propstore.keys as property_keys
import propstore.values as values

_logger = _logging.getLogger(__name__)

KeyLike: _typing.TypeAlias = str | property_keys.PropertyKey


class PropertyStore:
    """
    Mutable mapping of property keys to Values, with typed lookups.

    Besides the values, the store remembers which source last set each
    key (provenance), for diagnostics.
    """

    def __init__(self) -> None:
        self._properties: values.PropertyMap = {}
        self._sources: dict[str, str | None] = {}

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    def apply(
        self,
        properties: _abc.Mapping[KeyLike, _typing.Any],
        *,
        source: str | None = None,
    ) -> None:
        """
        Merge loader output into the store.

        Every key in ``properties`` overwrites the existing entry; keys not
        in ``properties`` are untouched. Plain Python values are converted
        with values.from_python().

        Args:
            properties: Flat mapping produced by a loader.
            source: Description of where the properties came from.

        Raises:
            TypeError: If a value cannot be converted to a Value. The store
                is left unchanged.
        """
        converted = {
            property_keys.raw(key): values.from_python(value)
            for key, value in properties.items()
        }

        overwritten = sum(1 for key in converted if key in self._properties)
        for key, value in converted.items():
            self._properties[key] = value
            self._sources[key] = source

        _logger.debug(
            "Applied %d properties from %s (%d new, %d overwritten)",
            len(converted),
            source or "unnamed source",
            len(converted) - overwritten,
            overwritten,
        )

    def reset(self) -> None:
        """Remove every property."""
        self._properties.clear()
        self._sources.clear()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(
        self,
        key: KeyLike,
        expected: _typing.Any = None,
        *,
        default: _typing.Any = None,
    ) -> _typing.Any:
        """
        Look a property up, narrowed to the requested type.

        Args:
            key: Raw dotted key or PropertyKey.
            expected: Type to narrow to (e.g. ``int``, ``list[str]``,
                ``dict[str, int]``). None returns the value as plain Python.
            default: Returned when the key is missing or the stored value
                does not have the expected shape.

        Returns:
            The narrowed value, or ``default``. Never raises for a missing
            key or a type mismatch.
        """
        value = self._properties.get(property_keys.raw(key))
        if value is None:
            return default
        result = values.narrow(value, expected)
        if result is None:
            return default
        return result

    def get_value(self, key: KeyLike) -> values.Value | None:
        """Return the stored Value itself, or None if the key is missing."""
        return self._properties.get(property_keys.raw(key))

    def source_of(self, key: KeyLike) -> str | None:
        """Describe the source that last set ``key`` (None if unknown)."""
        return self._sources.get(property_keys.raw(key))

    def snapshot(self) -> _abc.Mapping[str, values.Value]:
        """Read-only copy of the current properties."""
        return _types.MappingProxyType(dict(self._properties))

    def to_dict(self) -> dict[str, _typing.Any]:
        """Current properties as plain Python values."""
        return {key: value.to_python() for key, value in self._properties.items()}

    def keys(self) -> _abc.KeysView[str]:
        return self._properties.keys()

    def items(self) -> _abc.ItemsView[str, values.Value]:
        return self._properties.items()

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (str, property_keys.PropertyKey)):
            return property_keys.raw(key) in self._properties
        return False

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._properties)

    def __repr__(self) -> str:
        return f"PropertyStore({len(self._properties)} properties)"
