"""
Typed property keys.

A PropertyKey wraps the dotted string used to look a property up in a
PropertyStore. Modules declare their keys once as constants and use them
everywhere instead of repeating string literals:

    class ApiKeys:
        BASE_URL = PropertyKey("api.base_url")
        TIMEOUT = PropertyKey("api.timeout")

    timeout = resolver.property_for_key(ApiKeys.TIMEOUT, int)

A key built ad hoc from the same string is the same key: equality and
hashing depend only on the raw string.
"""

from __future__ import annotations

import dataclasses as _dataclasses


@_dataclasses.dataclass(frozen=True, slots=True)
class PropertyKey:
    """Hashable, string-backed handle for a property."""

    raw_value: str

    def __post_init__(self) -> None:
        if not isinstance(self.raw_value, str):
            raise TypeError(
                f"PropertyKey requires a str, got {type(self.raw_value).__name__}"
            )
        if not self.raw_value:
            raise ValueError("PropertyKey cannot be empty")

    def __str__(self) -> str:
        return self.raw_value

    def __repr__(self) -> str:
        return f'PropertyKey("{self.raw_value}")'

    @classmethod
    def coerce(cls, key: str | PropertyKey) -> PropertyKey:
        """Return ``key`` as a PropertyKey, wrapping plain strings."""
        if isinstance(key, PropertyKey):
            return key
        return cls(key)


def raw(key: str | PropertyKey) -> str:
    """Return the raw string for a lookup argument."""
    if isinstance(key, PropertyKey):
        return key.raw_value
    return key
