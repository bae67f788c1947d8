"""
Flattening of nested property mappings into dot-notation keys.

Example:
    Input:  {"api": {"base_url": "https://example.com", "timeout": 30}}
    Output: {"api.base_url": "https://example.com", "api.timeout": 30}

Only MappingValues are descended into. Sequences are kept whole, so a list
of tables stays a single SequenceValue under its key.
"""

from __future__ import annotations

import collections.abc as _abc

import propstore.constants as constants
import propstore.values as values


def join_key(prefix: str, name: str) -> str:
    """Join a key onto a dotted prefix (an empty prefix adds nothing)."""
    return f"{prefix}{constants.KEY_SEPARATOR}{name}" if prefix else name


def flatten(
    mapping: _abc.Mapping[str, values.Value],
    prefix: str = "",
) -> values.PropertyMap:
    """
    Recursively flatten nested MappingValues into dot-notation keys.

    Args:
        mapping: The mapping to flatten.
        prefix: Dotted prefix for every produced key (used in recursion).

    Returns:
        New flat mapping. If two paths produce the same key (e.g. a literal
        ``"a.b"`` key next to ``{"a": {"b": ...}}``), the one visited last
        wins. An empty nested mapping produces no key at all.
    """
    result: values.PropertyMap = {}

    for key, value in mapping.items():
        new_key = join_key(prefix, key)

        if isinstance(value, values.MappingValue):
            result.update(flatten(value.entries, prefix=new_key))
        else:
            result[new_key] = value

    return result
