"""
In-memory mapping loader.

Useful for programmatic overrides layered on top of file-based sources,
e.g. values computed at startup or taken from command-line flags:

    resolver.apply_property_loader(JsonPropertyLoader("properties"))
    resolver.apply_property_loader(MappingPropertyLoader({"api": {"timeout": 5}}))
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import propstore.errors as errors
import propstore.flatten as flatten_module
import propstore.loaders.base as base
import propstore.values as values

_logger = _logging.getLogger(__name__)


class MappingPropertyLoader(base.PropertyLoader):
    """Loads properties from a plain Python mapping."""

    format_name = "mapping"

    def __init__(
        self,
        mapping: _abc.Mapping[str, _typing.Any],
        *,
        flatten: bool = True,
        name: str | None = None,
    ) -> None:
        """
        Initialize the loader.

        Args:
            mapping: Properties to load. Copied (shallowly) on construction.
            flatten: Flatten nested mappings into dot-notation keys.
            name: Optional label used in diagnostics and provenance.
        """
        self._mapping = dict(mapping)
        self._flatten = flatten
        self._name = name

    def describe(self) -> str:
        if self._name:
            return f"mapping {self._name}"
        return "mapping"

    def load(self) -> values.PropertyMap:
        try:
            properties = values.from_mapping(self._mapping)
        except TypeError as e:
            raise errors.FormatInvalidError(self.describe(), self.format_name, str(e)) from e

        if self._flatten:
            properties = flatten_module.flatten(properties)

        _logger.debug("Loaded %d properties from %s", len(properties), self.describe())
        return properties
