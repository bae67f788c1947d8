"""
YAML property loader.

Parses with PyYAML's safe loader, so only plain data types are produced
(YAML timestamps become TimestampValue, ``!!binary`` becomes BytesValue).
An empty document loads as no properties.
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml

import propstore.constants as constants
import propstore.loaders.base as base


class YamlPropertyLoader(base.ResourcePropertyLoader):
    """
    Loads properties from a YAML resource.

    The top level must be a mapping. Nested mappings are kept whole unless
    the loader is created with ``flatten=True``.
    """

    extension = constants.YAML_EXTENSION
    format_name = "YAML"
    container_name = "mapping"

    def _parse(self, data: bytes) -> _typing.Any:
        text = self._decode(data)
        try:
            parsed = _yaml.safe_load(text)
        except _yaml.YAMLError as e:
            raise self._parse_failed(e) from e
        if parsed is None:
            return {}
        return parsed
