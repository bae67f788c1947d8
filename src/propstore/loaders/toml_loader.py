"""
TOML property loader.

TOML expresses hierarchy with tables, so nested tables are always flattened
into dot-notation keys:

    [api]
    base_url = "https://api.example.com"

    [packages.unlimited]
    cost = 99.99

loads as ``{"api.base_url": ..., "packages.unlimited.cost": 99.99}``.
Arrays, including arrays of tables, stay whole.
"""

from __future__ import annotations

import os as _os
import tomllib as _tomllib
import typing as _typing

import propstore.constants as constants
import propstore.loaders.base as base
import propstore.resources as resources
import propstore.settings as settings_module


class TomlPropertyLoader(base.ResourcePropertyLoader):
    """Loads properties from a TOML resource, flattening nested tables."""

    extension = constants.TOML_EXTENSION
    format_name = "TOML"
    container_name = "table"

    def __init__(
        self,
        name: str | None = None,
        *,
        bundle: resources.Bundle | None = None,
        path: str | _os.PathLike[str] | None = None,
        url: str | None = None,
        settings: settings_module.PropertySettings | None = None,
    ) -> None:
        super().__init__(
            name,
            bundle=bundle,
            path=path,
            url=url,
            flatten=True,
            settings=settings,
        )

    def _parse(self, data: bytes) -> _typing.Any:
        text = self._decode(data)
        try:
            return _tomllib.loads(text)
        except _tomllib.TOMLDecodeError as e:
            raise self._parse_failed(e) from e
