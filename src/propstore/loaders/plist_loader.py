"""
Property-list loader.

Reads XML and binary property lists with plistlib. Native ``<date>`` and
``<data>`` leaves become TimestampValue and BytesValue.
"""

from __future__ import annotations

import plistlib as _plistlib
import typing as _typing
import xml.parsers.expat as _expat

import propstore.constants as constants
import propstore.loaders.base as base


class PlistPropertyLoader(base.ResourcePropertyLoader):
    """
    Loads properties from a property-list resource.

    The top level must be a ``<dict>``. No comment stripping is done and
    nested dictionaries are kept whole unless ``flatten=True``.
    """

    extension = constants.PLIST_EXTENSION
    format_name = "Plist"

    def _parse(self, data: bytes) -> _typing.Any:
        try:
            return _plistlib.loads(data)
        except (
            _plistlib.InvalidFileException,
            _expat.ExpatError,
            ValueError,
            AttributeError,  # unparseable <date>
        ) as e:
            raise self._parse_failed(e) from e
