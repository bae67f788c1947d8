"""
propstore - configuration property store

Loads key/value configuration from JSON, property lists, TOML, YAML,
in-memory mappings and configuration objects, normalizes every source to
dotted keys, and merges successive loads with last-writer-wins precedence.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("propstore")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "propstore Contributors"

from propstore.errors import (  # noqa: E402
    CycleError,
    FormatInvalidError,
    ParseFailedError,
    PropertyLoaderError,
    ResourceMissingError,
    ResourceUnreadableError,
)
from propstore.keys import PropertyKey  # noqa: E402
from propstore.loaders import (  # noqa: E402
    DescribesProperties,
    JsonPropertyLoader,
    MappingPropertyLoader,
    ObjectPropertyLoader,
    PlistPropertyLoader,
    PropertyLoader,
    TomlPropertyLoader,
    YamlPropertyLoader,
)
from propstore.resolver import PropertyResolver  # noqa: E402
from propstore.resources import Bundle  # noqa: E402
from propstore.settings import PropertySettings  # noqa: E402
from propstore.store import PropertyStore  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "Bundle",
    "CycleError",
    "DescribesProperties",
    "FormatInvalidError",
    "JsonPropertyLoader",
    "MappingPropertyLoader",
    "ObjectPropertyLoader",
    "ParseFailedError",
    "PlistPropertyLoader",
    "PropertyKey",
    "PropertyLoader",
    "PropertyLoaderError",
    "PropertyResolver",
    "PropertySettings",
    "PropertyStore",
    "ResourceMissingError",
    "ResourceUnreadableError",
    "TomlPropertyLoader",
    "YamlPropertyLoader",
]
