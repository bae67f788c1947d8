"""
Property loaders.

Each loader turns one kind of source into a flat mapping of property keys
to Values:

- JsonPropertyLoader: JSON with //, /* */ and /** */ comments
- PlistPropertyLoader: XML or binary property lists
- TomlPropertyLoader: TOML, nested tables flattened to dot keys
- YamlPropertyLoader: YAML (safe loader)
- MappingPropertyLoader: in-memory mappings
- ObjectPropertyLoader: configuration objects, by reflection
"""

from propstore.loaders.base import PropertyLoader, ResourcePropertyLoader
from propstore.loaders.json_loader import JsonPropertyLoader, strip_comments
from propstore.loaders.mapping_loader import MappingPropertyLoader
from propstore.loaders.plist_loader import PlistPropertyLoader
from propstore.loaders.reflection import DescribesProperties, ObjectPropertyLoader
from propstore.loaders.toml_loader import TomlPropertyLoader
from propstore.loaders.yaml_loader import YamlPropertyLoader

__all__ = [
    "DescribesProperties",
    "JsonPropertyLoader",
    "MappingPropertyLoader",
    "ObjectPropertyLoader",
    "PlistPropertyLoader",
    "PropertyLoader",
    "ResourcePropertyLoader",
    "TomlPropertyLoader",
    "YamlPropertyLoader",
    "strip_comments",
]
