"""
Shared constants for propstore.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Key construction
KEY_SEPARATOR = "."
"""Separator used to join nested keys (e.g. ``api.timeout``)."""

# Settings
ENV_PREFIX = "PROPSTORE_"
"""Prefix for environment variables read by PropertySettings."""

DEFAULT_ENCODING = "utf-8"
"""Default text encoding for JSON, TOML and YAML resources."""

DEFAULT_REFLECTION_MAX_DEPTH = 64
"""Maximum record nesting depth walked by the object loader.

Deeper structures raise CycleError instead of recursing further. Real
configuration objects are rarely more than a handful of levels deep.
"""

# Resource extensions
JSON_EXTENSION = "json"
PLIST_EXTENSION = "plist"
TOML_EXTENSION = "toml"
YAML_EXTENSION = "yaml"
