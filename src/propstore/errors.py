"""
Exceptions raised while loading properties.

Every failure of a loader is reported as a subclass of PropertyLoaderError
carrying the identity of the source it was reading (a BundleResource, a
PathResource, or a description string for in-memory sources), so callers
can format a diagnostic or decide per failure whether it is fatal.

Hierarchy:
- PropertyLoaderError
  - ResourceMissingError: resource not found in its bundle or at its path
  - ResourceUnreadableError: resource found but could not be read or decoded
  - FormatInvalidError: parsed, but the top level is not a mapping/table
  - ParseFailedError: content does not conform to its format grammar
  - CycleError: the object loader met a reference cycle or its depth bound

Lookups on a PropertyStore never raise these; a missing key is absence.
"""

from __future__ import annotations

import typing as _typing


class PropertyLoaderError(Exception):
    """Base class for all errors raised by property loaders."""

    summary = "Property loading failed"

    def __init__(self, source: _typing.Any, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{self.summary} for {source}: {reason}")


class ResourceMissingError(PropertyLoaderError):
    """The named resource does not exist in its bundle or at its path."""

    summary = "Missing resource"


class ResourceUnreadableError(PropertyLoaderError):
    """The resource exists but its bytes or text could not be read."""

    summary = "Unreadable resource"


class _FormatError(PropertyLoaderError):
    """Shared base for errors tied to a specific source format."""

    def __init__(self, source: _typing.Any, format_name: str, reason: str) -> None:
        self.format_name = format_name
        super().__init__(source, reason)

    def __str__(self) -> str:
        return f"{self.summary} ({self.format_name}) for {self.source}: {self.reason}"


class FormatInvalidError(_FormatError):
    """Content parsed, but its top-level value is not a mapping."""

    summary = "Invalid format"


class ParseFailedError(_FormatError):
    """Content does not conform to the grammar of its format."""

    summary = "Parse failed"


class CycleError(PropertyLoaderError):
    """The object loader revisited a record on its own path, or went too deep."""

    summary = "Cannot reflect properties"

    def __init__(self, source: _typing.Any, key: str, reason: str) -> None:
        self.key = key
        super().__init__(source, f"{reason} at key {key!r}")
