"""
Base classes for property loaders.

A loader turns one source into a flat mapping of property keys to Values.
PropertyLoader is the interface every loader implements; file-backed
loaders derive from ResourcePropertyLoader, which owns locating, reading,
shape-checking and converting the resource and leaves only parsing to the
format subclass.
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import logging as _logging
import os as _os
import typing as _typing

import propstore.errors as errors
import propstore.flatten as flatten_module
import propstore.resources as resources
import propstore.settings as settings_module
import propstore.values as values

_logger = _logging.getLogger(__name__)


class PropertyLoader(_abc.ABC):
    """
    Abstract base class for property loaders.

    Loaders are applied to a PropertyStore (usually through a
    PropertyResolver) in order; later loaders override earlier ones.
    """

    @_abc.abstractmethod
    def load(self) -> values.PropertyMap:
        """
        Load the properties of this source.

        Returns:
            Mapping of property keys to Values.

        Raises:
            PropertyLoaderError: If the source cannot be loaded.
        """
        ...

    def describe(self) -> str:
        """Human-readable identity of the source, used for provenance."""
        return type(self).__name__


class ResourcePropertyLoader(PropertyLoader):
    """
    Loader backed by a bundle resource, a file path, or a file:// URL.

    Subclasses set ``extension`` and ``format_name`` and implement
    ``_parse``. Loading:
    1. Read the resource bytes (missing / unreadable errors)
    2. Parse them (ParseFailedError on grammar errors)
    3. Require a mapping at the top level (FormatInvalidError)
    4. Convert to Values, flattening nested mappings if requested
    """

    extension: _typing.ClassVar[str]
    """Resource extension appended to ``name`` for bundle lookups."""

    format_name: _typing.ClassVar[str]
    """Format name used in error messages."""

    container_name: _typing.ClassVar[str] = "dictionary"
    """What the top level must be, for error messages."""

    def __init__(
        self,
        name: str | None = None,
        *,
        bundle: resources.Bundle | None = None,
        path: str | _os.PathLike[str] | None = None,
        url: str | None = None,
        flatten: bool = False,
        settings: settings_module.PropertySettings | None = None,
    ) -> None:
        """
        Initialize the loader from exactly one of name, path or url.

        Args:
            name: Resource name without extension. For ``properties.json``
                this is ``"properties"``.
            bundle: Bundle to look ``name`` up in (defaults to Bundle.main()).
            path: Explicit file location.
            url: ``file://`` URL of the file.
            flatten: Flatten nested mappings into dot-notation keys.
            settings: Settings to use (defaults to PropertySettings()).

        Raises:
            ValueError: If not exactly one of name, path and url is given,
                if ``bundle`` is given without ``name``, or if ``url`` is
                not a local file URL.
        """
        loader_name = type(self).__name__
        given = [arg for arg in (name, path, url) if arg is not None]
        if len(given) != 1:
            raise ValueError(
                f"{loader_name} must be initialized with exactly one of name, path or url"
            )
        if bundle is not None and name is None:
            raise ValueError(f"{loader_name}: bundle can only be used together with name")

        self._settings = settings or settings_module.PropertySettings()
        self._flatten = flatten

        self._source: resources.ResourceSource
        if name is not None:
            self._source = resources.BundleResource(
                bundle or resources.Bundle.main(self._settings),
                name,
                self.extension,
            )
        elif path is not None:
            self._source = resources.PathResource(path)
        else:
            assert url is not None
            self._source = resources.PathResource.from_url(url)

    @property
    def source(self) -> resources.ResourceSource:
        """The resource this loader reads."""
        return self._source

    @property
    def settings(self) -> settings_module.PropertySettings:
        return self._settings

    def describe(self) -> str:
        return f"{self.format_name} {self._source}"

    def load(self) -> values.PropertyMap:
        data = self._source.read_bytes()
        parsed = self._parse(data)

        if not isinstance(parsed, _collections_abc.Mapping):
            raise errors.FormatInvalidError(
                self._source,
                self.format_name,
                f"must be top-level {self.container_name}, got {type(parsed).__name__}",
            )

        try:
            properties = values.from_mapping(parsed)
        except TypeError as e:
            raise errors.FormatInvalidError(self._source, self.format_name, str(e)) from e

        if self._flatten:
            properties = flatten_module.flatten(properties)

        _logger.debug("Loaded %d properties from %s", len(properties), self.describe())
        return properties

    @_abc.abstractmethod
    def _parse(self, data: bytes) -> _typing.Any:
        """
        Parse raw resource bytes into plain Python objects.

        Raises:
            ParseFailedError: If the data violates the format grammar.
            ResourceUnreadableError: If the data cannot be decoded.
        """
        ...

    def _decode(self, data: bytes) -> str:
        """Decode resource bytes with the configured encoding."""
        return resources.decode_text(data, self._source, self._settings.encoding)

    def _parse_failed(self, exc: Exception) -> errors.ParseFailedError:
        """Build a ParseFailedError for this resource from a parser exception."""
        return errors.ParseFailedError(self._source, self.format_name, str(exc))
