"""
The consumer side: an object that owns a property store.

PropertyResolver is what application code holds on to. It applies loaders
to its own store in the order given and answers typed lookups:

    resolver = PropertyResolver()
    resolver.apply_property_loader(TomlPropertyLoader("defaults"))
    resolver.apply_optional_property_loader(JsonPropertyLoader("whitelabel"))

    timeout = resolver.property("api.timeout", int)
    base_url = resolver.property_for_key(ApiKeys.BASE_URL, str)

Each resolver has its own store; nothing is shared between resolvers.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import propstore.errors as errors
import propstore.keys as property_keys
import propstore.loaders.base as loaders_base
import propstore.store as store_module

_logger = _logging.getLogger(__name__)


class PropertyResolver:
    """Owns one PropertyStore and feeds it from property loaders."""

    def __init__(self, store: store_module.PropertyStore | None = None) -> None:
        """
        Initialize the resolver.

        Args:
            store: Store to use. A new empty store is created if omitted.
        """
        self._store = store if store is not None else store_module.PropertyStore()

    @property
    def store(self) -> store_module.PropertyStore:
        """The store this resolver owns."""
        return self._store

    def apply_property_loader(self, loader: loaders_base.PropertyLoader) -> None:
        """
        Load properties and merge them into the store.

        Properties from this loader override any already present with the
        same key, so if loader A and loader B both define ``test.key`` and
        A is applied before B, the value comes from B.

        Raises:
            PropertyLoaderError: Whatever the loader raises, unchanged. The
                store is not modified in that case.
        """
        properties = loader.load()
        self._store.apply(properties, source=loader.describe())

    def apply_property_loaders(self, *loaders: loaders_base.PropertyLoader) -> None:
        """Apply several loaders in order (later loaders take precedence)."""
        for loader in loaders:
            self.apply_property_loader(loader)

    def apply_optional_property_loader(self, loader: loaders_base.PropertyLoader) -> bool:
        """
        Apply a loader whose resource may legitimately be absent.

        Typical for white-label overlays that only some builds ship. Only a
        missing resource is tolerated; a resource that exists but cannot
        be read or parsed is still an error.

        Returns:
            True if the loader was applied, False if its resource was missing.

        Raises:
            PropertyLoaderError: For any failure other than a missing resource.
        """
        try:
            self.apply_property_loader(loader)
        except errors.ResourceMissingError as e:
            _logger.info("Skipping optional properties: %s", e)
            return False
        return True

    def property(
        self,
        name: str,
        expected: _typing.Any = None,
        *,
        default: _typing.Any = None,
    ) -> _typing.Any:
        """
        Retrieve a property by its raw key.

        Args:
            name: Dotted property key, e.g. ``"api.timeout"``.
            expected: Type to narrow to (see PropertyStore.get).
            default: Returned if missing or of another shape.
        """
        return self._store.get(name, expected, default=default)

    def property_for_key(
        self,
        key: property_keys.PropertyKey,
        expected: _typing.Any = None,
        *,
        default: _typing.Any = None,
    ) -> _typing.Any:
        """
        Retrieve a property by PropertyKey.

        Same result as ``property(key.raw_value, ...)``.
        """
        return self._store.get(key, expected, default=default)
