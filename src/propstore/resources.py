"""
Resolution and reading of property resources.

A resource is either:
- a named file in a Bundle (``BundleResource(bundle, "properties", "json")``
  reads ``properties.json`` from the bundle root), or
- an explicit file (``PathResource(path)``, or ``PathResource.from_url()``
  for ``file://`` URLs).

A Bundle is a directory of resources: the main bundle (PROPSTORE_BUNDLE_DIR
or the working directory), any directory on disk, or the resource directory
of an importable package.

Reading distinguishes a missing resource (ResourceMissingError) from one
that exists but cannot be read or decoded (ResourceUnreadableError). Every
read opens, consumes and closes the resource within the call.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import importlib.resources as _resources
import importlib.resources.abc as _resources_abc
import os as _os
import pathlib as _pathlib
import typing as _typing
import urllib.parse as _urllib_parse
import urllib.request as _urllib_request

import propstore.errors as errors
import propstore.settings as settings_module

_BOM = "\ufeff"


@_dataclasses.dataclass(frozen=True)
class Bundle:
    """A directory that resource names are resolved against."""

    root: _resources_abc.Traversable

    def __post_init__(self) -> None:
        if isinstance(self.root, (str, _os.PathLike)):
            object.__setattr__(self, "root", _pathlib.Path(self.root))

    @classmethod
    def main(cls, settings: settings_module.PropertySettings | None = None) -> Bundle:
        """The application's main bundle (PROPSTORE_BUNDLE_DIR or the cwd)."""
        settings = settings or settings_module.PropertySettings()
        return cls(settings.main_bundle_root())

    @classmethod
    def for_package(cls, package: str) -> Bundle:
        """
        The resource directory of an importable package.

        Args:
            package: Dotted package name, e.g. ``"myapp.resources"``.

        Raises:
            ModuleNotFoundError: If the package cannot be imported.
        """
        return cls(_resources.files(package))

    def resource(self, name: str, extension: str) -> _resources_abc.Traversable:
        """Locate ``<name>.<extension>`` in this bundle (it may not exist)."""
        return self.root.joinpath(f"{name}.{extension}")

    def __str__(self) -> str:
        return str(self.root)


@_dataclasses.dataclass(frozen=True)
class BundleResource:
    """A named resource inside a bundle."""

    bundle: Bundle
    name: str
    extension: str

    def read_bytes(self) -> bytes:
        """
        Read the whole resource.

        Raises:
            ResourceMissingError: If the bundle has no such resource.
            ResourceUnreadableError: If it exists but cannot be read.
        """
        resource = self.bundle.resource(self.name, self.extension)
        try:
            exists = resource.is_file()
        except OSError as e:
            raise errors.ResourceUnreadableError(self, f"cannot access resource: {e}") from e
        if not exists:
            raise errors.ResourceMissingError(self, "resource not found in bundle")
        return _read_all(resource, self)

    def __str__(self) -> str:
        return f"bundle: {self.bundle}, name: {self.name}.{self.extension}"


@_dataclasses.dataclass(frozen=True)
class PathResource:
    """A resource at an explicit filesystem location."""

    path: _pathlib.Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", _pathlib.Path(self.path))

    @classmethod
    def from_url(cls, url: str) -> PathResource:
        """
        Build a resource from a ``file://`` URL.

        Raises:
            ValueError: For any other scheme, or a non-local host.
        """
        parsed = _urllib_parse.urlparse(url)
        if parsed.scheme != "file":
            raise ValueError(f"only file:// URLs are supported, got {url!r}")
        if parsed.netloc not in ("", "localhost"):
            raise ValueError(f"file URL must refer to the local host, got {url!r}")
        return cls(_pathlib.Path(_urllib_request.url2pathname(parsed.path)))

    def read_bytes(self) -> bytes:
        """
        Read the whole file.

        Raises:
            ResourceMissingError: If nothing exists at the path.
            ResourceUnreadableError: If it exists but cannot be read
                (a directory, permission denied, I/O error).
        """
        return _read_all(self.path, self)

    def __str__(self) -> str:
        return str(self.path)


ResourceSource: _typing.TypeAlias = BundleResource | PathResource


def _read_all(
    resource: _resources_abc.Traversable,
    source: ResourceSource,
) -> bytes:
    """Open, fully read and close a resource, mapping OS errors."""
    try:
        with resource.open("rb") as fh:
            return fh.read()
    except FileNotFoundError as e:
        raise errors.ResourceMissingError(source, "file not found") from e
    except PermissionError as e:
        raise errors.ResourceUnreadableError(source, f"permission denied: {e}") from e
    except OSError as e:
        raise errors.ResourceUnreadableError(source, f"cannot read file: {e}") from e


def decode_text(data: bytes, source: ResourceSource, encoding: str) -> str:
    """
    Decode resource bytes to text, dropping a leading byte order mark.

    Raises:
        ResourceUnreadableError: If the bytes are not valid in ``encoding``.
    """
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise errors.ResourceUnreadableError(
            source, f"content is not valid {encoding} text: {e}"
        ) from e
    return text.removeprefix(_BOM)
