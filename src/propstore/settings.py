"""
Library settings using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with PROPSTORE_ prefix
3. Field defaults

Example:
  PROPSTORE_BUNDLE_DIR=/opt/myapp/resources
  PROPSTORE_STRIP_JSON_COMMENTS=false
  PROPSTORE_REFLECTION_MAX_DEPTH=16
"""

import codecs as _codecs
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import propstore.constants as constants


class PropertySettings(_pydantic_settings.BaseSettings):
    """
    Settings that control how loaders read and normalize sources.

    All settings can be overridden via environment variables with the
    PROPSTORE_ prefix. Loaders take an optional ``settings`` argument and
    build a fresh instance when none is given.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        extra="ignore",
    )

    bundle_dir: _pathlib.Path | None = None
    """Root directory of the main bundle. Defaults to the working directory."""

    encoding: str = constants.DEFAULT_ENCODING
    """Text encoding used to decode JSON, TOML and YAML resources."""

    strip_json_comments: bool = True
    """Strip //, /* */ and /** */ comments from JSON before parsing."""

    reflection_max_depth: int = _pydantic.Field(
        default=constants.DEFAULT_REFLECTION_MAX_DEPTH, ge=1
    )
    """Maximum record nesting depth walked by the object loader."""

    @_pydantic.field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        """Reject encodings the codec registry does not know."""
        try:
            _codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown text encoding: {value!r}") from e
        return value

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "PropertySettings":
        """Create settings from environment variables only, without a .env file.

        Useful for test isolation and for reproducing issues without a
        stray .env file in the working directory.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    def main_bundle_root(self) -> _pathlib.Path:
        """Directory that Bundle.main() resolves resource names against."""
        if self.bundle_dir is not None:
            return self.bundle_dir
        return _pathlib.Path.cwd()
