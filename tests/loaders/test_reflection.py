"""Tests for ObjectPropertyLoader and record field enumeration."""

import collections as _collections
import dataclasses as _dataclasses
import datetime as _datetime
import enum as _enum
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pytest as _pytest

import propstore.errors as errors
import propstore.loaders.reflection as reflection
import propstore.settings as settings_module
import propstore.values as values


def _load(instance: _typing.Any, **settings_kwargs: _typing.Any) -> dict[str, _typing.Any]:
    """Reflect an object and return its properties as plain Python."""
    settings = settings_module.PropertySettings.construct_without_dotenv(**settings_kwargs)
    properties = reflection.ObjectPropertyLoader(instance, settings=settings).load()
    return {key: value.to_python() for key, value in properties.items()}


# =============================================================================
# Sample configuration types
# =============================================================================


@_dataclasses.dataclass
class ApiConfig:
    base_url: str = "https://api.example.com"
    timeout: int = 30
    retries: int | None = None


@_dataclasses.dataclass
class AppConfig:
    app_name: str = "MyApp"
    version: str = "1.0.0"
    debug: bool = False
    api: ApiConfig = _dataclasses.field(default_factory=ApiConfig)
    tags: list[str] = _dataclasses.field(default_factory=lambda: ["a", "b"])


class Mode(_enum.Enum):
    FAST = "fast"
    SAFE = "safe"


class DatabaseSettings(_pydantic.BaseModel):
    host: str = "localhost"
    port: int = 5432


class ServiceSettings(_pydantic.BaseModel):
    model_config = _pydantic.ConfigDict(extra="allow")

    name: str = "svc"
    mode: Mode = Mode.FAST
    database: DatabaseSettings = _pydantic.Field(default_factory=DatabaseSettings)


Point = _collections.namedtuple("Point", ["x", "y"])


class PlainConfig:
    def __init__(self) -> None:
        self.name = "plain"
        self.limit = 10
        self._secret = "hidden"


class SlottedConfig:
    __slots__ = ("name", "unset")

    def __init__(self) -> None:
        self.name = "slotted"


class ExplicitConfig:
    """Opts out of reflection and lists its properties itself."""

    def __init__(self) -> None:
        self._values = {"region": "eu-west-1", "zones": 3}

    def describe_properties(self) -> dict[str, _typing.Any]:
        return dict(self._values)


@_dataclasses.dataclass
class Node:
    name: str
    child: _typing.Any = None


@_dataclasses.dataclass
class Empty:
    pass


# =============================================================================
# Tests
# =============================================================================


class TestRecords:
    """Each kind of record is enumerated."""

    def test_dataclass(self) -> None:
        """Dataclass fields are reflected and nested records flattened."""
        assert _load(AppConfig()) == {
            "app_name": "MyApp",
            "version": "1.0.0",
            "debug": False,
            "api.base_url": "https://api.example.com",
            "api.timeout": 30,
            "tags": ["a", "b"],
        }

    def test_pydantic_model(self) -> None:
        """Declared fields then extra fields; enums stored by value."""
        settings = ServiceSettings(owner="team-a")  # type: ignore[call-arg]
        assert _load(settings) == {
            "name": "svc",
            "mode": "fast",
            "database.host": "localhost",
            "database.port": 5432,
            "owner": "team-a",
        }

    def test_named_tuple_nested(self) -> None:
        """Named tuples are records, not sequences."""

        @_dataclasses.dataclass
        class Shape:
            origin: Point = _dataclasses.field(default_factory=lambda: Point(1, 2))

        assert _load(Shape()) == {"origin.x": 1, "origin.y": 2}

    def test_plain_object(self) -> None:
        """Public instance attributes are reflected, private ones skipped."""
        assert _load(PlainConfig()) == {"name": "plain", "limit": 10}

    def test_slotted_object(self) -> None:
        """Assigned slots are reflected, unassigned ones skipped."""
        assert _load(SlottedConfig()) == {"name": "slotted"}

    def test_describes_properties(self) -> None:
        """The explicit protocol wins over reflection."""
        instance = ExplicitConfig()
        assert isinstance(instance, reflection.DescribesProperties)
        assert _load(instance) == {"region": "eu-west-1", "zones": 3}


class TestLeaves:
    """How individual field values are stored."""

    def test_none_fields_omitted(self) -> None:
        """A field set to None produces no key."""
        assert "api.retries" not in _load(AppConfig())

    def test_empty_record_produces_no_key(self) -> None:
        """A nested record with no fields contributes nothing."""

        @_dataclasses.dataclass
        class Holder:
            name: str = "x"
            nothing: Empty = _dataclasses.field(default_factory=Empty)

        assert _load(Holder()) == {"name": "x"}

    def test_empty_root(self) -> None:
        """A root with no fields loads as no properties."""
        assert _load(Empty()) == {}

    def test_leaf_types(self) -> None:
        """Dates, paths and mappings are leaves, not records."""

        @_dataclasses.dataclass
        class Leaves:
            when: _datetime.date = _datetime.date(2025, 6, 1)
            where: _pathlib.PurePosixPath = _pathlib.PurePosixPath("/srv/app")
            limits: dict[str, int] = _dataclasses.field(default_factory=lambda: {"cpu": 2})

        assert _load(Leaves()) == {
            "when": _datetime.date(2025, 6, 1),
            "where": "/srv/app",
            "limits": {"cpu": 2},
        }

    def test_records_inside_containers(self) -> None:
        """Records in lists become nested mappings of their fields."""

        @_dataclasses.dataclass
        class Cluster:
            nodes: list[ApiConfig] = _dataclasses.field(
                default_factory=lambda: [ApiConfig(timeout=1), ApiConfig(timeout=2)]
            )

        nodes = _load(Cluster())["nodes"]
        assert [node["timeout"] for node in nodes] == [1, 2]
        assert nodes[0] == {"base_url": "https://api.example.com", "timeout": 1}

    def test_unrepresentable_value_skipped(self, caplog: _pytest.LogCaptureFixture) -> None:
        """Values with no property shape are dropped and logged."""

        @_dataclasses.dataclass
        class Odd:
            name: str = "x"
            delay: _datetime.timedelta = _datetime.timedelta(seconds=5)

        with caplog.at_level(_logging.DEBUG, logger="propstore.loaders.reflection"):
            assert _load(Odd()) == {"name": "x"}
        assert "delay" in caplog.text

    def test_unrepresentable_element_drops_container(
        self, caplog: _pytest.LogCaptureFixture
    ) -> None:
        """One bad element drops its whole field; the log names the element."""

        @_dataclasses.dataclass
        class Schedule:
            name: str = "x"
            delays: list[_typing.Any] = _dataclasses.field(
                default_factory=lambda: [1, _datetime.timedelta(seconds=5)]
            )

        with caplog.at_level(_logging.DEBUG, logger="propstore.loaders.reflection"):
            assert _load(Schedule()) == {"name": "x"}
        assert "whole value dropped" in caplog.text
        assert "delays[1]" in caplog.text

    def test_values_are_value_objects(self) -> None:
        """The loader itself returns Values."""
        properties = reflection.ObjectPropertyLoader(ApiConfig()).load()
        assert properties["timeout"] == values.IntegerValue(30)


class TestCycles:
    """Reference cycles and runaway depth raise CycleError."""

    def test_self_reference(self) -> None:
        """An object that contains itself."""
        node = Node("root")
        node.child = node
        with _pytest.raises(errors.CycleError) as exc_info:
            reflection.ObjectPropertyLoader(node).load()
        assert exc_info.value.key == "child"

    def test_indirect_cycle(self) -> None:
        """A cycle through another record."""
        a = Node("a")
        b = Node("b", child=a)
        a.child = b
        with _pytest.raises(errors.CycleError, match="reference cycle"):
            reflection.ObjectPropertyLoader(a).load()

    def test_cycle_through_container(self) -> None:
        """A list that contains itself."""
        items: list[_typing.Any] = []
        items.append(items)
        with _pytest.raises(errors.CycleError) as exc_info:
            reflection.ObjectPropertyLoader(Node("a", child=items)).load()
        assert exc_info.value.key == "child[0]"

    def test_cycle_key_through_record_in_container(self) -> None:
        """A cycle found inside a listed record names the full path to it."""
        root = Node("root")
        member = Node("member", child=root)
        root.child = [member]
        with _pytest.raises(errors.CycleError) as exc_info:
            reflection.ObjectPropertyLoader(root).load()
        assert exc_info.value.key == "child[0].child"

    def test_shared_object_is_not_a_cycle(self) -> None:
        """The same object reached twice on different paths is fine."""
        shared = ApiConfig()

        @_dataclasses.dataclass
        class Twice:
            primary: ApiConfig = _dataclasses.field(default_factory=lambda: shared)
            fallback: ApiConfig = _dataclasses.field(default_factory=lambda: shared)

        result = _load(Twice())
        assert result["primary.timeout"] == result["fallback.timeout"] == 30

    def test_depth_limit(self) -> None:
        """Nesting beyond reflection_max_depth is refused."""
        root = Node("0")
        current = root
        for i in range(1, 6):
            current.child = Node(str(i))
            current = current.child

        with _pytest.raises(errors.CycleError, match="deeper than 3"):
            _load(root, reflection_max_depth=3)
        assert _load(root, reflection_max_depth=10)["child.child.child.child.child.name"] == "5"

    def test_describe(self) -> None:
        """describe() names the object's type."""
        loader = reflection.ObjectPropertyLoader(AppConfig())
        assert loader.describe() == "object AppConfig"


class TestFieldsOf:
    """Tests for fields_of() classification."""

    @_pytest.mark.parametrize(
        "value",
        [1, "text", b"raw", 3.5, True, [1], {"a": 1}, (1, 2), {1}, Mode.FAST, len, int],
    )
    def test_non_records(self, value: _typing.Any) -> None:
        """Scalars, containers, enums, functions and types are not records."""
        assert reflection.fields_of(value) is None

    def test_object_without_attributes(self) -> None:
        """A bare object() has nothing to enumerate."""
        assert reflection.fields_of(object()) is None

    def test_record_fields_in_order(self) -> None:
        """Fields come back in declaration order."""
        assert [name for name, _ in reflection.fields_of(ApiConfig()) or []] == [
            "base_url",
            "timeout",
            "retries",
        ]
