"""
Component registry: ordering, immutability, and configuration errors.
"""

import asyncio
from dataclasses import dataclass

import pytest

from lifecycle.exceptions import ConfigurationError
from lifecycle.registry import ComponentRegistry


def test_registry_preserves_insertion_order():
    a, b, c = object(), object(), object()
    registry = ComponentRegistry.freeze({"config": a, "database": b, "server": c})

    assert registry.names() == ["config", "database", "server"]
    assert list(registry) == ["config", "database", "server"]
    assert [name for name, _ in registry.reversed_items()] == ["server", "database", "config"]
    assert registry["database"] is b
    assert len(registry) == 3


def test_registry_is_read_only():
    registry = ComponentRegistry.freeze({"a": object()})

    with pytest.raises(TypeError):
        registry["b"] = object()  # type: ignore[index]
    with pytest.raises(TypeError):
        registry.b = object()
    with pytest.raises(TypeError):
        del registry.a


def test_registry_is_not_affected_by_source_mutation():
    source = {"a": object()}
    registry = ComponentRegistry.freeze(source)
    source["b"] = object()

    assert registry.names() == ["a"]


def test_registry_attribute_access():
    db = object()
    registry = ComponentRegistry.freeze({"db": db})

    assert registry.db is db
    with pytest.raises(AttributeError):
        registry.missing


def test_registry_compares_equal_to_mapping():
    a = object()
    assert ComponentRegistry.freeze({"a": a}) == {"a": a}


def test_freeze_accepts_dataclass_in_field_order():
    @dataclass
    class Components:
        config: object
        server: object

    config, server = object(), object()
    registry = ComponentRegistry.freeze(Components(config=config, server=server))

    assert registry.names() == ["config", "server"]
    assert registry.server is server


def test_freeze_returns_existing_registry_unchanged():
    registry = ComponentRegistry.freeze({"a": object()})
    assert ComponentRegistry.freeze(registry) is registry


def test_none_component_is_rejected():
    with pytest.raises(ConfigurationError, match="server"):
        ComponentRegistry.freeze({"config": object(), "server": None})


@pytest.mark.parametrize("empty", ["", b"", 0, 0.0, False])
def test_falsy_scalar_component_is_rejected(empty):
    with pytest.raises(ConfigurationError, match="Null or empty components are not allowed: port"):
        ComponentRegistry.freeze({"port": empty})


def test_empty_container_is_a_valid_component():
    registry = ComponentRegistry.freeze({"cache": {}, "queue": []})

    assert registry.cache == {}
    assert registry.names() == ["cache", "queue"]


def test_coroutine_component_is_rejected():
    async def connect():
        return object()

    with pytest.raises(ConfigurationError, match="missed an await|miss an await"):
        ComponentRegistry.freeze({"db": connect()})


@pytest.mark.asyncio
async def test_future_component_is_rejected():
    future = asyncio.get_running_loop().create_future()

    with pytest.raises(ConfigurationError, match="db"):
        ComponentRegistry.freeze({"db": future})


def test_non_mapping_factory_result_is_rejected():
    with pytest.raises(ConfigurationError):
        ComponentRegistry.freeze([object()])


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ComponentRegistry.freeze({"a": None})
