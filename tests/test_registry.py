import os
import sys
import uuid

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionkit.errors import (
    DuplicateRegistration,
    InvalidProvider,
    ProviderNotFound,
    RegistryError,
    RegistryFrozen,
)
from sessionkit.modules import registry as registry_module
from sessionkit.modules.registry import ProviderRegistry
from sessionkit.modules.storage import MemoryProvider


def test_register_and_lookup():
    """Test that a registered provider can be looked up by name."""
    registry = ProviderRegistry()
    provider = MemoryProvider()

    registry.register("memory", provider)

    assert registry.lookup("memory") is provider
    assert "memory" in registry


def test_duplicate_registration_raises():
    """Test that binding a name twice fails and keeps the first binding."""
    registry = ProviderRegistry()
    first = MemoryProvider()
    registry.register("memory", first)

    with pytest.raises(DuplicateRegistration):
        registry.register("memory", MemoryProvider())

    assert registry.lookup("memory") is first


def test_none_provider_raises():
    """Test that an empty provider is rejected."""
    with pytest.raises(InvalidProvider):
        ProviderRegistry().register("memory", None)


def test_incomplete_provider_raises():
    """Test that an object without the provider methods is rejected."""

    class HalfProvider:
        async def init(self, session_id):
            return None

    with pytest.raises(InvalidProvider):
        ProviderRegistry().register("half", HalfProvider())


def test_empty_name_raises():
    """Test that a provider needs a name."""
    with pytest.raises(InvalidProvider):
        ProviderRegistry().register("", MemoryProvider())


def test_lookup_unknown_name():
    """Test that a missing binding raises ProviderNotFound."""
    registry = ProviderRegistry()

    with pytest.raises(ProviderNotFound) as exc_info:
        registry.lookup("redis")

    assert exc_info.value.name == "redis"
    assert isinstance(exc_info.value, LookupError)


def test_frozen_registry_rejects_registration():
    """Test that no bindings can be added after freeze()."""
    registry = ProviderRegistry()
    registry.register("memory", MemoryProvider())
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozen):
        registry.register("other", MemoryProvider())
    # Existing bindings stay readable
    assert registry.lookup("memory") is not None


def test_registration_errors_share_fatal_base():
    """Test that all registration failures are RegistryErrors."""
    for error in (DuplicateRegistration, InvalidProvider, RegistryFrozen):
        assert issubclass(error, RegistryError)
    assert not issubclass(ProviderNotFound, RegistryError)


def test_default_registry_helpers():
    """Test the module-level register()/lookup() helpers."""
    name = f"test-{uuid.uuid4().hex}"
    provider = MemoryProvider()

    registry_module.register(name, provider)

    assert registry_module.lookup(name) is provider
    assert registry_module.default_registry.lookup(name) is provider
    with pytest.raises(DuplicateRegistration):
        registry_module.register(name, MemoryProvider())
