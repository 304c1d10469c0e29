"""
Registry Module - Black Box Interface

Purpose: Bind storage backend names to provider implementations
Interface: ProviderRegistry.register(), ProviderRegistry.lookup(), freeze()
Hidden: Binding table, startup write guard

Bindings are write-once. There is no API to list, replace or remove them.
"""

from .registry import ProviderRegistry, default_registry, lookup, register

__all__ = ["ProviderRegistry", "default_registry", "lookup", "register"]
