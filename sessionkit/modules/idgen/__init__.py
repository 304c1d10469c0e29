"""
ID Generator Module - Black Box Interface

Purpose: Produce unpredictable session tokens
Interface: generate_token(), is_well_formed()
Hidden: Entropy source, encoding

Tokens carry no sequential or time-derived component.
"""

from .idgen import DEFAULT_TOKEN_BYTES, generate_token, is_well_formed

__all__ = ["DEFAULT_TOKEN_BYTES", "generate_token", "is_well_formed"]
