"""
Transport Module - Black Box Interface

Purpose: Carry the session token between client and server
Interface: extract_token(), stage_token(), expire_token(), rewrite_url()
Hidden: Cookie attributes, escaping, query string handling

Supports cookies and, for clients without cookie support, a URL query parameter.
"""

from .transport import expire_token, extract_token, rewrite_url, stage_token

__all__ = ["expire_token", "extract_token", "rewrite_url", "stage_token"]
