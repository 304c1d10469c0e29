"""
Session Module - Black Box Interface

Purpose: Correlate stateless requests with server-side session state
Interface: SessionManager.start(), destroy(), run_sweep(); SessionSweeper
Hidden: Token transport, per-token locking, sweep scheduling

Storage is delegated to whichever provider is registered under the configured name.
"""

from ...interfaces import ABSENT, Provider, Session
from .manager import SessionManager
from .sweeper import SessionSweeper

__all__ = ["ABSENT", "Provider", "Session", "SessionManager", "SessionSweeper"]
