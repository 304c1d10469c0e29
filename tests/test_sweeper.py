import asyncio
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Response

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import make_request
from sessionkit.config.provider import SessionConfig
from sessionkit.errors import StorageError
from sessionkit.modules.session import SessionManager, SessionSweeper


def make_mock_manager(sweep_interval=None):
    """Create a manager stand-in whose run_sweep is observable."""
    manager = MagicMock(spec=SessionManager)
    manager.config = SessionConfig(provider_name="memory", max_lifetime=3600, sweep_interval=sweep_interval)
    manager.run_sweep = AsyncMock(return_value=0)
    return manager


def test_interval_defaults_to_lifetime():
    """Test that the sweep interval falls back to the idle lifetime."""
    assert SessionSweeper(make_mock_manager()).interval == 3600


def test_interval_can_be_decoupled():
    assert SessionSweeper(make_mock_manager(sweep_interval=60)).interval == 60
    assert SessionSweeper(make_mock_manager(), interval=5).interval == 5


@pytest.mark.asyncio
async def test_run_once_reports_removed_count(manager, clock):
    """Test a single sweep through a real manager."""
    await manager.start(make_request(), Response())
    clock.advance(4000)

    assert await SessionSweeper(manager).run_once() == 1


@pytest.mark.asyncio
async def test_run_once_survives_storage_failure():
    """Test that a failing sweep is logged rather than killing the loop."""
    manager = make_mock_manager()
    manager.run_sweep.side_effect = StorageError("redis down")

    assert await SessionSweeper(manager).run_once() == 0


@pytest.mark.asyncio
async def test_sweeps_periodically_until_stopped():
    """Test that the background task sweeps repeatedly and stops on request."""
    manager = make_mock_manager()
    sweeper = SessionSweeper(manager, interval=0.01)

    sweeper.start()
    assert sweeper.running
    await asyncio.sleep(0.1)
    await sweeper.stop()

    assert not sweeper.running
    calls = manager.run_sweep.await_count
    assert calls >= 2

    await asyncio.sleep(0.05)
    assert manager.run_sweep.await_count == calls


@pytest.mark.asyncio
async def test_keeps_sweeping_after_failure():
    """Test that one failed sweep does not end the loop."""
    manager = make_mock_manager()
    manager.run_sweep.side_effect = [StorageError("blip")] + [0] * 100
    sweeper = SessionSweeper(manager, interval=0.01)

    sweeper.start()
    await asyncio.sleep(0.1)
    await sweeper.stop()

    assert manager.run_sweep.await_count >= 2


@pytest.mark.asyncio
async def test_stop_does_not_wait_for_interval():
    """Test that stop() returns promptly even with a long interval."""
    sweeper = SessionSweeper(make_mock_manager(), interval=3600)

    sweeper.start()
    await asyncio.sleep(0)
    await asyncio.wait_for(sweeper.stop(), timeout=1)

    assert not sweeper.running


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent():
    manager = make_mock_manager()
    sweeper = SessionSweeper(manager, interval=3600)

    await sweeper.stop()
    sweeper.start()
    sweeper.start()
    await asyncio.sleep(0)
    await sweeper.stop()
    await sweeper.stop()

    assert manager.run_sweep.await_count == 1
