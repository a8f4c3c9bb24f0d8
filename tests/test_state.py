"""
Tests for the status-bar channel.
"""

from __future__ import annotations

import asyncio

import pytest

from services.state import StatusChannel


async def _running(channel: StatusChannel):
    return asyncio.create_task(channel.run())


async def _stop(task: asyncio.Task) -> None:
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


@pytest.mark.asyncio
async def test_updates_applied_in_publish_order() -> None:
    seen: list[str] = []
    channel = StatusChannel(clear_after=60, on_change=seen.append)
    task = await _running(channel)
    try:
        for i in range(5):
            channel.publish(f"Downloading...({i}/4)")
        channel.publish("")
        await channel.flush()
    finally:
        await _stop(task)

    assert seen == [f"Downloading...({i}/4)" for i in range(5)] + [""]
    assert channel.current == ""


@pytest.mark.asyncio
async def test_message_clears_itself() -> None:
    seen: list[str] = []
    channel = StatusChannel(clear_after=0.01, on_change=seen.append)
    task = await _running(channel)
    try:
        channel.publish("Err:Favorite")
        await channel.flush()
        assert channel.current == "Err:Favorite"
        await asyncio.sleep(0.1)
        assert channel.current == ""
    finally:
        await _stop(task)

    assert seen == ["Err:Favorite", ""]


@pytest.mark.asyncio
async def test_newer_message_cancels_pending_clear() -> None:
    channel = StatusChannel(clear_after=0.05)
    task = await _running(channel)
    try:
        channel.publish("first")
        await channel.flush()
        channel.publish("second", clear_after=None)
        await channel.flush()
        await asyncio.sleep(0.15)
        assert channel.current == "second"
    finally:
        await _stop(task)


@pytest.mark.asyncio
async def test_flush_without_consumer_backlog() -> None:
    channel = StatusChannel()
    task = await _running(channel)
    try:
        await channel.flush()
        assert channel.current == ""
    finally:
        await _stop(task)
