from __future__ import annotations

import pytest

from services.actions import ACTIONS, favorite_status, retweet_status, unfavorite_status


class FakeClient:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, int]] = []

    async def _record(self, name: str, status_id: int):
        self.calls.append((name, status_id))
        if self.fail:
            raise RuntimeError(f"{name} rejected")

    async def favorite(self, status_id: int):
        await self._record("favorite", status_id)

    async def unfavorite(self, status_id: int):
        await self._record("unfavorite", status_id)

    async def retweet(self, status_id: int):
        await self._record("retweet", status_id)


class RecordingState:
    def __init__(self):
        self.messages: list[str] = []

    def publish(self, text: str, clear_after=None) -> None:
        self.messages.append(text)


@pytest.mark.asyncio
async def test_success_publishes_nothing():
    client = FakeClient()
    state = RecordingState()
    await favorite_status(client, 10, state)
    await unfavorite_status(client, 11, state)
    await retweet_status(client, 12, state)
    assert client.calls == [("favorite", 10), ("unfavorite", 11), ("retweet", 12)]
    assert state.messages == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("action", "message"),
    [
        ("favorite", "Err:Favorite"),
        ("unfavorite", "Err:Unfavorite"),
        ("retweet", "Err:Retweet"),
    ],
)
async def test_failure_becomes_status_message(action, message):
    state = RecordingState()
    result = await ACTIONS[action](FakeClient(fail=True), 99, state)
    assert result is None
    assert state.messages == [message]
