"""
Favorite / unfavorite / retweet.

Thin pass-throughs to the configured social client. A failure never reaches
the caller: it is logged and shown on the status bar instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import services.logger as log
from services.state import StateChannel

if TYPE_CHECKING:
    from drivers import BaseClient

l = log.get_logger()


async def favorite_status(client: "BaseClient", status_id: int, state: StateChannel) -> None:
    try:
        await client.favorite(status_id)
    except Exception as e:
        l.error(f"Favorite {status_id} failed: {e}")
        state.publish("Err:Favorite")


async def unfavorite_status(client: "BaseClient", status_id: int, state: StateChannel) -> None:
    try:
        await client.unfavorite(status_id)
    except Exception as e:
        l.error(f"Unfavorite {status_id} failed: {e}")
        state.publish("Err:Unfavorite")


async def retweet_status(client: "BaseClient", status_id: int, state: StateChannel) -> None:
    try:
        await client.retweet(status_id)
    except Exception as e:
        l.error(f"Retweet {status_id} failed: {e}")
        state.publish("Err:Retweet")


ACTIONS = {
    "favorite": favorite_status,
    "unfavorite": unfavorite_status,
    "retweet": retweet_status,
}
