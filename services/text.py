from __future__ import annotations

import re

from services.message import Status

# The API escapes only these three entities in status text
_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
}
_ENTITY_RE = re.compile("|".join(_ENTITIES))


def unescape_entities(text: str) -> str:
    """Single pass, so "&amp;lt;" becomes "&lt;", not "<"."""
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)


def centering_str(s: str, width: int) -> str:
    """Pad *s* to *width* with spaces on both sides; an odd extra space goes left."""
    sub = width - len(s)
    if sub <= 0:
        return s
    left = sub // 2 + sub % 2
    return " " * left + s + " " * (sub // 2)


def original_of(status: Status) -> Status:
    """Follow the retweet chain down to the status that was retweeted."""
    while status.retweeted_status is not None:
        status = status.retweeted_status
    return status


def prepare_status(status: Status) -> Status:
    """
    Make the text of *status* (or the status it retweets) displayable:
    unescape HTML entities and swap shortened links for their display form.

    The original status is modified in place; *status* itself is returned.
    """
    orig = original_of(status)
    text = unescape_entities(orig.text)
    for entity in orig.urls:
        text = text.replace(entity.url, entity.display_url)
    for entity in orig.media:
        text = text.replace(entity.url, entity.display_url)
    orig.text = text
    return status


def prepare_statuses(statuses: list[Status]) -> list[Status]:
    return [prepare_status(s) for s in statuses]


def media_urls(status: Status) -> list[str]:
    """Download URLs of every media attachment, in posting order."""
    return [m.media_url for m in original_of(status).media if m.media_url]
