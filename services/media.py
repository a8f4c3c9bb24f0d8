# Attachment downloader: fetches every media URL of a status in parallel into
# a temp directory, then opens the files with the external viewer.
#
# Usage:
#   from services.media import MediaFetcher, HttpAttachmentSource
#   fetcher = MediaFetcher(HttpAttachmentSource(), status_channel, ViewerLauncher())
#   failed = await fetcher.fetch_and_open(urls)

from __future__ import annotations

import asyncio
import hashlib
import posixpath
import tempfile
from pathlib import Path
from typing import Protocol, Sequence
from urllib.parse import urlparse

import aiohttp

import services.logger as log
from services.error import FilesystemError, NetworkError
from services.message import Attachment, FetchOutcome
from services.state import StateChannel

l = log.get_logger()

TEMP_DIR_NAME = "chirpterm"

MSG_FAILED_ONE = "Err:media downloading was failed"
MSG_FAILED_ALL = "Err:all of media downloading were failed"
MSG_FAILED_SOME = "Err:some of media downloading were failed"


def default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / TEMP_DIR_NAME


def progress_message(done: int, total: int) -> str:
    return f"Downloading...({done}/{total})"


def summarize_failures(failed: int, total: int) -> str:
    """Status line for *failed* out of *total* downloads; ``""`` clears the bar."""
    if failed == 0:
        return ""
    if failed == 1:
        return MSG_FAILED_ONE
    if failed == total:
        return MSG_FAILED_ALL
    return MSG_FAILED_SOME


class AttachmentSource(Protocol):
    async def get(self, url: str) -> tuple[int, bytes]:
        """Return ``(status_code, body)``; raise on transport errors."""
        ...


class HttpAttachmentSource:
    """AttachmentSource backed by one shared aiohttp session, no total timeout."""

    def __init__(self):
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        return self._session

    async def get(self, url: str) -> tuple[int, bytes]:
        async with self._get_session().get(url) as resp:
            if resp.status != 200:
                return resp.status, b""
            return resp.status, await resp.read()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()


class MediaFetcher:

    def __init__(
        self,
        source: AttachmentSource,
        state: StateChannel,
        viewer,
        temp_dir: Path | None = None,
        open_interval: float = 0.001,
    ):
        self.source = source
        self.state = state
        self.viewer = viewer
        self.temp_dir = Path(temp_dir) if temp_dir else default_temp_dir()
        self.open_interval = open_interval

    def local_path_for(self, url: str) -> Path:
        """Where *url* is stored: its last path segment inside the temp dir."""
        name = posixpath.basename(urlparse(url).path)
        if name in ("", ".", ".."):
            # Nothing to name the file after; use a stable digest of the URL
            name = hashlib.md5(url.encode("utf-8")).hexdigest()
        return self.temp_dir / name

    async def fetch_and_open(self, urls: Sequence[str]) -> int:
        """
        Download every URL concurrently, then open the downloaded files
        newest-last (reverse request order) and publish a summary status.

        Returns the number of failed downloads.
        """
        attachments = [Attachment(url, self.local_path_for(url)) for url in urls]
        total = len(attachments)

        # Sized to the number of producers so a put never waits
        results: asyncio.Queue[FetchOutcome] = asyncio.Queue(maxsize=total)

        self.state.publish(progress_message(0, total))
        collector = asyncio.create_task(self._collect(results, total))
        downloads = [asyncio.create_task(self._download(att, results)) for att in attachments]

        await asyncio.gather(*downloads)
        failed = await collector

        await self._open_downloaded(attachments)

        if failed:
            l.warning(f"media: {failed}/{total} download(s) failed")
        self.state.publish(summarize_failures(failed, total))
        return failed

    async def _collect(self, results: asyncio.Queue[FetchOutcome], total: int) -> int:
        succeeded = 0
        failed = 0
        while succeeded + failed < total:
            outcome = await results.get()
            if outcome is FetchOutcome.FAILURE:
                failed += 1
                continue
            succeeded += 1
            self.state.publish(progress_message(succeeded, total))
        return failed

    async def _download(self, att: Attachment, results: asyncio.Queue[FetchOutcome]) -> None:
        outcome = FetchOutcome.FAILURE
        try:
            await self._fetch_to_disk(att)
            outcome = FetchOutcome.SUCCESS
        except Exception as e:
            l.warning(f"media: {att.source_url!r} failed: {e}")
        results.put_nowait(outcome)

    async def _fetch_to_disk(self, att: Attachment) -> None:
        if att.local_path.is_file():
            l.debug(f"media: {att.local_path} already present, skipping {att.source_url!r}")
            return

        try:
            status, body = await self.source.get(att.source_url)
        except Exception as e:
            raise NetworkError(f"GET {att.source_url} failed: {e}") from e
        if status != 200:
            raise NetworkError(f"GET {att.source_url} returned HTTP {status}")

        try:
            # Another task may create the directory first; that is fine
            att.local_path.parent.mkdir(parents=True, exist_ok=True)
            # Exclusive create: a file that appeared meanwhile is a failure
            f = open(att.local_path, "xb")
        except OSError as e:
            raise FilesystemError(f"cannot create {att.local_path}: {e}") from e

        try:
            with f:
                f.write(body)
        except OSError as e:
            # The file is ours; a truncated copy must not pass as cached
            att.local_path.unlink(missing_ok=True)
            raise FilesystemError(f"cannot write {att.local_path}: {e}") from e
        l.debug(f"media: saved {att.source_url!r} → {att.local_path} ({len(body)} bytes)")

    async def _open_downloaded(self, attachments: list[Attachment]) -> None:
        opened = False
        for att in reversed(attachments):
            if not att.local_path.is_file():
                continue
            if opened:
                await asyncio.sleep(self.open_interval)
            await self.viewer.open(att.local_path)
            opened = True
