from __future__ import annotations

import pytest

from services import viewer as viewer_module
from services.viewer import ViewerLauncher, default_command


class FakeProcess:
    def __init__(self, code: int = 0):
        self.code = code

    async def wait(self) -> int:
        return self.code


def test_default_command_per_platform():
    assert default_command("linux") == "xdg-open"
    assert default_command("darwin") == "open"
    assert default_command("win32") is None


@pytest.mark.asyncio
async def test_open_runs_configured_command(monkeypatch):
    calls = []

    async def fake_exec(*argv, **kwargs):
        calls.append(argv)
        return FakeProcess()

    monkeypatch.setattr(viewer_module.asyncio, "create_subprocess_exec", fake_exec)
    await ViewerLauncher("feh --scale-down").open("/tmp/chirpterm/a.jpg")
    assert calls == [("feh", "--scale-down", "/tmp/chirpterm/a.jpg")]


@pytest.mark.asyncio
async def test_open_noop_when_disabled_or_unsupported(monkeypatch):
    calls = []

    async def fake_exec(*argv, **kwargs):
        calls.append(argv)
        return FakeProcess()

    monkeypatch.setattr(viewer_module.asyncio, "create_subprocess_exec", fake_exec)
    await ViewerLauncher("feh", enabled=False).open("/tmp/x.png")

    monkeypatch.setattr(viewer_module.sys, "platform", "win32")
    await ViewerLauncher().open("/tmp/x.png")

    assert calls == []


@pytest.mark.asyncio
async def test_missing_viewer_binary_is_not_fatal(monkeypatch):
    async def fake_exec(*argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(viewer_module.asyncio, "create_subprocess_exec", fake_exec)
    await ViewerLauncher("no-such-viewer").open("/tmp/x.png")
