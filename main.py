import argparse
import asyncio
import importlib
import pkgutil
import sys
from pathlib import Path

from pydantic import ValidationError

import services.error  # installs global uncaught-exception hook
import services.logger as log
import services.config as config
from services.actions import ACTIONS
from services.colors import COLOR_DEFAULT, label_colors
from services.error import catch_and_log
from services.highlight import draw_text_with_auto_notice
from services.media import HttpAttachmentSource, MediaFetcher
from services.state import StatusChannel
from services.terminal import CellBuffer, draw_text, str_width
from services.viewer import ViewerLauncher

import drivers as _drivers_pkg

l = log.get_logger()


def _load_all_drivers() -> None:
    """Import every module in the ``drivers/`` package.

    Each driver module calls ``drivers.registry.register()`` at import time,
    so this one pass is enough to populate the registry.  The ``registry``
    module itself is skipped to avoid a circular bootstrap.
    """
    for _, mod_name, _ in pkgutil.iter_modules(_drivers_pkg.__path__):
        if mod_name != "registry":
            importlib.import_module(f"drivers.{mod_name}")


def _print_status(text: str) -> None:
    if text:
        print(text, file=sys.stderr)


def _make_client(instance: str | None):
    """Build the client for *instance*, or the first configured one."""
    from drivers.registry import all_drivers

    raw = config.load_raw()
    for name, (config_cls, client_cls) in all_drivers().items():
        for inst_id, inst_raw in (raw.get(name) or {}).items():
            if instance and inst_id != instance:
                continue
            try:
                cfg = config_cls.model_validate(inst_raw)
            except ValidationError as exc:
                l.critical(f"Config error in {name}.{inst_id}:\n{exc}")
                return None
            l.info(f"Using client: {name}/{inst_id}")
            return client_cls(inst_id, cfg)

    if instance:
        l.error(f"No client instance named '{instance}' in config")
    else:
        l.error("No client configured; add a driver block (e.g. 'rest') to the config")
    return None


def _status_channel() -> StatusChannel:
    return StatusChannel(config.app_config().status.clear_after, on_change=_print_status)


async def cmd_open(urls: list[str]) -> int:
    cfg = config.app_config()
    channel = _status_channel()
    consumer = asyncio.create_task(channel.run(), name="status")
    source = HttpAttachmentSource()
    fetcher = MediaFetcher(
        source,
        channel,
        ViewerLauncher(cfg.viewer.command, cfg.viewer.enabled),
        temp_dir=Path(cfg.media.temp_dir) if cfg.media.temp_dir else None,
        open_interval=cfg.media.open_interval,
    )
    try:
        failed = await fetcher.fetch_and_open(urls)
        await channel.flush()
    finally:
        await source.close()
        consumer.cancel()
        await asyncio.gather(consumer, return_exceptions=True)
    return 1 if failed else 0


async def cmd_action(action: str, status_id: int, instance: str | None) -> int:
    client = _make_client(instance)
    if client is None:
        return 1

    channel = _status_channel()
    consumer = asyncio.create_task(channel.run(), name="status")
    try:
        await client.start()
        await ACTIONS[action](client, status_id, channel)
        await channel.flush()
    finally:
        await client.close()
        consumer.cancel()
        await asyncio.gather(consumer, return_exceptions=True)
    return 1 if channel.current else 0


def cmd_highlight(text: str, user: str = "", user_id: str = "") -> int:
    label = f"{user} " if user else ""
    buf = CellBuffer(max(str_width(label) + str_width(text), 1))
    x = 0
    if label:
        fg = label_colors.color_for(user_id or user)
        x = draw_text(label, 0, 0, fg, COLOR_DEFAULT, buf)
    draw_text_with_auto_notice(text, x, 0, COLOR_DEFAULT, COLOR_DEFAULT, buf)
    print(buf.render()[0])
    return 0


def cmd_convert(src: str, dst: str) -> int:
    src_path = Path(src)
    dst_path = Path(dst)

    if not src_path.is_file():
        print(f"Error: source file not found: {src_path}", file=sys.stderr)
        return 1

    try:
        with catch_and_log(f"convert {src_path} → {dst_path}"):
            config.save_file(config.load_file(src_path), dst_path)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Converted {src_path} → {dst_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chirpterm", description="chirpterm timeline helpers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to the console")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_open = subparsers.add_parser("open", help="Download media URLs and open them in the viewer")
    p_open.add_argument("urls", nargs="+", help="Media URLs, in posting order")

    p_hl = subparsers.add_parser("highlight", help="Print text with mentions and hashtags highlighted")
    p_hl.add_argument("text")
    p_hl.add_argument("--user", default="", help="Screen name drawn as a colored label before the text")
    p_hl.add_argument("--user-id", default="", help="User id picking the label color (default: --user)")

    for action in ACTIONS:
        p_act = subparsers.add_parser(action, help=f"{action.capitalize()} a status")
        p_act.add_argument("status_id", type=int)
        p_act.add_argument("--instance", default=None, help="Client instance from the config (default: first)")

    conv = subparsers.add_parser("convert", help="Convert a config file between formats (json/yaml/toml)")
    conv.add_argument("src", help="Source config file (e.g. config.json)")
    conv.add_argument("dst", help="Destination config file (e.g. config.yaml)")

    return parser


def cli(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        log.set_console_level("DEBUG")

    if args.command == "convert":
        return cmd_convert(args.src, args.dst)
    if args.command == "highlight":
        return cmd_highlight(args.text, args.user, args.user_id)

    _load_all_drivers()
    log.register_sensitive(config.collect_sensitive(config.load_raw()))

    try:
        if args.command == "open":
            return asyncio.run(cmd_open(args.urls))
        return asyncio.run(cmd_action(args.command, args.status_id, args.instance))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(cli())
