# Shared logger for chirpterm.
#
# Every module does ``l = log.get_logger()`` and logs f-strings. Console output
# goes to stderr (stdout carries rendered timeline text); the file under
# CHIRPTERM_LOG_DIR keeps everything from DEBUG up. API tokens registered via
# register_sensitive() are masked in both.

import logging
import os
import sys
from datetime import datetime

import services.util as u

# level → (tag, ANSI color)
_LEVEL_TAGS = {
    logging.DEBUG:    ('DBG', '\033[36m'),
    logging.INFO:     ('INF', '\033[32m'),
    logging.WARNING:  ('WRN', '\033[33m'),
    logging.ERROR:    ('ERR', '\033[31m'),
    logging.CRITICAL: ('CRT', '\033[91m\033[1m'),
}
_RESET = '\033[0m'

_sensitive: set[str] = set()


def register_sensitive(values: frozenset[str]) -> None:
    """Register secret strings that must never appear in log output."""
    _sensitive.clear()
    # Short values would mask ordinary words
    _sensitive.update(v for v in values if len(v) >= 8)


class MaskingFilter(logging.Filter):
    """Replaces registered secrets with ``***``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _sensitive:
            msg = record.getMessage()
            for secret in _sensitive:
                msg = msg.replace(secret, "***")
            record.msg = msg
            record.args = ()
        return True


class ConsoleFormatter(logging.Formatter):
    """``[time] [TAG] | file:line | message``, tag colored on a terminal."""

    def __init__(self, color: bool):
        super().__init__()
        self.color = color

    def format(self, record):
        stamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        tag, ansi = _LEVEL_TAGS.get(record.levelno, (record.levelname[:3], ''))
        level = f'[{tag}]'
        if self.color and ansi:
            level = ansi + level + _RESET
        try:
            where = os.path.relpath(record.pathname)
        except ValueError:
            where = record.pathname
        return f"[{stamp}] {level} | {where}:{record.lineno} | {record.getMessage()}"


def _log_file_path(directory: str) -> str:
    os.makedirs(directory, exist_ok=True)
    # e.g. 20250915-150316061.log
    return os.path.join(directory, datetime.now().strftime("%Y%m%d-%H%M%S%f")[:-3] + ".log")


logger = logging.getLogger('chirpterm')
logger.setLevel(logging.DEBUG)
logger.propagate = False
for _old in list(logger.handlers):
    _old.close()
    logger.removeHandler(_old)
logger.filters.clear()
logger.addFilter(MaskingFilter())

console_handler = logging.StreamHandler(sys.stderr)
console_handler.setFormatter(ConsoleFormatter(color=sys.stderr.isatty()))
console_handler.setLevel(logging.INFO)
logger.addHandler(console_handler)

LOG_FILE_PATH = _log_file_path(u.get_log_path())
file_handler = logging.FileHandler(LOG_FILE_PATH, encoding='utf-8')
file_handler.setFormatter(logging.Formatter(
    '[%(asctime)s] [%(levelname)s] | %(filename)s:%(lineno)d | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
))
file_handler.setLevel(logging.DEBUG)
logger.addHandler(file_handler)


def set_console_level(level: str) -> None:
    """Change the console verbosity, e.g. ``"DEBUG"`` for ``--verbose``."""
    console_handler.setLevel(level.upper())


def get_logger(name=None):
    """Return the shared logger; *name* is accepted for call-site readability."""
    return logger
