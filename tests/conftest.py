"""
Pytest configuration and fixtures.
"""

import os
import sys
import tempfile
from pathlib import Path


def pytest_configure(config):
    """Put the repo root on sys.path and keep log files out of the working tree."""
    root = Path(__file__).parent.parent
    sys.path.insert(0, str(root))
    os.environ.setdefault("CHIRPTERM_LOG_DIR", tempfile.mkdtemp(prefix="chirpterm-logs-"))
