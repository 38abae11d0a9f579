"""Environment-driven settings for the dashboard server."""

import os
import sys
from pathlib import Path


def get_storage_root() -> Path:
    """Return the path to OpenCode's storage directory."""
    env = os.environ.get("OMO_DASHBOARD_STORAGE_ROOT")
    if env:
        return Path(env)

    if sys.platform == "win32":
        return Path(os.environ.get("USERPROFILE", "")) / ".local" / "share" / "opencode" / "storage"
    else:  # macOS and Linux
        return Path.home() / ".local" / "share" / "opencode" / "storage"


def get_project_root() -> Path:
    """Return the project whose sessions are listed, as an absolute path."""
    env = os.environ.get("OMO_DASHBOARD_PROJECT_ROOT")
    if env:
        return Path(os.path.abspath(env))
    return Path.cwd()


def get_log_level() -> str:
    return os.environ.get("OMO_DASHBOARD_LOG_LEVEL", "INFO").strip().upper() or "INFO"
