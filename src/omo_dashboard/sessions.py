"""Session metadata access for an OpenCode storage directory.

Storage layout:

    <storage>/session/<projectId>/<sessionId>.json
    <storage>/message/<sessionId>/<messageId>.json
    <storage>/part/<messageId>/<callId>.json

Individual files are read best-effort: anything unreadable or malformed is
logged and skipped so one bad file never breaks a listing.
"""

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Optional, Union

from .core import SessionListItem, SessionMeta, StorageRoots

logger = logging.getLogger(__name__)


def get_storage_roots(storage_root: Union[str, os.PathLike]) -> StorageRoots:
    root = Path(storage_root)
    return StorageRoots(
        session_dir=root / "session",
        message_dir=root / "message",
        part_dir=root / "part",
    )


def read_json_object(path: Path) -> Optional[dict]:
    """Parse a JSON file that must hold an object, or return None."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, RecursionError, OSError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Skipping %s: expected a JSON object", path)
        return None
    return data


def list_json_files(directory: Path) -> list[Path]:
    """Return the ``*.json`` files of a directory sorted by name."""
    try:
        return sorted(p for p in directory.glob("*.json") if p.is_file())
    except OSError as e:
        logger.warning("Failed to list %s: %s", directory, e)
        return []


def read_session_meta(ses_file: Path) -> Optional[SessionMeta]:
    """Parse a session JSON file into a SessionMeta, or None if malformed."""
    data = read_json_object(ses_file)
    if data is None:
        return None

    ses_id = data.get("id")
    directory = data.get("directory")
    if not isinstance(ses_id, str) or not isinstance(directory, str):
        logger.warning("Skipping session file %s: missing id or directory", ses_file)
        return None

    time_data = data.get("time")
    if not isinstance(time_data, dict):
        time_data = {}

    title = data.get("title")
    parent_id = data.get("parentID")
    return SessionMeta(
        id=ses_id,
        directory=directory,
        project_id=str(data.get("projectID") or ses_file.parent.name),
        title=title if isinstance(title, str) else None,
        created=time_data.get("created"),
        updated=time_data.get("updated"),
        parent_id=parent_id if isinstance(parent_id, str) else None,
    )


def read_main_session_metas(
    session_dir: Union[str, os.PathLike], project_root: Union[str, os.PathLike]
) -> list[SessionMeta]:
    """Return the sessions of every project dir whose ``directory`` is ``project_root``.

    The comparison is exact string equality, not a prefix match. A missing
    ``session_dir`` simply means there is no data yet.
    """
    session_dir = Path(session_dir)
    if not session_dir.is_dir():
        return []

    wanted = os.fspath(project_root)
    try:
        project_dirs = sorted(d for d in session_dir.iterdir() if d.is_dir())
    except OSError as e:
        logger.warning("Failed to list %s: %s", session_dir, e)
        return []

    metas = []
    # Project dirs are not path-guarded; the caller confines session_dir.
    for project_dir in project_dirs:
        for ses_file in list_json_files(project_dir):
            meta = read_session_meta(ses_file)
            if meta is not None and meta.directory == wanted:
                metas.append(meta)
    return metas


def get_message_dir(message_root: Union[str, os.PathLike], session_id: str) -> Optional[Path]:
    """Return the message directory for a session, or None if it does not exist.

    No confinement check happens here; callers run the path guard themselves.
    """
    msg_dir = Path(message_root) / session_id
    if not msg_dir.is_dir():
        return None
    return msg_dir


def finite_number(value: Any) -> Optional[float]:
    """Return ``value`` if it is a finite int/float (bools excluded), else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        # ints beyond float range
        return None
    return value


def to_session_list_item(meta: SessionMeta) -> SessionListItem:
    title = meta.title.strip() if isinstance(meta.title, str) else ""
    created = finite_number(meta.created)
    updated = finite_number(meta.updated)
    return SessionListItem(
        id=meta.id,
        title=title or None,
        created_at_ms=created if created is not None else 0,
        updated_at_ms=updated if updated is not None else 0,
    )


def sort_session_items(items: list[SessionListItem]) -> list[SessionListItem]:
    """Newest first: updated desc, then created desc, then id desc."""
    return sorted(
        items,
        key=lambda s: (s.updated_at_ms, s.created_at_ms, s.id),
        reverse=True,
    )


def list_sessions(
    session_dir: Union[str, os.PathLike], project_root: Union[str, os.PathLike]
) -> list[SessionListItem]:
    metas = read_main_session_metas(session_dir, project_root)
    return sort_session_items([to_session_list_item(m) for m in metas])
