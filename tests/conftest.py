"""Shared test fixtures for omo-dashboard."""

import json

import pytest

SENSITIVE_KEYS = {"prompt", "input", "output", "error", "state"}


def has_sensitive_keys(value) -> bool:
    """True if any dict key at any depth is one of the sensitive keys."""
    if isinstance(value, list):
        return any(has_sensitive_keys(item) for item in value)
    if isinstance(value, dict):
        for key, child in value.items():
            if key in SENSITIVE_KEYS or has_sensitive_keys(child):
                return True
    return False


@pytest.fixture
def storage_root(tmp_path):
    """An empty OpenCode storage directory with its three sub-trees."""
    storage = tmp_path / "storage"
    for name in ("session", "message", "part"):
        (storage / name).mkdir(parents=True)
    return storage


@pytest.fixture
def project_root(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def write_session(storage_root):
    """Write ``session/<projectId>/<sessionId>.json``."""

    def _write(project_id, session_id, directory, time, title=None, parent_id=None):
        ses_dir = storage_root / "session" / project_id
        ses_dir.mkdir(parents=True, exist_ok=True)
        meta = {
            "id": session_id,
            "projectID": project_id,
            "directory": str(directory),
            "time": time,
        }
        if isinstance(title, str):
            meta["title"] = title
        if parent_id:
            meta["parentID"] = parent_id
        path = ses_dir / f"{session_id}.json"
        path.write_text(json.dumps(meta), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_message(storage_root):
    """Write ``message/<sessionId>/<messageId>.json``."""

    def _write(session_id, message_id, created=None, role="assistant"):
        msg_dir = storage_root / "message" / session_id
        msg_dir.mkdir(parents=True, exist_ok=True)
        meta = {"id": message_id, "sessionID": session_id, "role": role}
        if created is not None:
            meta["time"] = {"created": created}
        path = msg_dir / f"{message_id}.json"
        path.write_text(json.dumps(meta), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_part(storage_root):
    """Write ``part/<messageId>/<callId>.json``; a tool part unless ``type`` says otherwise."""

    def _write(session_id, message_id, call_id, tool="bash", state=None, type="tool"):
        prt_dir = storage_root / "part" / message_id
        prt_dir.mkdir(parents=True, exist_ok=True)
        part = {
            "id": f"prt_{call_id}",
            "sessionID": session_id,
            "messageID": message_id,
            "type": type,
        }
        if type == "tool":
            part["callID"] = call_id
            part["tool"] = tool
            part["state"] = state if state is not None else {"status": "completed", "input": {}}
        else:
            part["text"] = "hello"
        path = prt_dir / f"{call_id}.json"
        path.write_text(json.dumps(part), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def find_sensitive():
    return has_sensitive_keys
