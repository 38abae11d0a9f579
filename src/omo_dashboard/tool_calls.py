"""Derive redacted tool-call views for one session.

Walks ``message/<sessionId>/`` in creation order, reads the ``tool`` parts
of each message from ``part/<messageId>/`` and strips sensitive payload
keys before anything leaves the process. Work per request is bounded by
``MAX_TOOL_CALL_MESSAGES`` and ``MAX_TOOL_CALLS``.
"""

import logging
import math
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .core import MessageMeta, StorageRoots, ToolCallResult
from .paths import assert_allowed_path
from .sessions import finite_number, list_json_files, read_json_object

logger = logging.getLogger(__name__)

MAX_TOOL_CALL_MESSAGES = 200
MAX_TOOL_CALLS = 300

SENSITIVE_KEYS = frozenset({"prompt", "input", "output", "error", "state"})


def redact(value: Any) -> Any:
    """Return a copy of a JSON tree with every sensitive key removed at any depth."""
    if isinstance(value, dict):
        return {k: redact(v) for k, v in value.items() if k not in SENSITIVE_KEYS}
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def _parse_message_meta(msg_file: Path) -> Optional[MessageMeta]:
    data = read_json_object(msg_file)
    if data is None:
        return None

    msg_id = data.get("id")
    if not isinstance(msg_id, str) or not msg_id:
        logger.warning("Skipping message file %s: missing id", msg_file)
        return None

    time_data = data.get("time")
    created = finite_number(time_data.get("created")) if isinstance(time_data, dict) else None
    role = data.get("role")
    session_id = data.get("sessionID")
    return MessageMeta(
        id=msg_id,
        session_id=session_id if isinstance(session_id, str) else "",
        role=role if isinstance(role, str) else "",
        created=created,
    )


def _message_sort_key(msg: MessageMeta):
    # Untimestamped messages go last; id keeps the order total.
    if msg.created is None:
        return (1, math.inf, msg.id)
    return (0, msg.created, msg.id)


def read_message_metas(message_dir: Path) -> list[MessageMeta]:
    """Parse the message files of a session in deterministic creation order."""
    messages = []
    for msg_file in list_json_files(message_dir):
        msg = _parse_message_meta(msg_file)
        if msg is not None:
            messages.append(msg)
    messages.sort(key=_message_sort_key)
    return messages


def read_tool_parts(part_dir: Path) -> list[dict]:
    """Return the ``type == "tool"`` parts of one message, sorted by file name."""
    if not part_dir.is_dir():
        return []
    parts = []
    for part_file in list_json_files(part_dir):
        part = read_json_object(part_file)
        if part is not None and part.get("type") == "tool":
            parts.append(part)
    return parts


def to_tool_call_view(part: dict) -> dict:
    """Project a tool part to its redacted view.

    ``state`` is dropped wholesale by redaction, so its status, title and
    timing are lifted to the top level first.
    """
    view = redact(part)
    state = part.get("state")
    if isinstance(state, dict):
        for key in ("status", "title"):
            if isinstance(state.get(key), str):
                view.setdefault(key, state[key])
        if isinstance(state.get("time"), dict):
            view.setdefault("time", redact(state["time"]))
    return view


def derive_tool_calls(
    storage: StorageRoots,
    session_id: str,
    allowed_roots: Iterable[Union[str, os.PathLike]],
) -> ToolCallResult:
    """Collect the redacted tool calls of a session, up to the fixed caps.

    Raises PathTraversalError if the message dir or any part dir resolves
    outside ``allowed_roots``. Malformed files are skipped.
    """
    roots = list(allowed_roots)
    message_dir = assert_allowed_path(storage.message_dir / session_id, roots)
    if not message_dir.is_dir():
        return ToolCallResult()

    messages = read_message_metas(message_dir)
    truncated = len(messages) > MAX_TOOL_CALL_MESSAGES
    if truncated:
        logger.info(
            "Session %s has %d messages; reading the first %d",
            session_id, len(messages), MAX_TOOL_CALL_MESSAGES,
        )

    tool_calls: list[dict] = []
    for msg in messages[:MAX_TOOL_CALL_MESSAGES]:
        part_dir = assert_allowed_path(storage.part_dir / msg.id, roots)
        parts = read_tool_parts(part_dir)
        if len(tool_calls) + len(parts) > MAX_TOOL_CALLS:
            tool_calls.extend(
                to_tool_call_view(p) for p in parts[: MAX_TOOL_CALLS - len(tool_calls)]
            )
            truncated = True
            logger.info("Session %s reached the %d tool call cap", session_id, MAX_TOOL_CALLS)
            break
        tool_calls.extend(to_tool_call_view(p) for p in parts)

    return ToolCallResult(tool_calls=tool_calls, truncated=truncated)
