"""FastAPI web server for omo-dashboard."""

import logging
import os
import re
from typing import Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .dashboard import DashboardStore
from .paths import PathTraversalError, assert_allowed_path
from .sessions import get_message_dir, get_storage_roots, list_sessions
from .tool_calls import MAX_TOOL_CALL_MESSAGES, MAX_TOOL_CALLS, derive_tool_calls

logger = logging.getLogger(__name__)

SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,128}")


def _empty_tool_calls(session_id: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "sessionId": session_id, "toolCalls": []},
    )


def create_app(
    store: DashboardStore,
    storage_root: Union[str, os.PathLike],
    project_root: Union[str, os.PathLike],
) -> FastAPI:
    """Build the dashboard API.

    Nothing is cached between requests: storage paths are recomputed and
    files re-read on every call.
    """
    storage_root = os.fspath(storage_root)
    project_root = os.fspath(project_root)
    allowed_roots = [storage_root]

    app = FastAPI(title="omo-dashboard", version=__version__)

    @app.exception_handler(PathTraversalError)
    async def path_traversal_handler(request: Request, exc: PathTraversalError):
        logger.error("Unhandled path traversal on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "detail": "Internal Server Error"},
        )

    # ── Routes ───────────────────────────────────────────────────────

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/dashboard")
    def dashboard():
        return store.get_snapshot()

    @app.get("/sessions")
    def sessions():
        """Sessions of the configured project, newest first."""
        storage = get_storage_roots(storage_root)
        try:
            assert_allowed_path(storage.session_dir, allowed_roots)
        except PathTraversalError as e:
            # An unusable storage root reads as "no data yet".
            logger.warning("Session directory rejected: %s", e)
            return {"ok": True, "sessions": []}

        items = list_sessions(storage.session_dir, project_root)
        return {"ok": True, "sessions": [item.to_dict() for item in items]}

    @app.get("/tool-calls/{session_id}")
    def tool_calls(session_id: str):
        """Redacted tool calls for one session."""
        if not SESSION_ID_PATTERN.fullmatch(session_id):
            return _empty_tool_calls(session_id, 400)

        storage = get_storage_roots(storage_root)
        message_dir = get_message_dir(storage.message_dir, session_id)
        if message_dir is None:
            return _empty_tool_calls(session_id, 404)

        # Not caught here: a rejected path surfaces as a server error.
        assert_allowed_path(message_dir, allowed_roots)

        result = derive_tool_calls(storage, session_id, allowed_roots)
        return {
            "ok": True,
            "sessionId": session_id,
            "toolCalls": result.tool_calls,
            "caps": {
                "maxMessages": MAX_TOOL_CALL_MESSAGES,
                "maxToolCalls": MAX_TOOL_CALLS,
            },
            "truncated": result.truncated,
        }

    return app
