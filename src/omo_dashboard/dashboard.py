"""Dashboard snapshot providers."""

import copy
from abc import ABC, abstractmethod
from typing import Optional


class DashboardStore(ABC):
    """Source of the pre-built dashboard payload served at ``/dashboard``.

    The live implementation lives outside this package and is injected into
    :func:`omo_dashboard.server.create_app` at startup.
    """

    @abstractmethod
    def get_snapshot(self) -> dict:
        """Return the current dashboard payload, already sanitized."""
        ...


def idle_snapshot() -> dict:
    """Payload for a dashboard with nothing running."""
    return {
        "mainSession": {
            "agent": "unknown",
            "currentModel": None,
            "currentTool": "-",
            "lastUpdatedLabel": "never",
            "session": "(no session)",
            "statusPill": "idle",
        },
        "planProgress": {
            "name": "(no active plan)",
            "completed": 0,
            "total": 0,
            "path": "",
            "statusPill": "not started",
            "steps": [],
        },
        "backgroundTasks": [],
        "timeSeries": {
            "windowMs": 0,
            "bucketMs": 0,
            "buckets": 0,
            "anchorMs": 0,
            "serverNowMs": 0,
            "series": [
                {"id": "overall-main", "label": "Overall", "tone": "muted", "values": []},
            ],
        },
        "raw": None,
    }


class StaticDashboardStore(DashboardStore):
    """Serves a fixed payload; the default when no live producer is wired in."""

    def __init__(self, payload: Optional[dict] = None):
        self._payload = payload if payload is not None else idle_snapshot()

    def get_snapshot(self) -> dict:
        return copy.deepcopy(self._payload)
