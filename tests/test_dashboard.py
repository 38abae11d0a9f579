"""Tests for the dashboard snapshot providers."""

from omo_dashboard.dashboard import StaticDashboardStore, idle_snapshot


def test_default_snapshot_is_idle():
    snapshot = StaticDashboardStore().get_snapshot()
    assert snapshot == idle_snapshot()
    assert snapshot["mainSession"]["statusPill"] == "idle"


def test_snapshot_is_a_copy():
    store = StaticDashboardStore({"backgroundTasks": []})
    store.get_snapshot()["backgroundTasks"].append({"id": "bg_1"})
    assert store.get_snapshot() == {"backgroundTasks": []}
