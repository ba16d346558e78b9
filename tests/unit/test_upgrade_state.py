"""Unit tests for UpgradeStateStore."""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from fleetgate.core.exceptions import UpgradeConflictError
from fleetgate.core.models import UpgradeState
from fleetgate.upgrade.state import (
    FAILED_MARKER,
    SUCCEEDED_MARKER,
    UPGRADING_MARKER,
    UpgradeStateStore,
)


@pytest.fixture
def store(tmp_path: Path) -> UpgradeStateStore:
    """Provide a store in a fresh directory."""
    return UpgradeStateStore(tmp_path / "install")


class TestUpgradeStateStore:
    """Tests for marker-based upgrade state."""

    def test_initially_idle(self, store: UpgradeStateStore):
        assert store.state() == UpgradeState.IDLE
        assert store.flags() == {"upgrading": False, "success": False, "failed": False}
        assert store.failure_details() is None

    def test_marker_names(self, store: UpgradeStateStore):
        assert store.upgrading_path.name == UPGRADING_MARKER == "admin_server_upgrading"
        assert store.succeeded_path.name == SUCCEEDED_MARKER == "admin-server-upgraded-ok"
        assert store.failed_path.name == FAILED_MARKER == "admin-server-upgrade-failed"

    def test_idle_to_upgrading(self, store: UpgradeStateStore):
        store.mark_upgrading()

        assert store.state() == UpgradeState.UPGRADING
        assert store.upgrading_path.exists()

    def test_second_start_conflicts_without_change(self, store: UpgradeStateStore):
        store.mark_upgrading()
        before = store.upgrading_path.read_text()

        with pytest.raises(UpgradeConflictError):
            store.mark_upgrading()

        assert store.state() == UpgradeState.UPGRADING
        assert store.upgrading_path.read_text() == before

    def test_concurrent_starts_exactly_one_wins(self, store: UpgradeStateStore):
        def attempt() -> bool:
            try:
                store.mark_upgrading()
            except UpgradeConflictError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(lambda _: attempt(), range(8)))

        assert outcomes.count(True) == 1

    def test_mark_failed(self, store: UpgradeStateStore):
        store.mark_upgrading()

        store.mark_failed("admin", data="boom", help="Check the log")

        assert store.state() == UpgradeState.FAILED
        assert not store.is_upgrading()
        details = store.failure_details()
        assert details["admin"] == {"data": "boom", "help": "Check the log"}
        assert "failed_at" in details

    def test_mark_succeeded(self, store: UpgradeStateStore):
        store.mark_upgrading()

        store.mark_succeeded()

        assert store.state() == UpgradeState.SUCCEEDED
        assert store.flags() == {"upgrading": False, "success": True, "failed": False}

    def test_upgrading_shadows_terminal_markers(self, store: UpgradeStateStore):
        store.mark_failed("admin", data="old", help="")
        store.mark_upgrading()

        assert store.state() == UpgradeState.UPGRADING

    def test_failed_takes_precedence_over_succeeded(self, store: UpgradeStateStore):
        store.mark_succeeded()
        store.mark_failed("admin", data="x", help="y")

        assert store.state() == UpgradeState.FAILED

    def test_readers_only_test_existence(self, store: UpgradeStateStore):
        store.state_dir.mkdir(parents=True)
        store.failed_path.write_text("")

        assert store.is_failed()
        assert store.failure_details() == {}

    def test_failed_payload_is_json(self, store: UpgradeStateStore):
        store.mark_failed("repocheck_crowbar", data="locked", help="wait")

        payload = json.loads(store.failed_path.read_text())
        assert payload["repocheck_crowbar"]["data"] == "locked"
