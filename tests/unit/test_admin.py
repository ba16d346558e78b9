"""Unit tests for the AdminServer upgrade API."""

from pathlib import Path
from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from fleetgate.adapters.inventory import InventoryFleetDirectory
from fleetgate.core.config import AddonsConfig, FleetGateConfig, UpgradeConfig
from fleetgate.core.exceptions import UpgradeError
from fleetgate.core.models import Node, ResponseStatus, UpgradeState
from fleetgate.upgrade.admin import AdminServer
from fleetgate.upgrade.state import UpgradeStateStore


@pytest.fixture
def launcher(tmp_path: Path) -> Path:
    """Provide an existing launcher script."""
    path = tmp_path / "upgrade_admin_server.sh"
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def admin_config(tmp_path: Path, launcher: Path) -> FleetGateConfig:
    """Provide configuration pointing at temporary paths."""
    return FleetGateConfig(
        upgrade=UpgradeConfig(state_dir=str(tmp_path / "install"), launcher_path=str(launcher))
    )


@pytest.fixture
def fleet() -> InventoryFleetDirectory:
    """Provide a fleet with Ceph and HA deployed."""
    return InventoryFleetDirectory(
        [
            Node(name="admin", admin=True),
            Node(
                name="controller1",
                attributes={
                    "pacemaker": {"founder": True, "config": {"environment": "pacemaker-c1"}}
                },
            ),
            Node(
                name="storage1",
                roles=["ceph-osd"],
                attributes={"ceph": {"config": {"environment": "ceph-default"}}},
            ),
        ]
    )


@pytest.fixture
def server(admin_config: FleetGateConfig, fleet: InventoryFleetDirectory) -> AdminServer:
    """Provide an admin server API."""
    return AdminServer(admin_config, fleet)


class TestStatus:
    """Tests for status and upgrade views."""

    def test_status(self, server: AdminServer, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CROWBAR_VERSION", "3.0")

        assert server.status() == {"version": "3.0", "addons": ["ceph", "ha"]}

    def test_version_unset(self, server: AdminServer, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CROWBAR_VERSION", raising=False)

        assert server.version() is None

    def test_addon_requires_installation(
        self, admin_config: FleetGateConfig, fleet: InventoryFleetDirectory
    ):
        admin_config.addons = AddonsConfig(installed=["ha"])

        assert AdminServer(admin_config, fleet).addons() == ["ha"]

    def test_addon_requires_deployment(self, admin_config: FleetGateConfig):
        fleet = InventoryFleetDirectory([Node(name="admin", admin=True)])

        assert AdminServer(admin_config, fleet).addons() == []

    def test_upgrade_includes_flags(self, server: AdminServer):
        report = server.upgrade()

        assert report["upgrade"] == {"upgrading": False, "success": False, "failed": False}
        assert "version" in report
        assert "addons" in report


class TestStartUpgrade:
    """Tests for start_upgrade."""

    def test_accepted_spawns_detached(self, server: AdminServer, launcher: Path):
        process = MagicMock(pid=4321)

        with patch("fleetgate.upgrade.admin.subprocess.Popen", return_value=process) as popen:
            result = server.start_upgrade()

        assert result.status == ResponseStatus.ACCEPTED
        assert result.pid == 4321
        assert server.state.is_upgrading()
        args, kwargs = popen.call_args
        assert args[0] == ["sudo", str(launcher)]
        assert kwargs["start_new_session"] is True

    def test_conflict_when_upgrading(self, server: AdminServer):
        server.state.mark_upgrading()

        with patch("fleetgate.upgrade.admin.subprocess.Popen") as popen:
            result = server.start_upgrade()

        assert result.status == ResponseStatus.CONFLICT
        assert result.key == "upgrade_ongoing"
        assert result.message
        popen.assert_not_called()
        assert server.state.is_upgrading()
        assert not server.state.is_failed()

    def test_conflict_when_losing_race(self, server: AdminServer):
        with (
            patch.object(UpgradeStateStore, "is_upgrading", return_value=False),
            patch("fleetgate.upgrade.admin.subprocess.Popen") as popen,
        ):
            server.state.upgrading_path.parent.mkdir(parents=True, exist_ok=True)
            server.state.upgrading_path.write_text("{}")
            result = server.start_upgrade()

        assert result.status == ResponseStatus.CONFLICT
        popen.assert_not_called()

    def test_missing_launcher(self, server: AdminServer, launcher: Path):
        launcher.unlink()

        result = server.start_upgrade()

        assert result.status == ResponseStatus.UNPROCESSABLE_ENTITY
        assert result.key == "upgrade_script_path"
        assert str(launcher) in result.message
        assert not server.state.is_upgrading()
        assert not server.state.is_failed()

    def test_unexpected_error_marks_failed_and_reraises(self, server: AdminServer):
        with patch(
            "fleetgate.upgrade.admin.subprocess.Popen",
            side_effect=PermissionError("sudo denied"),
        ):
            with pytest.raises(PermissionError, match="sudo denied"):
                server.start_upgrade()

        assert server.state.is_failed()
        assert not server.state.is_upgrading()
        details = server.state.failure_details()
        assert details["admin"]["data"] == "sudo denied"
        assert details["admin"]["help"]

    def test_state_write_failure_marks_failed_and_reraises(self, server: AdminServer):
        with (
            patch.object(
                UpgradeStateStore, "mark_upgrading", side_effect=UpgradeError("disk full")
            ),
            patch("fleetgate.upgrade.admin.subprocess.Popen") as popen,
        ):
            with pytest.raises(UpgradeError, match="disk full"):
                server.start_upgrade()

        popen.assert_not_called()
        assert server.state.state() == UpgradeState.FAILED
        assert server.state.failure_details()["admin"]["data"] == "disk full"

    def test_launcher_lookup_failure_marks_failed_and_reraises(self, server: AdminServer):
        launcher = MagicMock()
        launcher.exists.side_effect = PermissionError("permission denied")

        with patch.object(AdminServer, "launcher_path", new_callable=PropertyMock) as path:
            path.return_value = launcher
            with pytest.raises(PermissionError):
                server.start_upgrade()

        assert server.state.state() == UpgradeState.FAILED
