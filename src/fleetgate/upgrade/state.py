"""Persisted admin upgrade state markers."""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fleetgate.core.exceptions import UpgradeConflictError, UpgradeError
from fleetgate.core.models import UpgradeState
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

UPGRADING_MARKER = "admin_server_upgrading"
SUCCEEDED_MARKER = "admin-server-upgraded-ok"
FAILED_MARKER = "admin-server-upgrade-failed"


class UpgradeStateStore:
    """Upgrade state persisted as three sentinel marker files.

    Readers only test for existence. The upgrading marker is created with
    ``O_CREAT | O_EXCL`` so at most one concurrent start attempt wins. Terminal
    markers stay until an operator removes them.
    """

    def __init__(self, state_dir: str | Path):
        """Initialize the store.

        Args:
            state_dir: Directory holding the marker files
        """
        self.state_dir = Path(state_dir)
        self.upgrading_path = self.state_dir / UPGRADING_MARKER
        self.succeeded_path = self.state_dir / SUCCEEDED_MARKER
        self.failed_path = self.state_dir / FAILED_MARKER

    def is_upgrading(self) -> bool:
        return self.upgrading_path.exists()

    def is_succeeded(self) -> bool:
        return self.succeeded_path.exists()

    def is_failed(self) -> bool:
        return self.failed_path.exists()

    def state(self) -> UpgradeState:
        """Current state; an in-progress upgrade shadows older terminal markers."""
        if self.is_upgrading():
            return UpgradeState.UPGRADING
        if self.is_failed():
            return UpgradeState.FAILED
        if self.is_succeeded():
            return UpgradeState.SUCCEEDED
        return UpgradeState.IDLE

    def flags(self) -> dict[str, bool]:
        """Upgrade progress flags as exposed by the status API."""
        return {
            "upgrading": self.is_upgrading(),
            "success": self.is_succeeded(),
            "failed": self.is_failed(),
        }

    def mark_upgrading(self) -> None:
        """Atomically create the upgrading marker.

        Raises:
            UpgradeConflictError: If an upgrade is already in progress
            UpgradeError: If the marker cannot be written
        """
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.upgrading_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            logger.warning("upgrade_already_in_progress", marker=str(self.upgrading_path))
            raise UpgradeConflictError("An upgrade is already in progress") from None
        except OSError as e:
            raise UpgradeError(f"Cannot create {self.upgrading_path}: {e}") from e

        with os.fdopen(fd, "w") as f:
            json.dump({"started_at": _now()}, f)

        logger.info("upgrade_marked_in_progress", marker=str(self.upgrading_path))

    def mark_failed(self, step: str, data: str, help: str) -> None:
        """Record a failed upgrade with diagnostic payload.

        Args:
            step: Upgrade step that failed (e.g. ``admin``, ``repocheck_crowbar``)
            data: Diagnostic detail
            help: Remediation hint for the operator
        """
        payload = {"failed_at": _now(), step: {"data": data, "help": help}}
        self._write(self.failed_path, payload)
        self.upgrading_path.unlink(missing_ok=True)
        logger.error("upgrade_marked_failed", step=step, data=data)

    def mark_succeeded(self) -> None:
        """Record a successful upgrade."""
        self._write(self.succeeded_path, {"finished_at": _now()})
        self.upgrading_path.unlink(missing_ok=True)
        logger.info("upgrade_marked_succeeded")

    def failure_details(self) -> dict[str, Any] | None:
        """Diagnostic payload of the failed marker, if any."""
        if not self.is_failed():
            return None
        try:
            return json.loads(self.failed_path.read_text() or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("failure_details_unreadable", error=str(e))
            return {}

    def _write(self, path: Path, payload: dict[str, Any]) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.tmp")
        tmp_path.write_text(json.dumps(payload))
        os.replace(tmp_path, path)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
