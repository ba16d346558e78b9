"""Unit tests for MaintenanceUpdatesProbe."""

import pytest

from fleetgate.adapters.inventory import InventoryFleetDirectory
from fleetgate.core.models import Node
from fleetgate.interfaces.exceptions import RemoteExecutionError
from fleetgate.repositories.maintenance import MaintenanceUpdatesProbe

NEEDED_XML = """<?xml version='1.0'?>
<stream>
<update-status version="0.6">
<update-list>
<update kind="patch" name="SUSE-2017-101" category="security" status="needed"/>
<update kind="patch" name="SUSE-2017-099" category="security" status="applied"/>
<update kind="patch" name="SUSE-2017-102" status="needed"/>
</update-list>
</update-status>
</stream>
"""

NOTHING_XML = """<?xml version='1.0'?>
<stream><update-status version="0.6"><update-list/></update-status></stream>
"""


@pytest.fixture
def probe(fake_executor, admin_node: Node) -> MaintenanceUpdatesProbe:
    """Provide a probe over the fake executor."""
    return MaintenanceUpdatesProbe(fake_executor, InventoryFleetDirectory([admin_node]))


class TestMaintenanceUpdatesProbe:
    """Tests for updates_status."""

    @pytest.mark.asyncio
    async def test_needed_security_patches(self, probe: MaintenanceUpdatesProbe, fake_executor):
        fake_executor.on("list-patches", stdout=NEEDED_XML)

        status = await probe.updates_status()

        assert status == {"security_updates": ["SUSE-2017-101", "SUSE-2017-102"]}
        assert "--category security" in fake_executor.calls[0][1]

    @pytest.mark.asyncio
    async def test_nothing_pending(self, probe: MaintenanceUpdatesProbe, fake_executor):
        fake_executor.on("list-patches", stdout=NOTHING_XML)

        assert await probe.updates_status() == {}

    @pytest.mark.asyncio
    async def test_locked(self, probe: MaintenanceUpdatesProbe, fake_executor, locked_xml: str):
        fake_executor.on("list-patches", stdout=locked_xml)

        status = await probe.updates_status()

        assert status["errors"][0].startswith("System management is locked")

    @pytest.mark.asyncio
    async def test_unreachable(self, probe: MaintenanceUpdatesProbe, fake_executor):
        fake_executor.on("list-patches", RemoteExecutionError("timed out", node="admin"))

        assert await probe.updates_status() == {"errors": ["timed out"]}

    @pytest.mark.asyncio
    async def test_no_admin_node(self, fake_executor):
        probe = MaintenanceUpdatesProbe(fake_executor, InventoryFleetDirectory([]))

        assert await probe.updates_status() == {"errors": ["admin node not found"]}
