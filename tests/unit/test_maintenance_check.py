"""Unit tests for MaintenanceUpdatesCheck."""

import pytest

from fleetgate.checks.services import MaintenanceUpdatesCheck

PRODUCTS_V6_V7_XML = """<?xml version='1.0'?>
<stream>
<product-list>
<product name="SLES" version="12.1" arch="x86_64" installed="true"/>
<product name="suse-openstack-cloud" version="6" arch="x86_64" installed="true"/>
<product name="suse-openstack-cloud" version="7" arch="x86_64" installed="false"/>
</product-list>
</stream>
"""

SLES_ONLY_XML = """<?xml version='1.0'?>
<stream>
<product-list>
<product name="SLES" version="12.1" arch="x86_64" installed="true"/>
</product-list>
</stream>
"""

NEEDED_XML = """<?xml version='1.0'?>
<stream>
<update-status version="0.6">
<update-list>
<update kind="patch" name="SUSE-2017-101" category="security" status="needed"/>
</update-list>
</update-status>
</stream>
"""

NOTHING_XML = """<?xml version='1.0'?>
<stream><update-status version="0.6"><update-list/></update-status></stream>
"""


class TestMaintenanceUpdatesCheck:
    """Tests for MaintenanceUpdatesCheck."""

    @pytest.mark.asyncio
    async def test_current_repos_missing(self, make_context, fake_executor, admin_node):
        fake_executor.on("--xmlout products", stdout=SLES_ONLY_XML)
        context = make_context(nodes=[admin_node])

        result = await MaintenanceUpdatesCheck().execute(context)

        assert result.findings == {
            "repositories_missing": "SUSE-OpenStack-Cloud-6-Pool, SUSE-OpenStack-Cloud-6-Updates"
        }

    @pytest.mark.asyncio
    async def test_next_repos_too_soon(self, make_context, fake_executor, admin_node):
        fake_executor.on("--xmlout products", stdout=PRODUCTS_V6_V7_XML)
        context = make_context(nodes=[admin_node])

        result = await MaintenanceUpdatesCheck().execute(context)

        assert result.findings == {
            "repositories_too_soon": "SUSE-OpenStack-Cloud-7-Pool, SUSE-OpenStack-Cloud-7-Updates"
        }

    @pytest.mark.asyncio
    async def test_pending_security_updates(
        self, make_context, fake_executor, admin_node, products_v6_xml
    ):
        fake_executor.on("--xmlout products", stdout=products_v6_xml)
        fake_executor.on("list-patches", stdout=NEEDED_XML)
        context = make_context(nodes=[admin_node])

        result = await MaintenanceUpdatesCheck().execute(context)

        assert result.findings == {
            "maintenance_updates": {"security_updates": ["SUSE-2017-101"]}
        }

    @pytest.mark.asyncio
    async def test_ready(self, make_context, fake_executor, admin_node, products_v6_xml):
        fake_executor.on("--xmlout products", stdout=products_v6_xml)
        fake_executor.on("list-patches", stdout=NOTHING_XML)
        context = make_context(nodes=[admin_node])

        result = await MaintenanceUpdatesCheck().execute(context)

        assert result.passed is True
        assert [node for node, _, _ in fake_executor.calls] == ["admin", "admin", "admin"]

    @pytest.mark.asyncio
    async def test_zypper_locked(self, make_context, fake_executor, admin_node, locked_xml):
        fake_executor.on("--xmlout products", stdout=locked_xml, exit_code=7)
        context = make_context(nodes=[admin_node])

        result = await MaintenanceUpdatesCheck().execute(context)

        assert list(result.findings) == ["zypper_errors"]
        assert result.findings["zypper_errors"].startswith("Zypper is locked")
