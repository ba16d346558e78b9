"""Unit tests for core data models."""

from fleetgate.core.models import (
    CheckResult,
    Node,
    Proposal,
    RepositoryCheckReport,
    RepositoryStatus,
    RoleStateRule,
)


class TestRoleStateRule:
    """Tests for RoleStateRule parsing."""

    def test_all_in_list_means_any_state(self):
        rule = RoleStateRule.from_declaration(["ready", "all"])

        assert rule.all_states is True
        assert rule.permits("crowbar_upgrade")
        assert rule.describe() == ["all"]

    def test_explicit_states(self):
        rule = RoleStateRule.from_declaration(["ready", "readying"])

        assert rule.permits("ready")
        assert not rule.permits("applying")
        assert rule.describe() == ["ready", "readying"]

    def test_missing_declaration_means_any_state(self):
        assert RoleStateRule.from_declaration(None).permits("anything")


class TestNode:
    """Tests for Node helpers."""

    def test_element_states(self):
        node = Node(
            name="n1",
            attributes={"nova": {"element_states": {"nova-controller": ["ready"]}}},
        )

        rules = node.element_states("nova")

        assert rules is not None
        assert rules["nova-controller"].permits("ready")
        assert node.element_states("keystone") is None

    def test_attribute_path(self):
        node = Node(name="n1", attributes={"nova": {"use_migration": True}})

        assert node.attribute("nova.use_migration") is True
        assert node.attribute("nova.missing", "x") == "x"
        assert node.attribute("nova.use_migration.deeper") is None

    def test_ready(self):
        assert Node(name="n1").ready
        assert not Node(name="n1", state="applying").ready


class TestProposal:
    """Tests for Proposal helpers."""

    def test_display_name(self):
        assert Proposal(barclamp="keystone").display_name == "Keystone: Default"

    def test_elements_and_attribute(self):
        proposal = Proposal(
            barclamp="swift",
            attributes={"swift": {"replicas": 3}},
            deployment={"swift": {"elements": {"swift-storage": ["node1", "node2"]}}},
        )

        assert proposal.attribute("replicas") == 3
        assert proposal.attribute("missing", 0) == 0
        assert proposal.elements() == {"swift-storage": ["node1", "node2"]}

    def test_elements_without_deployment(self):
        assert Proposal(barclamp="nova").elements() == {}


class TestRepositoryCheckReport:
    """Tests for repository report helpers."""

    def test_missing_and_available(self):
        report = RepositoryCheckReport(
            os=RepositoryStatus(available=True, repos=["SLES12-SP1-Pool", "SLES12-SP1-Updates"]),
            openstack=RepositoryStatus(
                available=False,
                repos=["SUSE-OpenStack-Cloud-6-Pool"],
                errors={"x86_64": {"missing": ["SUSE-OpenStack-Cloud-6-Pool"]}},
            ),
        )

        assert report.any_available
        assert not report.all_available
        assert report.missing_repos() == ["SUSE-OpenStack-Cloud-6-Pool"]
        assert report.available_repos() == ["SLES12-SP1-Pool", "SLES12-SP1-Updates"]


class TestCheckResult:
    """Tests for CheckResult.from_findings."""

    def test_no_findings_passes(self):
        result = CheckResult.from_findings("nodes_ready", {})

        assert result.passed is True
        assert result.findings == {}

    def test_findings_fail(self):
        result = CheckResult.from_findings("nodes_ready", {"nodes_not_ready": ["n1"]})

        assert result.passed is False
        assert "nodes_not_ready" in result.message
