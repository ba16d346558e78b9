"""Unit tests for the fleet query language."""

import pytest

from fleetgate.core.exceptions import QueryError
from fleetgate.core.models import Node
from fleetgate.fleet.query import NodeQuery


@pytest.fixture
def nodes() -> list[Node]:
    """Provide a small fleet."""
    return [
        Node(
            name="controller1",
            roles=["pacemaker-cluster-member", "nova-controller"],
            attributes={
                "pacemaker": {"founder": True, "config": {"environment": "pacemaker-config-c1"}}
            },
        ),
        Node(
            name="storage1",
            state="crowbar_upgrade",
            roles=["ceph-osd"],
            attributes={"ceph": {"config": {"environment": "ceph-config-default"}}},
        ),
        Node(name="compute1", roles=["nova-compute-kvm"], architecture="aarch64"),
    ]


class TestNodeQuery:
    """Tests for NodeQuery parsing and matching."""

    def test_role_glob(self, nodes: list[Node]):
        matches = NodeQuery.parse("roles:nova-*").filter(nodes)
        assert [n.name for n in matches] == ["controller1", "compute1"]

    def test_not_prefix(self, nodes: list[Node]):
        matches = NodeQuery.parse("NOT roles:ceph-*").filter(nodes)
        assert [n.name for n in matches] == ["controller1", "compute1"]

    def test_and_with_attribute_presence(self, nodes: list[Node]):
        matches = NodeQuery.parse("roles:ceph-* AND ceph.config.environment:*").filter(nodes)
        assert [n.name for n in matches] == ["storage1"]

    def test_boolean_attribute(self, nodes: list[Node]):
        query = "pacemaker.founder:true AND pacemaker.config.environment:*"
        matches = NodeQuery.parse(query).filter(nodes)
        assert [n.name for n in matches] == ["controller1"]

    def test_missing_attribute_never_matches(self, nodes: list[Node]):
        assert NodeQuery.parse("nova.use_migration:*").filter(nodes) == []

    def test_node_fields(self, nodes: list[Node]):
        assert [n.name for n in NodeQuery.parse("state:crowbar_upgrade").filter(nodes)] == [
            "storage1"
        ]
        assert [n.name for n in NodeQuery.parse("architecture:aarch64").filter(nodes)] == [
            "compute1"
        ]

    def test_run_list_map_alias(self, nodes: list[Node]):
        matches = NodeQuery.parse("run_list_map:nova-compute-kvm").filter(nodes)
        assert [n.name for n in matches] == ["compute1"]

    @pytest.mark.parametrize("query", ["", "roles", "roles:", "NOT", ":value"])
    def test_malformed_query_raises(self, query: str):
        with pytest.raises(QueryError):
            NodeQuery.parse(query)
