"""Predicate query language over fleet nodes.

A query is one or more ``key:value`` terms joined by ``AND``; any term may be
prefixed with ``NOT``::

    roles:ceph-* AND ceph.config.environment:*
    NOT roles:ceph-*
    pacemaker.founder:true AND pacemaker.config.environment:*

``roles`` (alias ``run_list_map``) matches role membership. ``name``, ``state``,
``architecture`` and ``admin`` match node fields. Every other key is a dotted
path into the node's attribute bag. Values are shell-style globs; a bare ``*``
means the key is present.
"""

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any

from fleetgate.core.exceptions import QueryError
from fleetgate.core.models import Node

ROLE_KEYS = frozenset({"roles", "run_list_map"})
FIELD_KEYS = frozenset({"name", "state", "architecture", "admin"})

# Nodes that founded a deployed pacemaker cluster, and nodes of a deployed Ceph cluster.
FOUNDER_QUERY = "pacemaker.founder:true AND pacemaker.config.environment:*"
CEPH_NODES_QUERY = "roles:ceph-* AND ceph.config.environment:*"

_AND = re.compile(r"\s+AND\s+")
_MISSING = object()


def _normalize(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class QueryTerm:
    """A single ``[NOT] key:value`` predicate."""

    key: str
    pattern: str
    negated: bool = False

    def matches(self, node: Node) -> bool:
        """Evaluate the term against a node."""
        result = self._positive_match(node)
        return not result if self.negated else result

    def _positive_match(self, node: Node) -> bool:
        if self.key in ROLE_KEYS:
            return any(fnmatchcase(role, self.pattern) for role in node.roles)

        if self.key in FIELD_KEYS:
            value = getattr(node, self.key)
        else:
            value = node.attribute(self.key, _MISSING)
            if value is _MISSING or value is None:
                return False

        if self.pattern == "*":
            return True
        return fnmatchcase(_normalize(value), self.pattern)


@dataclass(frozen=True)
class NodeQuery:
    """Conjunction of query terms."""

    terms: tuple[QueryTerm, ...]

    @classmethod
    def parse(cls, text: str) -> "NodeQuery":
        """Parse a query string.

        Args:
            text: Query text

        Returns:
            Parsed query

        Raises:
            QueryError: If a term is not of the form ``[NOT] key:value``
        """
        if not text or not text.strip():
            raise QueryError("Empty fleet query")

        terms = []
        for raw in _AND.split(text.strip()):
            raw = raw.strip()
            negated = False
            if raw.startswith("NOT "):
                negated = True
                raw = raw[4:].strip()

            key, sep, pattern = raw.partition(":")
            if not sep or not key or not pattern:
                raise QueryError(f"Malformed query term {raw!r} in {text!r}")

            terms.append(QueryTerm(key=key.strip(), pattern=pattern.strip(), negated=negated))

        return cls(terms=tuple(terms))

    def matches(self, node: Node) -> bool:
        """Whether every term matches the node."""
        return all(term.matches(node) for term in self.terms)

    def filter(self, nodes: list[Node]) -> list[Node]:
        """Matching nodes, preserving input order."""
        return [node for node in nodes if self.matches(node)]
