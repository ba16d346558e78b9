"""Decide whether a barclamp role may run on a node in its current state."""

from dataclasses import dataclass, field
from enum import Enum

from fleetgate.core.models import APPLYING_STATE, Node

# Always runs: heartbeat, and it sets up access to the barclamp library.
BOOTSTRAP_ROLE = "deployer-client"
# Roles that run on the admin node before any proposal was applied to it.
ADMIN_BOOTSTRAP_ROLES = frozenset({"crowbar", BOOTSTRAP_ROLE})


class DecisionReason(str, Enum):
    """Which rule produced a decision."""

    BOOTSTRAP_ROLE = "bootstrap_role"
    APPLYING_FOR = "applying_for"
    NOT_APPLYING_FOR = "not_applying_for"
    STATE_ALLOWED = "state_allowed"
    STATE_NOT_ALLOWED = "state_not_allowed"
    ADMIN_BOOTSTRAP = "admin_bootstrap"
    NO_BARCLAMP_ATTRIBUTES = "no_barclamp_attributes"


@dataclass(frozen=True)
class RoleDecision:
    """Outcome of an applicability decision with its diagnostic.

    ``detail`` lists the roles permitted while applying, or the states the role
    is valid in, depending on ``reason``.
    """

    allowed: bool
    reason: DecisionReason
    detail: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.allowed

    def message(self, node: Node, role: str) -> str:
        """Human-readable explanation, suitable for an info log line."""
        if self.reason == DecisionReason.NOT_APPLYING_FOR:
            return (
                f'Skipping role "{role}" because node is applying. '
                f"Only the following roles are considered: {', '.join(self.detail)}."
            )
        if self.reason == DecisionReason.STATE_NOT_ALLOWED:
            return (
                f'Skipping role "{role}" because node is in state "{node.state}". '
                f'Role "{role}" only applies in the following states: '
                f"{', '.join(self.detail)}."
            )
        if self.reason == DecisionReason.NO_BARCLAMP_ATTRIBUTES:
            return (
                f'Skipping role "{role}" because node does not have applied proposal '
                f"for {role} in its runlist."
            )
        return f'Role "{role}" applies to node {node.name} ({self.reason.value}).'


class RoleApplicabilityResolver:
    """Pure decision function over (node, barclamp, role).

    Rules, first match wins:

    1. A node in ``applying`` state only runs the bootstrap role and the roles
       listed for the barclamp in its in-flight ``applying_for`` map.
    2. A node with attributes for the barclamp runs the role if the role's
       ``element_states`` rule is missing, is the wildcard, or names the node state.
    3. A node without attributes for the barclamp runs nothing, except the
       bootstrap roles on the admin node.
    """

    def evaluate(self, node: Node, barclamp: str, role: str) -> RoleDecision:
        """Decide applicability and explain it.

        Args:
            node: Node to evaluate
            barclamp: Barclamp owning the role
            role: Role name

        Returns:
            RoleDecision carrying the verdict and diagnostic detail
        """
        if node.state == APPLYING_STATE:
            return self._applying(node, barclamp, role)

        if node.has_barclamp(barclamp):
            rules = node.element_states(barclamp)
            rule = rules.get(role) if rules is not None else None
            if rule is None or rule.permits(node.state):
                return RoleDecision(True, DecisionReason.STATE_ALLOWED)
            return RoleDecision(False, DecisionReason.STATE_NOT_ALLOWED, rule.describe())

        if node.admin and role in ADMIN_BOOTSTRAP_ROLES:
            return RoleDecision(True, DecisionReason.ADMIN_BOOTSTRAP)
        return RoleDecision(False, DecisionReason.NO_BARCLAMP_ATTRIBUTES)

    def is_role_applicable(self, node: Node, barclamp: str, role: str) -> bool:
        """Whether ``role`` of ``barclamp`` may currently run on ``node``."""
        return self.evaluate(node, barclamp, role).allowed

    @staticmethod
    def _applying(node: Node, barclamp: str, role: str) -> RoleDecision:
        if role == BOOTSTRAP_ROLE:
            return RoleDecision(True, DecisionReason.BOOTSTRAP_ROLE)
        if role in node.applying_for.get(barclamp, set()):
            return RoleDecision(True, DecisionReason.APPLYING_FOR)

        permitted = sorted({r for roles in node.applying_for.values() for r in roles})
        return RoleDecision(False, DecisionReason.NOT_APPLYING_FOR, permitted)


_default_resolver = RoleApplicabilityResolver()


def is_role_applicable(node: Node, barclamp: str, role: str) -> bool:
    """Module-level shortcut for :meth:`RoleApplicabilityResolver.is_role_applicable`."""
    return _default_resolver.is_role_applicable(node, barclamp, role)
