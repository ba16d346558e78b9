"""Role applicability decisions."""

from fleetgate.roles.applicability import (
    BOOTSTRAP_ROLE,
    DecisionReason,
    RoleApplicabilityResolver,
    RoleDecision,
    is_role_applicable,
)

__all__ = [
    "BOOTSTRAP_ROLE",
    "DecisionReason",
    "RoleApplicabilityResolver",
    "RoleDecision",
    "is_role_applicable",
]
