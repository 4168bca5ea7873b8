"""Access Policy - Role-Based Admission Decisions.

The policy is a total function over the closed StaffRole set. Roles missing
from the decision table, and actors that do not carry a StaffRole at all,
resolve to DENY.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from src.domain.enums import AccessDecision, StaffRole

DEFAULT_ROLE_DECISIONS: Mapping[StaffRole, AccessDecision] = MappingProxyType({
    StaffRole.DOCTOR: AccessDecision.ALLOW,          # full access
    StaffRole.NURSE: AccessDecision.ALLOW,           # limited access
    StaffRole.ADMINISTRATOR: AccessDecision.ALLOW,   # admin controls
})


def resolve_role(actor: object) -> StaffRole:
    """Role tag of `actor`; OTHER when the actor carries no StaffRole."""
    if isinstance(actor, StaffRole):
        return actor
    role = getattr(actor, "role", None)
    return role if isinstance(role, StaffRole) else StaffRole.OTHER


class AccessPolicy:
    """Maps an actor's role to ALLOW or DENY.

    Parameters:
        decisions: Role -> decision table (defaults to DEFAULT_ROLE_DECISIONS)
    """

    def __init__(self, decisions: Optional[Mapping[StaffRole, AccessDecision]] = None):
        table = DEFAULT_ROLE_DECISIONS if decisions is None else decisions
        self._decisions = MappingProxyType(dict(table))

    def decide(self, actor: object) -> AccessDecision:
        return self._decisions.get(resolve_role(actor), AccessDecision.DENY)

    def is_allowed(self, actor: object) -> bool:
        return self.decide(actor) is AccessDecision.ALLOW
