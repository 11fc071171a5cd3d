"""
Role gate - which capabilities each staff role holds.

Owners hold every capability; managers, leaders and employees can only read
and edit the schedule. Public booking and rating need no principal at all.
"""

from enum import Enum


class Role(str, Enum):
    OWNER = "owner"
    MANAGER = "manager"
    LEADER = "leader"
    EMPLOYEE = "employee"


class Capability(str, Enum):
    MANAGE_SCHEDULE = "read/write schedule"
    MANAGE_USERS = "manage users"
    VIEW_BOOKING_LINK = "view booking link"
    VIEW_RATINGS = "view ratings dashboard"


STAFF_CAPABILITIES = frozenset({Capability.MANAGE_SCHEDULE})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.OWNER: frozenset(Capability),
    Role.MANAGER: STAFF_CAPABILITIES,
    Role.LEADER: STAFF_CAPABILITIES,
    Role.EMPLOYEE: STAFF_CAPABILITIES,
}


def has_capability(role, capability) -> bool:
    """Pure lookup; unknown roles or capabilities hold nothing"""
    try:
        role = Role(role)
        capability = Capability(capability)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES[role]


def capabilities_for(role) -> list[Capability]:
    try:
        granted = ROLE_CAPABILITIES[Role(role)]
    except ValueError:
        return []
    return [c for c in Capability if c in granted]
