"""
Role → capability table.

The single source of truth for what a role may do. Admin holds every
capability, so no route needs an inline admin override.
"""
from __future__ import annotations

import enum

from vine_portal.models.user import UserRole


class Capability(str, enum.Enum):
    profile = "profile"
    kids_checkin = "kids-checkin"
    manage_members = "manage-members"
    manage_visitors = "manage-visitors"
    admin_panel = "admin-panel"


ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.admin: frozenset(Capability),
    UserRole.trainee: frozenset({Capability.profile, Capability.admin_panel}),
    UserRole.leader: frozenset({
        Capability.profile,
        Capability.kids_checkin,
        Capability.manage_members,
        Capability.manage_visitors,
    }),
    UserRole.teacher: frozenset({Capability.profile, Capability.kids_checkin}),
    UserRole.member: frozenset({Capability.profile}),
}

ROLE_LABELS: dict[UserRole, dict[str, str]] = {
    UserRole.member: {"pt": "Membro", "en": "Member"},
    UserRole.teacher: {"pt": "Professor(a)", "en": "Teacher"},
    UserRole.leader: {"pt": "Líder", "en": "Leader"},
    UserRole.admin: {"pt": "Administrador", "en": "Administrator"},
    UserRole.trainee: {"pt": "Estagiário", "en": "Trainee"},
}

# Flag names the portal UI reads.
_FLAG_NAMES: dict[Capability, str] = {
    Capability.profile: "canAccessProfile",
    Capability.kids_checkin: "canAccessKidsCheckin",
    Capability.manage_members: "canManageMembers",
    Capability.manage_visitors: "canManageVisitors",
    Capability.admin_panel: "canAccessAdmin",
}


def has_capability(role: UserRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(UserRole(role), frozenset())


def role_satisfies(role: UserRole, required_role: UserRole | None) -> bool:
    """A role satisfies a required role when equal to it, or when it is admin."""
    if required_role is None:
        return True
    return role == required_role or role == UserRole.admin


def permission_flags(role: UserRole) -> dict[str, bool]:
    granted = ROLE_CAPABILITIES[UserRole(role)]
    return {flag: cap in granted for cap, flag in _FLAG_NAMES.items()}


def role_label(role: UserRole, locale: str = "pt") -> str:
    labels = ROLE_LABELS[UserRole(role)]
    return labels.get(locale, labels["en"])
