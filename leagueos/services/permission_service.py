"""
Admin role resolution.
"""

import enum
from typing import Optional


class AdminRole(str, enum.Enum):
    GLOBAL_ADMIN = "GLOBAL_ADMIN"
    CLUB_ADMIN = "CLUB_ADMIN"
    USER = "USER"
    RECORDER = "RECORDER"
    UNKNOWN = "UNKNOWN"


def to_admin_role(role: Optional[str] = None, club_role: Optional[str] = None) -> AdminRole:
    """Effective role of an account. The club role, when set, takes precedence."""
    value = club_role if club_role is not None else role
    try:
        return AdminRole(str(value or "").strip().upper())
    except ValueError:
        return AdminRole.UNKNOWN


def can_access_admin(role: AdminRole) -> bool:
    return role in (AdminRole.GLOBAL_ADMIN, AdminRole.CLUB_ADMIN)


def can_manage_clubs(role: AdminRole) -> bool:
    return role == AdminRole.GLOBAL_ADMIN
