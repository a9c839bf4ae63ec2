"""Enum definitions for application constants."""

from enum import Enum, IntEnum


class Role(str, Enum):
    """
    Membership roles inside a company.

    - MANAGER: Company creator / administrator, sees every member
    - HR: Human resources staff, sees every member
    - EMPLOYEE: Regular member, sees only their own membership
    """
    MANAGER = "manager"
    HR = "hr"
    EMPLOYEE = "employee"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_

    @classmethod
    def coerce(cls, value: str | None) -> "Role":
        """Map unknown or empty input to EMPLOYEE instead of failing."""
        if value and cls.has_value(value):
            return cls(value)
        return cls.EMPLOYEE


class EmployeeStatus(str, Enum):
    """
    Employee lifecycle status.

    Each value maps to exactly one boolean column on the employee row;
    setting a status clears the other three.
    """
    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"
    DELETED = "deleted"


class CatalogStatus(str, Enum):
    """
    Department / job position status.

    DELETED removes the row (hard delete), unlike EmployeeStatus.DELETED.
    """
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class InviteStatus(IntEnum):
    """Stored status codes for user invites."""
    REJECTED = 0
    ACCEPTED = 1
    PENDING = 2


# Role-based visibility sets
ROLES_CAN_VIEW_ALL_MEMBERS = {Role.MANAGER, Role.HR}

# Listing order for company members: managers first, then hr, then others
ROLE_SORT_ORDER = {Role.MANAGER.value: 1, Role.HR.value: 2}
