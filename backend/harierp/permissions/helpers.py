# Overview: Utility functions for permission lookups and validation.

from .definitions import PERMISSION_DEFINITIONS
from .roles import (
    ASSIGNABLE_ROLES,
    DEFAULT_ROLE_PERMISSIONS,
    JOB_ROLE_PERMISSION_ROLES,
    MODULE_ROLES,
)


def get_all_permission_codes():
    """Get list of all permission codes."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def get_permissions_by_category(category):
    """Get all permissions in a category."""
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code):
    """Get full definition for a permission code."""
    for perm in PERMISSION_DEFINITIONS:
        if perm[0] == code:
            return {
                "code": perm[0],
                "name": perm[1],
                "description": perm[2],
                "category": perm[3],
            }
    return None


def validate_permission_code(code):
    """Check if a permission code is valid."""
    return code in get_all_permission_codes()


def validate_role(role):
    """Check if a role name may be stored on a user."""
    return role in ASSIGNABLE_ROLES


def get_permission_roles(role):
    """
    Resolve a job role into its permission roles.

    A role with no mapping entry (e.g. "Store" assigned directly) maps to itself.
    """
    if not role:
        return []
    return list(JOB_ROLE_PERMISSION_ROLES.get(role, [role]))


def get_role_permission_codes(role):
    """Union of permission codes held by every permission role of a job role."""
    codes = set()
    for permission_role in get_permission_roles(role):
        codes.update(DEFAULT_ROLE_PERMISSIONS.get(permission_role, []))
    return codes


def get_role_modules(role, enabled=None):
    """
    Modules a role can open, in display order.

    enabled: optional {module: bool} visibility map; missing modules count as enabled.
    """
    permission_roles = set(get_permission_roles(role))
    modules = []
    for module, roles in MODULE_ROLES.items():
        if enabled is not None and not enabled.get(module, True):
            continue
        if permission_roles.intersection(roles):
            modules.append(module)
    return modules
