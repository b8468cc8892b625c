# Overview: Permission system package.
# Re-exports the lookup tables and helpers used by services and routes.

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    INVENTORY_PERMISSIONS,
    STORE_PERMISSIONS,
    PRODUCTION_PERMISSIONS,
    LABORATORY_PERMISSIONS,
    SALES_PERMISSIONS,
    FINANCE_PERMISSIONS,
    PURCHASE_PERMISSIONS,
    USER_PERMISSIONS,
    SYSTEM_PERMISSIONS,
)
from .roles import (
    ASSIGNABLE_ROLES,
    DEFAULT_ROLE_PERMISSIONS,
    JOB_ROLE_PERMISSION_ROLES,
    JOB_ROLES,
    MODULE_ROLES,
    MODULES,
    PERMISSION_ROLES,
)
from .helpers import (
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    get_permission_roles,
    get_role_modules,
    get_role_permission_codes,
    validate_permission_code,
    validate_role,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "INVENTORY_PERMISSIONS",
    "STORE_PERMISSIONS",
    "PRODUCTION_PERMISSIONS",
    "LABORATORY_PERMISSIONS",
    "SALES_PERMISSIONS",
    "FINANCE_PERMISSIONS",
    "PURCHASE_PERMISSIONS",
    "USER_PERMISSIONS",
    "SYSTEM_PERMISSIONS",
    "ASSIGNABLE_ROLES",
    "DEFAULT_ROLE_PERMISSIONS",
    "JOB_ROLE_PERMISSION_ROLES",
    "JOB_ROLES",
    "MODULE_ROLES",
    "MODULES",
    "PERMISSION_ROLES",
    "get_all_permission_codes",
    "get_permissions_by_category",
    "get_permission_definition",
    "get_permission_roles",
    "get_role_modules",
    "get_role_permission_codes",
    "validate_permission_code",
    "validate_role",
]
