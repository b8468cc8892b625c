# Overview: Role lookup tables.
# Job roles (what HR calls people) map to permission roles (what the app
# checks). Permission roles map to permission codes. Modules are visible to
# the permission roles listed for them.

from .definitions import PERMISSION_DEFINITIONS


ADMIN = "Admin"
FINANCE = "Finance"
SALES_COORDINATOR = "SalesCoordinator"
PRODUCTION = "Production"
STORE = "Store"
INVENTORY = "Inventory"
PURCHASES = "Purchases"
LABORATORY = "Laboratory"

PERMISSION_ROLES = (
    ADMIN,
    FINANCE,
    SALES_COORDINATOR,
    PRODUCTION,
    STORE,
    INVENTORY,
    PURCHASES,
    LABORATORY,
)

JOB_ROLE_PERMISSION_ROLES = {
    "DirectorGeneral": [ADMIN],
    "GeneralManager": [ADMIN],
    "FinanceManager": [FINANCE],
    "SalesManager": [SALES_COORDINATOR],
    "Laboratory": [LABORATORY],
    "ProductionManager": [PRODUCTION, STORE, INVENTORY, PURCHASES],
}

JOB_ROLES = tuple(JOB_ROLE_PERMISSION_ROLES.keys())

# Every role a user row may carry
ASSIGNABLE_ROLES = JOB_ROLES + tuple(
    r for r in PERMISSION_ROLES if r not in JOB_ROLE_PERMISSION_ROLES
)


DEFAULT_ROLE_PERMISSIONS = {
    # Admin gets ALL permissions
    ADMIN: [perm[0] for perm in PERMISSION_DEFINITIONS],

    FINANCE: [
        "VIEW_DASHBOARD",
        "VIEW_ACTIVITY",
        "VIEW_LEDGER_ACCOUNTS",
        "MANAGE_LEDGER_ACCOUNTS",
        "VIEW_RECEIPTS",
        "CREATE_RECEIPT",
        "VIEW_CREDIT_NOTES",
        "CREATE_CREDIT_NOTE",
    ],

    SALES_COORDINATOR: [
        "VIEW_DASHBOARD",
        "VIEW_ACTIVITY",
        "VIEW_PRODUCTS",
        "VIEW_SALES",
        "CREATE_SALE",
        "VIEW_INVOICES",
        "MANAGE_INVOICES",
        "VIEW_LEDGER_ACCOUNTS",
        "MANAGE_LEDGER_ACCOUNTS",
    ],

    INVENTORY: [
        "VIEW_ACTIVITY",
        "VIEW_PRODUCTS",
        "MANAGE_PRODUCTS",
        "VIEW_STOCK_LOGS",
        "ADJUST_STOCK",
        "APPROVE_STOCK",
        "UPLOAD_IMAGES",
    ],

    PRODUCTION: [
        "VIEW_ACTIVITY",
        "VIEW_PRODUCTS",
        "VIEW_STOCK_LOGS",
        "SUBMIT_STOCK",
        "VIEW_RAW_MATERIALS",
        "RECORD_MATERIAL_USAGE",
        "VIEW_PRODUCTION",
        "CREATE_PRODUCTION_BATCH",
        "VIEW_LAB",
    ],

    STORE: [
        "VIEW_ACTIVITY",
        "VIEW_RAW_MATERIALS",
        "MANAGE_RAW_MATERIALS",
        "RECORD_MATERIAL_USAGE",
        "VIEW_LEDGER_ACCOUNTS",
        "UPLOAD_IMAGES",
    ],

    PURCHASES: [
        "VIEW_ACTIVITY",
        "VIEW_PURCHASE_ORDERS",
        "MANAGE_PURCHASE_ORDERS",
        "RECEIVE_PURCHASE_ORDERS",
        "VIEW_LEDGER_ACCOUNTS",
        "MANAGE_LEDGER_ACCOUNTS",
        "VIEW_RAW_MATERIALS",
    ],

    LABORATORY: [
        "VIEW_ACTIVITY",
        "VIEW_LAB",
        "MANAGE_LAB",
        "RECORD_INTAKE",
    ],
}


MODULES = (
    "Sales",
    "Finance",
    "Production",
    "Store",
    "Inventory",
    "Laboratory",
    "Purchases",
    "Admin",
)

MODULE_ROLES = {
    "Sales": [ADMIN, SALES_COORDINATOR],
    "Finance": [ADMIN, FINANCE],
    "Production": [ADMIN, PRODUCTION],
    "Store": [ADMIN, STORE],
    "Inventory": [ADMIN, INVENTORY],
    "Laboratory": [ADMIN, LABORATORY],
    "Purchases": [ADMIN, PURCHASES],
    "Admin": [ADMIN],
}
