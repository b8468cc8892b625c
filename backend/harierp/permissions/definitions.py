# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- INVENTORY (Finish Bay) --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_PRODUCTS",
        "View Products",
        "View the finished goods catalog and stock levels",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Create and edit finished goods",
        PermissionCategory.INVENTORY,
    ),
    (
        "VIEW_STOCK_LOGS",
        "View Stock Logs",
        "View product stock adjustment logs and submission history",
        PermissionCategory.INVENTORY,
    ),
    (
        "ADJUST_STOCK",
        "Adjust Stock",
        "Record, edit and delete product stock adjustments",
        PermissionCategory.INVENTORY,
    ),
    (
        "APPROVE_STOCK",
        "Approve Stock Submissions",
        "Accept or reject stock submitted by production/packaging",
        PermissionCategory.INVENTORY,
    ),
]


# -- STORE --

STORE_PERMISSIONS = [
    (
        "VIEW_RAW_MATERIALS",
        "View Raw Materials",
        "View store items, raw materials and usage logs",
        PermissionCategory.STORE,
    ),
    (
        "MANAGE_RAW_MATERIALS",
        "Manage Raw Materials",
        "Create and edit store items and raw materials",
        PermissionCategory.STORE,
    ),
    (
        "RECORD_MATERIAL_USAGE",
        "Record Material Usage",
        "Issue raw materials to departments",
        PermissionCategory.STORE,
    ),
]


# -- PRODUCTION --

PRODUCTION_PERMISSIONS = [
    (
        "VIEW_PRODUCTION",
        "View Production",
        "View production batches",
        PermissionCategory.PRODUCTION,
    ),
    (
        "CREATE_PRODUCTION_BATCH",
        "Create Production Batch",
        "Record a production batch consuming raw materials",
        PermissionCategory.PRODUCTION,
    ),
    (
        "SUBMIT_STOCK",
        "Submit Stock",
        "Submit finished goods to the Finish Bay for approval",
        PermissionCategory.PRODUCTION,
    ),
]


# -- LABORATORY --

LABORATORY_PERMISSIONS = [
    (
        "VIEW_LAB",
        "View Laboratory",
        "View lab tests, milk suppliers and intake deliveries",
        PermissionCategory.LABORATORY,
    ),
    (
        "MANAGE_LAB",
        "Manage Laboratory",
        "Record lab tests and manage milk suppliers",
        PermissionCategory.LABORATORY,
    ),
    (
        "RECORD_INTAKE",
        "Record Intake",
        "Record milk collections and raw water deliveries",
        PermissionCategory.LABORATORY,
    ),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "VIEW_SALES",
        "View Sales",
        "View sales records",
        PermissionCategory.SALES,
    ),
    (
        "CREATE_SALE",
        "Create Sale",
        "Record sales (deducts finished goods stock)",
        PermissionCategory.SALES,
    ),
    (
        "VIEW_INVOICES",
        "View Invoices",
        "View invoices",
        PermissionCategory.SALES,
    ),
    (
        "MANAGE_INVOICES",
        "Manage Invoices",
        "Create and edit invoices",
        PermissionCategory.SALES,
    ),
]


# -- FINANCE --

FINANCE_PERMISSIONS = [
    (
        "VIEW_LEDGER_ACCOUNTS",
        "View Ledger Accounts",
        "View customers, suppliers and other ledger accounts",
        PermissionCategory.FINANCE,
    ),
    (
        "MANAGE_LEDGER_ACCOUNTS",
        "Manage Ledger Accounts",
        "Create and edit ledger accounts",
        PermissionCategory.FINANCE,
    ),
    (
        "VIEW_RECEIPTS",
        "View Receipts",
        "View payment receipts",
        PermissionCategory.FINANCE,
    ),
    (
        "CREATE_RECEIPT",
        "Create Receipt",
        "Record payments received",
        PermissionCategory.FINANCE,
    ),
    (
        "VIEW_CREDIT_NOTES",
        "View Credit Notes",
        "View credit notes",
        PermissionCategory.FINANCE,
    ),
    (
        "CREATE_CREDIT_NOTE",
        "Create Credit Note",
        "Issue credit notes",
        PermissionCategory.FINANCE,
    ),
]


# -- PURCHASES --

PURCHASE_PERMISSIONS = [
    (
        "VIEW_PURCHASE_ORDERS",
        "View Purchase Orders",
        "View purchase orders",
        PermissionCategory.PURCHASES,
    ),
    (
        "MANAGE_PURCHASE_ORDERS",
        "Manage Purchase Orders",
        "Create and edit purchase orders",
        PermissionCategory.PURCHASES,
    ),
    (
        "RECEIVE_PURCHASE_ORDERS",
        "Receive Purchase Orders",
        "Receive purchase order items into store stock",
        PermissionCategory.PURCHASES,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "MANAGE_USERS",
        "Manage Users",
        "Register users, activate/deactivate accounts and reset passwords",
        PermissionCategory.USERS,
    ),
]


# -- SYSTEM --

SYSTEM_PERMISSIONS = [
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View the main business dashboard",
        PermissionCategory.SYSTEM,
    ),
    (
        "VIEW_ACTIVITY",
        "View Activity",
        "View the overall activity log",
        PermissionCategory.SYSTEM,
    ),
    (
        "MANAGE_SETTINGS",
        "Manage Settings",
        "Enable or disable application modules",
        PermissionCategory.SYSTEM,
    ),
    (
        "UPLOAD_IMAGES",
        "Upload Images",
        "Upload product and material images",
        PermissionCategory.SYSTEM,
    ),
]


PERMISSION_DEFINITIONS = (
    INVENTORY_PERMISSIONS
    + STORE_PERMISSIONS
    + PRODUCTION_PERMISSIONS
    + LABORATORY_PERMISSIONS
    + SALES_PERMISSIONS
    + FINANCE_PERMISSIONS
    + PURCHASE_PERMISSIONS
    + USER_PERMISSIONS
    + SYSTEM_PERMISSIONS
)
