# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    INVENTORY = "INVENTORY"
    STORE = "STORE"
    PRODUCTION = "PRODUCTION"
    LABORATORY = "LABORATORY"
    SALES = "SALES"
    FINANCE = "FINANCE"
    PURCHASES = "PURCHASES"
    USERS = "USERS"
    SYSTEM = "SYSTEM"
