# Overview: Enumerated values accepted by the API (categories, units, statuses, ...).

PRODUCT_CATEGORIES = (
    "Bottled Water", "Sachet Water", "Dispenser Water", "Other Finished Good",
    "Additives", "Banana Flavor", "Chocolate Flavor", "Cold Room Item", "Culture",
    "Electrical Material", "Emulsions", "Fuel", "Mango Flavor", "Mechanical Material",
    "Milk Product", "Orange Flavor", "Pineapple Flavor", "Preservatives", "Strawberry Flavor",
    "Sugar Product", "Support Material", "Sweetener", "Thickeners",
)

RAW_MATERIAL_CATEGORIES = (
    "Raw Water", "Treatment Chemicals", "Bottles & Caps", "Labels & Seals",
    "Packaging Cartons", "Cleaning Supplies", "Maintenance Parts", "Office Supplies",
    "Other Supplies",
)

UNITS_OF_MEASURE = ("PCS", "Litres", "KG", "Grams", "Pack", "Sachet", "Unit", "Carton", "Bag", "Other")

PRICE_LEVELS = (
    "B1-EX-F/DLR",
    "R-RETAILER-Z1/RTL",
    "Z-DISTRIZ2/RTL",
    "B3-Z3/DLR",
    "AZ-Z1/DISTRI",
    "CUST-STD-Z1/GEN",
    "CUST-PREM-Z2/SPEC",
    "DEFAULT",
)


class AdjustmentType:
    """Product stock log types."""
    PENDING_APPROVAL = "PENDING_APPROVAL"
    ADDITION = "ADDITION"
    MANUAL_CORRECTION_ADD = "MANUAL_CORRECTION_ADD"
    MANUAL_CORRECTION_SUBTRACT = "MANUAL_CORRECTION_SUBTRACT"
    INITIAL_STOCK = "INITIAL_STOCK"
    SALE_DEDUCTION = "SALE_DEDUCTION"
    RETURN_ADDITION = "RETURN_ADDITION"
    PRODUCTION_YIELD = "PRODUCTION_YIELD"
    REJECTED_BY_INVENTORY = "REJECTED_BY_INVENTORY"


ADJUSTMENT_TYPES = (
    AdjustmentType.PENDING_APPROVAL,
    AdjustmentType.ADDITION,
    AdjustmentType.MANUAL_CORRECTION_ADD,
    AdjustmentType.MANUAL_CORRECTION_SUBTRACT,
    AdjustmentType.INITIAL_STOCK,
    AdjustmentType.SALE_DEDUCTION,
    AdjustmentType.RETURN_ADDITION,
    AdjustmentType.PRODUCTION_YIELD,
    AdjustmentType.REJECTED_BY_INVENTORY,
)

# Types a client may post to the batch endpoint
CLIENT_ADJUSTMENT_TYPES = (
    AdjustmentType.ADDITION,
    AdjustmentType.MANUAL_CORRECTION_ADD,
    AdjustmentType.MANUAL_CORRECTION_SUBTRACT,
    AdjustmentType.INITIAL_STOCK,
    AdjustmentType.RETURN_ADDITION,
    AdjustmentType.PENDING_APPROVAL,
)

# Types whose quantity must be negative; all other types must be positive
NEGATIVE_ADJUSTMENT_TYPES = (
    AdjustmentType.MANUAL_CORRECTION_SUBTRACT,
    AdjustmentType.SALE_DEDUCTION,
)

# Logs that can only be undone by reversing the document that made them
PROTECTED_ADJUSTMENT_TYPES = (
    AdjustmentType.SALE_DEDUCTION,
    AdjustmentType.RETURN_ADDITION,
)

# Logs that never touched Product.stock
UNAPPLIED_ADJUSTMENT_TYPES = (
    AdjustmentType.PENDING_APPROVAL,
    AdjustmentType.REJECTED_BY_INVENTORY,
)

SALE_PAYMENT_METHODS = ("Cash", "Card", "Transfer", "Online", "Credit")
SALE_STATUSES = ("Pending", "Completed", "Cancelled")

INVOICE_STATUSES = ("Draft", "Sent", "Paid", "Overdue", "Cancelled")

LEDGER_ACCOUNT_TYPES = (
    "Premium Product", "Sales Rep", "Standard Product", "Supplier", "Customer",
    "Bank", "Expense", "Income", "Asset", "Liability", "Equity",
)

RECEIPT_PAYMENT_METHODS = ("Cash", "Card", "Transfer", "Online", "Cheque")

BANK_NAMES = (
    "Access Bank", "FCMB", "Fidelity Bank", "First Bank", "GT Bank",
    "Jaiz Bank", "Jaiz Premium", "Money Point", "M.P Abuja", "M.P Adarji",
    "M.P Bauchi", "M.P Isah", "M.P Isah 2", "M.P Kano", "M.P Lawal",
    "M.P Nura", "M.P Ondo/Akure", "Other",
)

CREDIT_NOTE_REASONS = (
    "Travel Expense Reimbursement",
    "Returned Goods",
    "Damages",
    "Service Credit/Discount",
    "Error Correction",
    "Sales Rep Commission",
    "Other Expense Reimbursement",
    "Write Off",
    "Debt to be Credited",
    "Other",
)

USAGE_DEPARTMENTS = ("Production", "Cleaning", "Packaging", "Maintenance", "Office", "Wastage", "Other")


class PurchaseOrderStatus:
    DRAFT = "Draft"
    ORDERED = "Ordered"
    PARTIALLY_RECEIVED = "Partially Received"
    RECEIVED = "Received"
    CANCELLED = "Cancelled"


PURCHASE_ORDER_STATUSES = (
    PurchaseOrderStatus.DRAFT,
    PurchaseOrderStatus.ORDERED,
    PurchaseOrderStatus.PARTIALLY_RECEIVED,
    PurchaseOrderStatus.RECEIVED,
    PurchaseOrderStatus.CANCELLED,
)

MILK_SUPPLIER_TYPES = ("Cooperative", "Individual")

LAB_RESULTS = ("Pass", "Fail", "Pending")


class ActivityType:
    SALE = "Sale"
    INVOICE = "Invoice"
    RECEIPT = "Receipt"
    CREDIT_NOTE = "Credit Note"
    PURCHASE_ORDER = "Purchase Order"
    MATERIAL_USAGE = "Material Usage"
    STOCK_ADDITION = "Stock Addition"
    PRODUCTION_BATCH = "Production Batch"
    MILK_COLLECTION = "Milk Collection"
    WATER_DELIVERY = "Water Delivery"
    PACKAGING_SUBMISSION = "Packaging Submission"
    INVENTORY_APPROVAL = "Inventory Approval"
    LAB_TEST = "Lab Test"
    USER = "User"
