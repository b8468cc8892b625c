from .auth import User, SessionToken
from .security import SecurityEvent
from .documents import DocumentSequence
from .settings import Setting
from .activity import ActivityLog
from .finance import LedgerAccount, Receipt, CreditNote
from .catalog import Product, RawMaterial
from .sales import Sale, SaleItem, Invoice, InvoiceItem
from .stock import ProductStockLog, RawMaterialUsage
from .purchases import PurchaseOrder, PurchaseOrderItem
from .laboratory import MilkSupplier, IntakeDelivery, LabTest

__all__ = [
    'User', 'SessionToken', 'SecurityEvent',
    'DocumentSequence', 'Setting', 'ActivityLog',
    'LedgerAccount', 'Receipt', 'CreditNote',
    'Product', 'RawMaterial',
    'Sale', 'SaleItem', 'Invoice', 'InvoiceItem',
    'ProductStockLog', 'RawMaterialUsage',
    'PurchaseOrder', 'PurchaseOrderItem',
    'MilkSupplier', 'IntakeDelivery', 'LabTest',
]
