from .catalog import Brand, TireSize, WheelSize
from .inventory import Product, StockMovement, PRODUCT_TYPES, MOVEMENT_TYPES
from .sales import Invoice, InvoiceItem

__all__ = [
    'Brand', 'TireSize', 'WheelSize',
    'Product', 'StockMovement', 'PRODUCT_TYPES', 'MOVEMENT_TYPES',
    'Invoice', 'InvoiceItem',
]
