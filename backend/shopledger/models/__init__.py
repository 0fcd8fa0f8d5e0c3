from .tenancy import Shop
from .inventory import Product, PRODUCT_UNITS
from .sales import Sale, SaleLine
from .cash import CashMovement, CashShift, PAYMENT_METHODS, DIRECTIONS
from .summaries import Summary, SummaryBreakdown, PERIODS, BREAKDOWNS

__all__ = [
    'Shop',
    'Product', 'PRODUCT_UNITS',
    'Sale', 'SaleLine',
    'CashMovement', 'CashShift', 'PAYMENT_METHODS', 'DIRECTIONS',
    'Summary', 'SummaryBreakdown', 'PERIODS', 'BREAKDOWNS',
]
