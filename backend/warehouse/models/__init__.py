from .customers import Customer, CustomerProduct
from .inventory import Product, StockTransaction
from .drivers import Driver

__all__ = [
    'Customer', 'CustomerProduct',
    'Product', 'StockTransaction',
    'Driver',
]
