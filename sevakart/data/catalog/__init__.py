from sevakart.data.catalog.product import Product, UNITS
from sevakart.data.catalog.category import Category

__all__ = ['Product', 'UNITS', 'Category']
