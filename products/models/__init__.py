"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category
from .product import Product
from .product_image import ProductImage

__all__ = [
    "Category",
    "Product",
    "ProductImage",
]
