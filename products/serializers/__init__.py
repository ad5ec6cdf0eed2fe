# products/serializers/__init__.py

from .category import CategorySerializer
from .product import ProductImageSerializer, ProductSerializer

__all__ = [
    "CategorySerializer",
    "ProductImageSerializer",
    "ProductSerializer",
]
