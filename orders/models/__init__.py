from .order import Order, generate_invoice_number
from .order_item import OrderItem

__all__ = ["Order", "OrderItem", "generate_invoice_number"]
