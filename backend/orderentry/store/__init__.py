from .base import BaseOrderStore
from .factory import get_order_store

__all__ = ["BaseOrderStore", "get_order_store"]
