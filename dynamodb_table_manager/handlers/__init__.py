"""
Read/write APIs for the entities stored in managed tables.
"""

from .products import ProductReadApi, ProductWriteApi

__all__ = [
    "ProductReadApi",
    "ProductWriteApi",
]
