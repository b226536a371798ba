"""
Product read and write APIs.

Usage:
    read_api = ProductReadApi(config)
    write_api = ProductWriteApi(config)
"""

from .commands import ProductWriteApi
from .queries import ProductReadApi

__all__ = [
    "ProductReadApi",
    "ProductWriteApi",
]
