from .base import Storage
from .database import DatabaseStorage


__all__ = [
    "DatabaseStorage",
    "Storage",
]
