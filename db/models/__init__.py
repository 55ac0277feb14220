"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works
without extra imports.
"""

from db.models.emitted_item import EmittedItem, EmittedItemType

__all__ = [
    "EmittedItem",
    "EmittedItemType",
]
