"""
estat/repositories package marker.
"""

from estat.repositories.emitted_item_repository import EmittedItemRepository

__all__ = ["EmittedItemRepository"]
