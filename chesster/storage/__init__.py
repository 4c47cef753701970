"""Persistent storage for ratings and subscriptions."""

from chesster.storage.models import LichessRating, Subscription
from chesster.storage.store import ChessterStore, StoreError

__all__ = ["ChessterStore", "StoreError", "LichessRating", "Subscription"]
