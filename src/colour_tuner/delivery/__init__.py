"""
Delivery Layer - Conflating writes to the remote authority.
"""

from .dispatcher import ConflatingDispatcher, PendingDelivery

__all__ = ["ConflatingDispatcher", "PendingDelivery"]
