"""
Exchange implementations.
"""

from .peer import PeerExchange

__all__ = [
    "PeerExchange",
]
