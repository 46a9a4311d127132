"""
Local block store implementations.
"""

from .memory import MemoryBlockStore
from .sqlite import SQLiteBlockStore

__all__ = [
    "MemoryBlockStore",
    "SQLiteBlockStore",
]
