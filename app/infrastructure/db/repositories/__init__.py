from .change_feed import ChangeFeed
from .ledger_repository import LedgerRepository
from .memory_ledger import MemoryLedgerRepository

__all__ = [
    "ChangeFeed",
    "LedgerRepository",
    "MemoryLedgerRepository",
]
