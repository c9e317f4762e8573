"""Versioned ledger of economic snapshots."""

from capsim.ledger.keys import EntityKind, entity_keys
from capsim.ledger.store import InMemoryLedgerStore, LedgerStore
from capsim.ledger.timestamp import TimeStamp

__all__ = [
    "EntityKind",
    "InMemoryLedgerStore",
    "LedgerStore",
    "TimeStamp",
    "entity_keys",
]
