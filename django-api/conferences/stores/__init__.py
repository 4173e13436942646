from conferences.stores.interfaces import ConferenceStore, StoreError, TransactionConflictError
from conferences.stores.memory_store import InMemoryConferenceStore

__all__ = [
    "ConferenceStore",
    "InMemoryConferenceStore",
    "StoreError",
    "TransactionConflictError",
]
