"""Thread-safe in-memory implementation of the ConferenceStore.

Mirrors the optimistic semantics of the Django store: reads inside a
transaction record the version they saw, writes are buffered and validated
against the current versions when the transaction commits.
"""

import threading
from collections.abc import Callable
from typing import TypeVar

from conferences.domain import Conference, ConferenceKey, Profile, ProfileKey
from conferences.stores.interfaces import (
    ConcurrentModificationError,
    ConferenceStore,
    Entity,
    Key,
    TransactionState,
    entities_saved,
    root_of,
)
from conferences.stores.retry import retry_on_conflict

T = TypeVar("T")


class InMemoryConferenceStore(ConferenceStore):
    """Dict-backed store for tests and local runs."""

    def __init__(self, max_attempts: int = 5, backoff_seconds: float = 0.0) -> None:
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._lock = threading.RLock()
        self._entities: dict[Key, tuple[int, Entity]] = {}
        self._sequences: dict[ProfileKey, int] = {}
        self._local = threading.local()

    @property
    def _transaction(self) -> TransactionState | None:
        return getattr(self._local, "transaction", None)

    def allocate_conference_id(self, profile_key: ProfileKey) -> int:
        with self._lock:
            next_id = self._sequences.get(profile_key, 0) + 1
            self._sequences[profile_key] = next_id
            return next_id

    def load_profile(self, profile_key: ProfileKey) -> Profile | None:
        return self._load(profile_key)

    def load_conference(self, conference_key: ConferenceKey) -> Conference | None:
        return self._load(conference_key)

    def save_all(self, *entities: Entity) -> None:
        txn = self._transaction
        if txn is None:
            with self._lock:
                self._apply({entity.key: entity for entity in entities})
            entities_saved.send(sender=self.__class__, keys=[entity.key for entity in entities])
            return

        for entity in entities:
            if root_of(entity) != txn.root_key:
                raise ValueError(f"{entity.key} is outside the transaction's group {txn.root_key}")
            txn.writes[entity.key] = entity

    def query_conferences(self) -> list[Conference]:
        with self._lock:
            conferences = [
                entity for _, entity in self._entities.values() if isinstance(entity, Conference)
            ]
        return sorted(conferences, key=lambda c: (c.name, c.id, c.organizer_user_id))

    def query_conferences_by_organizer(self, profile_key: ProfileKey) -> list[Conference]:
        with self._lock:
            conferences = [
                entity
                for _, entity in self._entities.values()
                if isinstance(entity, Conference) and entity.profile_key == profile_key
            ]
        return sorted(conferences, key=lambda c: (c.name, c.id))

    def run_in_transaction(self, root_key: ProfileKey, fn: Callable[[], T]) -> T:
        current = self._transaction
        if current is not None:
            if current.root_key != root_key:
                raise ValueError(f"Already in a transaction on {current.root_key}")
            return fn()

        def attempt() -> T:
            txn = TransactionState(root_key=root_key)
            self._local.transaction = txn
            try:
                result = fn()
            finally:
                self._local.transaction = None
            self._commit(txn)
            if txn.writes:
                entities_saved.send(sender=self.__class__, keys=list(txn.writes))
            return result

        return retry_on_conflict(root_key, attempt, self._max_attempts, self._backoff_seconds)

    def _load(self, key: Key):
        with self._lock:
            version, entity = self._entities.get(key, (0, None))
        txn = self._transaction
        if txn is not None:
            if key in txn.writes:
                return txn.writes[key]
            txn.read_versions.setdefault(key, version)
        return entity

    def _commit(self, txn: TransactionState) -> None:
        with self._lock:
            for key in txn.writes:
                if key not in txn.read_versions:
                    continue
                current_version, _ = self._entities.get(key, (0, None))
                if current_version != txn.read_versions[key]:
                    raise ConcurrentModificationError(f"{key} changed since it was read")
            self._apply(txn.writes)

    def _apply(self, writes: dict[Key, Entity]) -> None:
        for key, entity in writes.items():
            version, _ = self._entities.get(key, (0, None))
            self._entities[key] = (version + 1, entity)
