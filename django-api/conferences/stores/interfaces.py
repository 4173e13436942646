"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

Entities are grouped under their root Profile key. Writes that share a root
commit atomically; ``run_in_transaction`` gives optimistic read-modify-write
semantics on a single entity group.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from django.dispatch import Signal

from conferences.domain import Conference, ConferenceKey, Profile, ProfileKey

T = TypeVar("T")

Entity = Profile | Conference

Key = ProfileKey | ConferenceKey

# Sent once per commit with ``keys``, the keys of every entity written.
entities_saved = Signal()


class StoreError(Exception):
    """Unexpected persistence failure."""


class ConcurrentModificationError(StoreError):
    """A version check failed at commit time. Retried by ``run_in_transaction``."""


class TransactionConflictError(StoreError):
    """``run_in_transaction`` ran out of attempts."""

    def __init__(self, root_key: ProfileKey, attempts: int) -> None:
        super().__init__(f"Transaction on {root_key} failed after {attempts} attempts")
        self.root_key = root_key
        self.attempts = attempts


def root_of(entity: Entity) -> ProfileKey:
    """Return the entity-group root for a domain entity."""
    return entity.key.root


@dataclass
class TransactionState:
    """Reads and buffered writes of one ``run_in_transaction`` attempt."""

    root_key: ProfileKey
    read_versions: dict[Key, int] = field(default_factory=dict)
    writes: dict[Key, Entity] = field(default_factory=dict)


class ConferenceStore(ABC):
    """Interface for profile and conference persistence operations."""

    @abstractmethod
    def allocate_conference_id(self, profile_key: ProfileKey) -> int:
        """Return a fresh conference id, unique under the given profile."""
        ...

    @abstractmethod
    def load_profile(self, profile_key: ProfileKey) -> Profile | None:
        """Return a profile by key, or None if not found."""
        ...

    @abstractmethod
    def load_conference(self, conference_key: ConferenceKey) -> Conference | None:
        """Return a conference by key, or None if not found."""
        ...

    @abstractmethod
    def save_all(self, *entities: Entity) -> None:
        """Persist entities. Atomic when they share a root."""
        ...

    @abstractmethod
    def query_conferences(self) -> list[Conference]:
        """Return all conferences ordered by name, then id."""
        ...

    @abstractmethod
    def query_conferences_by_organizer(self, profile_key: ProfileKey) -> list[Conference]:
        """Return the conferences under a profile ordered by name, then id."""
        ...

    @abstractmethod
    def run_in_transaction(self, root_key: ProfileKey, fn: Callable[[], T]) -> T:
        """Run ``fn`` inside a transaction on the ``root_key`` entity group.

        Entities loaded inside ``fn`` are version-checked when saved. On a
        version conflict the whole of ``fn`` is retried.

        Raises:
            TransactionConflictError: If every attempt lost to a concurrent writer.
        """
        ...
