"""Django ORM implementation of the ConferenceStore.

Optimistic concurrency is implemented with a ``version`` column: rows read
inside ``run_in_transaction`` are written back with a compare-and-set update
that only matches the version that was read.
"""

import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from django.conf import settings
from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from django.db.models import F

from conferences import models as orm
from conferences.domain import Conference, ConferenceKey, Profile, ProfileKey, TeeShirtSize
from conferences.stores.interfaces import (
    ConcurrentModificationError,
    ConferenceStore,
    Entity,
    Key,
    StoreError,
    TransactionState,
    entities_saved,
    root_of,
)
from conferences.stores.retry import retry_on_conflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DjangoConferenceStore(ConferenceStore):
    """Relational store using Django ORM."""

    def __init__(
        self, max_attempts: int | None = None, backoff_seconds: float | None = None
    ) -> None:
        config = getattr(settings, "CONFERENCE_CENTRAL", {})
        self._max_attempts = (
            max_attempts if max_attempts is not None else config.get("TRANSACTION_MAX_ATTEMPTS", 5)
        )
        self._backoff_seconds = (
            backoff_seconds
            if backoff_seconds is not None
            else config.get("TRANSACTION_BACKOFF_SECONDS", 0.01)
        )
        self._local = threading.local()

    @property
    def _transaction(self) -> TransactionState | None:
        return getattr(self._local, "transaction", None)

    def allocate_conference_id(self, profile_key: ProfileKey) -> int:
        def allocate() -> int:
            try:
                with transaction.atomic():
                    sequences = orm.ConferenceIdSequence.objects
                    sequence, _ = sequences.select_for_update().get_or_create(
                        user_id=profile_key.user_id
                    )
                    sequences.filter(pk=sequence.pk).update(
                        last_id=F("last_id") + 1
                    )
                    sequence.refresh_from_db(fields=["last_id"])
                    return sequence.last_id
            except DatabaseError as exc:
                raise _store_failure(
                    exc, f"Could not allocate a conference id under {profile_key}"
                ) from exc

        return retry_on_conflict(profile_key, allocate, self._max_attempts, self._backoff_seconds)

    def load_profile(self, profile_key: ProfileKey) -> Profile | None:
        txn = self._transaction
        if txn is not None and profile_key in txn.writes:
            return txn.writes[profile_key]
        row = self._fetch(orm.Profile.objects.filter(pk=profile_key.user_id))
        self._record_read(profile_key, row)
        return None if row is None else _profile_to_domain(row)

    def load_conference(self, conference_key: ConferenceKey) -> Conference | None:
        txn = self._transaction
        if txn is not None and conference_key in txn.writes:
            return txn.writes[conference_key]
        row = self._fetch(
            orm.Conference.objects.filter(
                profile_id=conference_key.profile_key.user_id,
                conference_id=conference_key.conference_id,
            )
        )
        self._record_read(conference_key, row)
        return None if row is None else _conference_to_domain(row)

    def save_all(self, *entities: Entity) -> None:
        txn = self._transaction
        if txn is not None:
            for entity in entities:
                if root_of(entity) != txn.root_key:
                    raise ValueError(
                        f"{entity.key} is outside the transaction's group {txn.root_key}"
                    )
                txn.writes[entity.key] = entity
            return

        try:
            with transaction.atomic():
                for entity in _parents_first(entities):
                    self._write(entity, expected_version=None)
        except DatabaseError as exc:
            raise _store_failure(exc, f"Could not save {len(entities)} entities") from exc
        entities_saved.send(sender=self.__class__, keys=[entity.key for entity in entities])

    def query_conferences(self) -> list[Conference]:
        queryset = orm.Conference.objects.order_by("name", "conference_id", "profile_id")
        try:
            return [_conference_to_domain(row) for row in queryset]
        except DatabaseError as exc:
            logger.exception("Conference query failed")
            raise StoreError("Conference query failed") from exc

    def query_conferences_by_organizer(self, profile_key: ProfileKey) -> list[Conference]:
        queryset = orm.Conference.objects.filter(profile_id=profile_key.user_id).order_by(
            "name", "conference_id"
        )
        try:
            return [_conference_to_domain(row) for row in queryset]
        except DatabaseError as exc:
            logger.exception("Conference query for %s failed", profile_key)
            raise StoreError("Conference query failed") from exc

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
                with transaction.atomic():
                    result = fn()
                    for entity in _parents_first(txn.writes.values()):
                        self._write(entity, expected_version=txn.read_versions.get(entity.key))
            except DatabaseError as exc:
                raise _store_failure(exc, f"Transaction on {root_key} failed") from exc
            finally:
                self._local.transaction = None
            if txn.writes:
                entities_saved.send(sender=self.__class__, keys=list(txn.writes))
            return result

        return retry_on_conflict(root_key, attempt, self._max_attempts, self._backoff_seconds)

    def _fetch(self, queryset):
        try:
            return queryset.first()
        except DatabaseError as exc:
            raise _store_failure(exc, "Load failed") from exc

    def _record_read(self, key: Key, row) -> None:
        txn = self._transaction
        if txn is not None:
            txn.read_versions.setdefault(key, 0 if row is None else row.version)

    def _write(self, entity: Entity, expected_version: int | None) -> None:
        """Write one entity.

        ``expected_version`` None means a blind upsert, 0 means the entity was
        read as absent and must be inserted, anything else is a compare-and-set.
        """
        if isinstance(entity, Profile):
            queryset = orm.Profile.objects.filter(pk=entity.user_id)
            model, values = orm.Profile, _profile_fields(entity)
            identity = {"user_id": entity.user_id}
        else:
            queryset = orm.Conference.objects.filter(
                profile_id=entity.profile_key.user_id, conference_id=entity.id
            )
            model, values = orm.Conference, _conference_fields(entity)
            identity = {"profile_id": entity.profile_key.user_id, "conference_id": entity.id}

        if expected_version is None:
            if queryset.update(**values, version=F("version") + 1):
                return
            expected_version = 0

        if expected_version == 0:
            try:
                with transaction.atomic():
                    model.objects.create(**identity, **values)
            except IntegrityError as exc:
                raise ConcurrentModificationError(f"{entity.key} was created concurrently") from exc
            return

        stale = queryset.filter(version=expected_version)
        if not stale.update(**values, version=expected_version + 1):
            raise ConcurrentModificationError(f"{entity.key} changed since it was read")


def _store_failure(exc: DatabaseError, message: str) -> StoreError:
    """Classify a database error raised while talking to the store.

    SQLite reports a held write lock as an ``OperationalError``; that is
    contention, so it is retried like a failed version check.
    """
    if isinstance(exc, OperationalError) and "locked" in str(exc):
        logger.warning("%s: %s", message, exc)
        return ConcurrentModificationError(message)
    logger.exception("%s", message)
    return StoreError(message)


def _parents_first(entities) -> list[Entity]:
    return sorted(entities, key=lambda entity: 0 if isinstance(entity, Profile) else 1)


def _profile_fields(profile: Profile) -> dict:
    return {
        "display_name": profile.display_name,
        "main_email": profile.main_email,
        "tee_shirt_size": profile.tee_shirt_size.value,
        "conference_keys_to_attend": list(profile.conference_keys_to_attend),
    }


def _conference_fields(conference: Conference) -> dict:
    return {
        "organizer_user_id": conference.organizer_user_id,
        "name": conference.name,
        "description": conference.description,
        "topics": list(conference.topics),
        "city": conference.city,
        "start_date": conference.start_date,
        "end_date": conference.end_date,
        "month": conference.month,
        "max_attendees": conference.max_attendees,
        "seats_available": conference.seats_available,
    }


def _profile_to_domain(row: orm.Profile) -> Profile:
    return Profile(
        user_id=row.user_id,
        display_name=row.display_name,
        main_email=row.main_email,
        tee_shirt_size=TeeShirtSize(row.tee_shirt_size),
        conference_keys_to_attend=tuple(row.conference_keys_to_attend),
    )


def _conference_to_domain(row: orm.Conference) -> Conference:
    return Conference(
        key=ConferenceKey(ProfileKey(row.profile_id), row.conference_id),
        organizer_user_id=row.organizer_user_id,
        name=row.name,
        description=row.description,
        topics=tuple(row.topics),
        city=row.city,
        start_date=row.start_date,
        end_date=row.end_date,
        month=row.month,
        max_attendees=row.max_attendees,
        seats_available=row.seats_available,
    )
