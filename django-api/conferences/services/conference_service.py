"""Conference service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from conferences.domain import (
    Conference,
    ConferenceForm,
    ConferenceKey,
    Profile,
    ProfileForm,
    ProfileKey,
)
from conferences.domain.errors import (
    ConferenceNotFoundError,
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidArgumentError,
)
from conferences.services.identity import Caller, identity_of
from conferences.stores.interfaces import (
    ConcurrentModificationError,
    ConferenceStore,
    StoreError,
    TransactionConflictError,
)

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors() -> Iterator[None]:
    """Translate store failures into domain errors."""
    try:
        yield
    except (TransactionConflictError, ConcurrentModificationError) as exc:
        raise ConflictError() from exc
    except StoreError as exc:
        raise InternalError() from exc


class ConferenceService:
    """Service for profile and conference operations."""

    def __init__(self, store: ConferenceStore) -> None:
        self._store = store

    def save_profile(self, caller: Caller | None, form: ProfileForm) -> Profile:
        """Create the caller's profile, or update the fields the form supplies.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
        """
        identity = identity_of(caller)
        profile_key = ProfileKey(identity.user_id)

        def save() -> Profile:
            profile = self._store.load_profile(profile_key)
            if profile is None:
                logger.info("New profile being built and saved for %s", identity.user_id)
                profile = Profile.create(
                    identity.user_id, form.display_name, identity.email, form.tee_shirt_size
                )
            else:
                logger.info("Updating profile %s", identity.user_id)
                profile = profile.update(form.display_name, form.tee_shirt_size)
            self._store.save_all(profile)
            return profile

        with _store_errors():
            return self._store.run_in_transaction(profile_key, save)

    def get_profile(self, caller: Caller | None) -> Profile | None:
        """Return the caller's profile, or None if they never saved one.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
        """
        identity = identity_of(caller)
        with _store_errors():
            return self._store.load_profile(ProfileKey(identity.user_id))

    def create_conference(self, caller: Caller | None, form: ConferenceForm) -> Conference:
        """Create a conference organized by the caller.

        A default profile is created alongside the conference when the caller
        has none yet. Both are written in one transaction on the caller's group.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
            InvalidArgumentError: If the form has no name or a negative capacity.
        """
        identity = identity_of(caller)
        if form.name is None:
            raise InvalidArgumentError("The name is required")
        profile_key = ProfileKey(identity.user_id)

        with _store_errors():
            conference_id = self._store.allocate_conference_id(profile_key)

        def create() -> Conference:
            entities = []
            if self._store.load_profile(profile_key) is None:
                entities.append(Profile.create(identity.user_id, None, identity.email))
            conference = Conference.create(conference_id, identity.user_id, form)
            self._store.save_all(*entities, conference)
            return conference

        with _store_errors():
            conference = self._store.run_in_transaction(profile_key, create)
        logger.info(
            "Created conference %r (%s) for %s",
            conference.name,
            conference.websafe_key,
            identity.user_id,
        )
        return conference

    def query_conferences(self) -> list[Conference]:
        """Return all conferences ordered by name."""
        with _store_errors():
            return self._store.query_conferences()

    def get_conferences_created(self, caller: Caller | None) -> list[Conference]:
        """Return the conferences the caller organizes, ordered by name.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
        """
        identity = identity_of(caller)
        with _store_errors():
            return self._store.query_conferences_by_organizer(ProfileKey(identity.user_id))

    def get_conference(self, websafe_key: str) -> Conference:
        """Return a conference by its web-safe key.

        Raises:
            InvalidWebsafeKeyError: If the key cannot be decoded.
            ConferenceNotFoundError: If the conference does not exist.
        """
        key = ConferenceKey.from_websafe(websafe_key)
        with _store_errors():
            conference = self._store.load_conference(key)
        if conference is None:
            raise ConferenceNotFoundError(websafe_key)
        return conference

    def update_conference(
        self, caller: Caller | None, websafe_key: str, form: ConferenceForm
    ) -> Conference:
        """Apply a form to a conference the caller organizes.

        Already allocated seats stay allocated; the check runs against the
        conference as loaded inside the transaction.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
            ForbiddenError: If the caller is not the organizer.
            ConferenceNotFoundError: If the conference does not exist.
            InvalidArgumentError: If the form is invalid or shrinks capacity
                below the allocated seats.
        """
        identity = identity_of(caller)

        def apply(conference: Conference) -> Conference:
            if conference.organizer_user_id != identity.user_id:
                raise ForbiddenError()
            return conference.update(form)

        conference = self._modify(websafe_key, apply)
        logger.info("Updated conference %s", websafe_key)
        return conference

    def book_seats(
        self, caller: Caller | None, websafe_key: str, number: int = 1
    ) -> Conference:
        """Take ``number`` seats from a conference's available seats.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
            ConferenceNotFoundError: If the conference does not exist.
            InvalidArgumentError: If there are not enough seats left.
            ConflictError: If concurrent bookings kept winning.
        """
        identity_of(caller)
        conference = self._modify(websafe_key, lambda c: c.book_seats(number))
        logger.info(
            "Booked %d seats on %s, %d left", number, websafe_key, conference.seats_available
        )
        return conference

    def give_back_seats(
        self, caller: Caller | None, websafe_key: str, number: int = 1
    ) -> Conference:
        """Return ``number`` seats to a conference.

        Raises:
            UnauthorizedError: If there is no authenticated caller.
            ConferenceNotFoundError: If the conference does not exist.
            InvalidArgumentError: If the seats would exceed the capacity.
            ConflictError: If concurrent writers kept winning.
        """
        identity_of(caller)
        conference = self._modify(websafe_key, lambda c: c.give_back_seats(number))
        logger.info(
            "Gave back %d seats on %s, %d left", number, websafe_key, conference.seats_available
        )
        return conference

    def organizer_display_name(self, conference: Conference) -> str:
        with _store_errors():
            return conference.organizer_display_name(self._store.load_profile)

    def _modify(self, websafe_key: str, change: Callable[[Conference], Conference]) -> Conference:
        """Load, change and save a conference inside a transaction on its group."""
        key = ConferenceKey.from_websafe(websafe_key)

        def modify() -> Conference:
            conference = self._store.load_conference(key)
            if conference is None:
                raise ConferenceNotFoundError(websafe_key)
            updated = change(conference)
            self._store.save_all(updated)
            return updated

        with _store_errors():
            return self._store.run_in_transaction(key.root, modify)
