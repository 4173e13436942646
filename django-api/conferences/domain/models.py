"""Domain aggregates representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in conferences/models.py (persistence layer).

Aggregates are immutable: every mutator validates and returns an updated copy,
so callers always rebind (``conference = conference.book_seats(2)``).
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from typing import Self

from conferences.domain.errors import InvalidArgumentError
from conferences.domain.forms import ConferenceForm
from conferences.domain.value_objects import ConferenceKey, ProfileKey, TeeShirtSize

DEFAULT_CITY = "Default City"
DEFAULT_TOPICS = ("Default", "Topic")


def default_display_name(email: str | None) -> str | None:
    """Return the local part of an email, e.g. "lemoncake" for lemoncake@example.com."""
    if email is None:
        return None
    return email.split("@", 1)[0]


@dataclass(frozen=True)
class Profile:
    """Domain representation of a user Profile."""

    user_id: str
    display_name: str
    main_email: str
    tee_shirt_size: TeeShirtSize = TeeShirtSize.NOT_SPECIFIED
    conference_keys_to_attend: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        user_id: str,
        display_name: str | None,
        email: str,
        tee_shirt_size: TeeShirtSize | None = None,
    ) -> Self:
        if display_name is None:
            display_name = default_display_name(email) or user_id
        if tee_shirt_size is None:
            tee_shirt_size = TeeShirtSize.NOT_SPECIFIED
        return cls(
            user_id=user_id,
            display_name=display_name,
            main_email=email,
            tee_shirt_size=tee_shirt_size,
        )

    @property
    def key(self) -> ProfileKey:
        return ProfileKey(self.user_id)

    def update(
        self,
        display_name: str | None = None,
        tee_shirt_size: TeeShirtSize | None = None,
    ) -> Self:
        """Overwrite the supplied fields; None means leave unchanged."""
        changes = {}
        if display_name is not None:
            changes["display_name"] = display_name
        if tee_shirt_size is not None:
            changes["tee_shirt_size"] = tee_shirt_size
        return replace(self, **changes)


@dataclass(frozen=True)
class Conference:
    """Domain representation of a Conference owned by a Profile.

    Invariants:
        0 <= seats_available <= max_attendees
        seats_allocated survives every capacity change
        topics is never empty
    """

    key: ConferenceKey
    organizer_user_id: str
    name: str
    description: str | None = None
    topics: tuple[str, ...] = DEFAULT_TOPICS
    city: str = DEFAULT_CITY
    start_date: date | None = None
    end_date: date | None = None
    month: int = 0
    max_attendees: int = 0
    seats_available: int = 0

    @classmethod
    def create(cls, conference_id: int, organizer_user_id: str, form: ConferenceForm) -> Self:
        """Build a new conference under the organizer's profile.

        Raises:
            InvalidArgumentError: If the form has no name or a bad capacity.
        """
        if form.name is None:
            raise InvalidArgumentError("The name is required")
        blank = cls(
            key=ConferenceKey(ProfileKey(organizer_user_id), conference_id),
            organizer_user_id=organizer_user_id,
            name=form.name,
        )
        return blank.update(form)

    @property
    def id(self) -> int:
        return self.key.conference_id

    @property
    def profile_key(self) -> ProfileKey:
        return self.key.profile_key

    @property
    def websafe_key(self) -> str:
        return self.key.to_websafe()

    @property
    def seats_allocated(self) -> int:
        return self.max_attendees - self.seats_available

    def update(self, form: ConferenceForm) -> Self:
        """Apply a form, keeping already allocated seats allocated.

        Raises:
            InvalidArgumentError: If the name is missing, the capacity is
                negative, or the capacity is below the seats already allocated.
        """
        if form.name is None:
            raise InvalidArgumentError("The name is required")
        if form.max_attendees < 0:
            raise InvalidArgumentError("maxAttendees cannot be negative")

        seats_allocated = self.seats_allocated
        if form.max_attendees < seats_allocated:
            raise InvalidArgumentError(
                f"{seats_allocated} seats are already allocated, "
                f"but you tried to set maxAttendees to {form.max_attendees}"
            )

        month = self.month
        if form.start_date is not None:
            month = form.start_date.month

        return replace(
            self,
            name=form.name,
            description=form.description,
            topics=tuple(form.topics) if form.topics else DEFAULT_TOPICS,
            city=DEFAULT_CITY if form.city is None else form.city,
            start_date=form.start_date,
            end_date=form.end_date,
            month=month,
            max_attendees=form.max_attendees,
            seats_available=form.max_attendees - seats_allocated,
        )

    def book_seats(self, number: int) -> Self:
        _require_positive(number)
        if self.seats_available < number:
            raise InvalidArgumentError("There are no seats available")
        return replace(self, seats_available=self.seats_available - number)

    def give_back_seats(self, number: int) -> Self:
        _require_positive(number)
        if self.seats_available + number > self.max_attendees:
            raise InvalidArgumentError("The number of seats would exceed the capacity")
        return replace(self, seats_available=self.seats_available + number)

    def organizer_display_name(self, load_profile: Callable[[ProfileKey], Profile | None]) -> str:
        """Return the organizer's display name, or their user id if the profile is gone."""
        organizer = load_profile(self.profile_key)
        if organizer is None:
            return self.organizer_user_id
        return organizer.display_name


def _require_positive(number: int) -> None:
    if number < 1:
        raise InvalidArgumentError("The number of seats must be at least 1")
