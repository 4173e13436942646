"""Unit tests for domain aggregates and primitives.

These test invariants that must hold after every mutation.
Run with: pytest tests/test_domain.py -v
"""

import base64
from datetime import date

import pytest

from conferences.domain import (
    Conference,
    ConferenceForm,
    ConferenceKey,
    Profile,
    ProfileKey,
    TeeShirtSize,
)
from conferences.domain.errors import ErrorCode, InvalidArgumentError, InvalidWebsafeKeyError
from conferences.domain.models import DEFAULT_CITY, DEFAULT_TOPICS, default_display_name


def make_conference(max_attendees: int = 10, **overrides) -> Conference:
    name = overrides.pop("name", "DevCon")
    form = ConferenceForm(name=name, max_attendees=max_attendees, **overrides)
    return Conference.create(1, "u1", form)


class TestProfile:
    """Tests for the Profile aggregate."""

    def test_create_defaults_display_name_to_email_local_part(self):
        """A missing display name becomes the part of the email before '@'."""
        profile = Profile.create("u1", None, "lemoncake@example.com")
        assert profile.display_name == "lemoncake"
        assert profile.main_email == "lemoncake@example.com"
        assert profile.tee_shirt_size is TeeShirtSize.NOT_SPECIFIED

    def test_create_keeps_supplied_values(self):
        """Supplied display name and size are kept."""
        profile = Profile.create("u1", "Lemon", "lemoncake@example.com", TeeShirtSize.XL)
        assert profile.display_name == "Lemon"
        assert profile.tee_shirt_size is TeeShirtSize.XL

    def test_update_ignores_none_fields(self):
        """None leaves a field unchanged."""
        profile = Profile.create("u1", "Lemon", "lemoncake@example.com", TeeShirtSize.M)
        updated = profile.update(display_name=None, tee_shirt_size=TeeShirtSize.S)
        assert updated.display_name == "Lemon"
        assert updated.tee_shirt_size is TeeShirtSize.S

    def test_update_never_touches_identity_or_email(self):
        """user_id and main_email survive updates."""
        profile = Profile.create("u1", None, "lemoncake@example.com")
        updated = profile.update(display_name="Cake")
        assert updated.user_id == "u1"
        assert updated.main_email == "lemoncake@example.com"
        assert profile.display_name == "lemoncake"

    def test_key_is_profile_root(self):
        """A profile key is its own entity-group root."""
        key = Profile.create("u1", None, "a@b.c").key
        assert key == ProfileKey("u1")
        assert key.root == key

    @pytest.mark.parametrize("email", ["", "@example.com"])
    def test_empty_local_part_falls_back_to_user_id(self, email: str):
        """An email with nothing before '@' leaves the user id as display name."""
        profile = Profile.create("u1", None, email)
        assert profile.display_name == "u1"
        assert profile.main_email == email

    def test_default_display_name_without_at_sign(self):
        """Emails without '@' are used whole."""
        assert default_display_name("nobody") == "nobody"
        assert default_display_name(None) is None


class TestConferenceCreate:
    """Tests for Conference.create and form defaulting."""

    def test_create_applies_defaults(self):
        """Empty topics and missing city fall back to defaults."""
        form = ConferenceForm(
            name="DevCon",
            topics=(),
            city=None,
            start_date=date(2024, 3, 15),
            max_attendees=100,
        )
        conference = Conference.create(7, "u1", form)

        assert conference.topics == DEFAULT_TOPICS == ("Default", "Topic")
        assert conference.city == DEFAULT_CITY == "Default City"
        assert conference.month == 3
        assert conference.max_attendees == 100
        assert conference.seats_available == 100
        assert conference.profile_key == ProfileKey("u1")
        assert conference.organizer_user_id == "u1"
        assert conference.id == 7

    def test_create_keeps_supplied_topics_and_city(self):
        """Supplied topics and city are stored as given."""
        conference = make_conference(topics=("Python", "Web"), city="Berlin")
        assert conference.topics == ("Python", "Web")
        assert conference.city == "Berlin"

    def test_create_without_name_fails(self):
        """A missing name is an invalid argument."""
        with pytest.raises(InvalidArgumentError) as excinfo:
            Conference.create(1, "u1", ConferenceForm(name=None, max_attendees=5))
        assert excinfo.value.code is ErrorCode.INVALID_ARGUMENT

    def test_create_with_negative_capacity_fails(self):
        """Capacity cannot be negative."""
        with pytest.raises(InvalidArgumentError):
            make_conference(max_attendees=-1)

    def test_month_is_zero_without_start_date(self):
        """No start date leaves month at 0."""
        assert make_conference().month == 0

    @pytest.mark.parametrize("month", [1, 6, 12])
    def test_month_is_one_based(self, month: int):
        """January is 1 and December is 12."""
        assert make_conference(start_date=date(2025, month, 1)).month == month

    def test_topics_are_copied(self):
        """Mutating the list passed in does not reach the conference."""
        topics = ["Python"]
        conference = Conference.create(
            1, "u1", ConferenceForm(name="DevCon", topics=topics, max_attendees=1)
        )
        topics.append("Go")
        assert conference.topics == ("Python",)


class TestConferenceCapacity:
    """Tests for seat arithmetic across capacity changes."""

    def test_shrink_to_allocated_leaves_no_seats(self):
        """maxAttendees equal to allocated seats leaves zero available."""
        conference = make_conference(max_attendees=100).book_seats(60)
        updated = conference.update(ConferenceForm(name="DevCon", max_attendees=60))
        assert updated.max_attendees == 60
        assert updated.seats_available == 0

    def test_shrink_below_allocated_fails(self):
        """maxAttendees below allocated seats is rejected and names both values."""
        conference = make_conference(max_attendees=100).book_seats(60)
        with pytest.raises(InvalidArgumentError) as excinfo:
            conference.update(ConferenceForm(name="DevCon", max_attendees=59))
        assert "60" in excinfo.value.message
        assert "59" in excinfo.value.message

    def test_grow_preserves_allocated(self):
        """Growing capacity keeps the allocated seat count."""
        conference = make_conference(max_attendees=10).book_seats(4)
        updated = conference.update(ConferenceForm(name="DevCon", max_attendees=25))
        assert updated.seats_allocated == 4
        assert updated.seats_available == 21

    def test_update_without_name_fails(self):
        """Updates also require a name."""
        with pytest.raises(InvalidArgumentError):
            make_conference().update(ConferenceForm(name=None, max_attendees=10))

    def test_update_keeps_month_when_start_date_removed(self):
        """Month is only recomputed when a start date is present."""
        conference = make_conference(start_date=date(2024, 5, 2))
        updated = conference.update(ConferenceForm(name="DevCon", max_attendees=10))
        assert updated.month == 5

    def test_update_keeps_key_and_organizer(self):
        """Identity fields never change on update."""
        conference = make_conference()
        updated = conference.update(ConferenceForm(name="Renamed", max_attendees=10))
        assert updated.key == conference.key
        assert updated.organizer_user_id == conference.organizer_user_id
        assert updated.name == "Renamed"


class TestSeats:
    """Tests for book_seats and give_back_seats."""

    def test_book_all_seats_then_one_more_fails(self):
        """Booking every seat succeeds; the next booking fails."""
        conference = make_conference(max_attendees=10).book_seats(10)
        assert conference.seats_available == 0
        with pytest.raises(InvalidArgumentError):
            conference.book_seats(1)

    def test_give_back_all_allocated_then_one_more_fails(self):
        """Returning every allocated seat succeeds; one more fails."""
        conference = make_conference(max_attendees=10).book_seats(7)
        conference = conference.give_back_seats(conference.seats_allocated)
        assert conference.seats_available == 10
        with pytest.raises(InvalidArgumentError):
            conference.give_back_seats(1)

    @pytest.mark.parametrize("number", [0, -3])
    def test_non_positive_delta_fails(self, number: int):
        """Seat deltas must be at least 1."""
        conference = make_conference()
        with pytest.raises(InvalidArgumentError):
            conference.book_seats(number)
        with pytest.raises(InvalidArgumentError):
            conference.give_back_seats(number)

    def test_sequence_of_changes_sums_up(self):
        """Final seats equal initial minus booked plus returned."""
        conference = make_conference(max_attendees=50)
        booked = [5, 3, 10, 2]
        returned = [4, 1]
        for number in booked:
            conference = conference.book_seats(number)
        for number in returned:
            conference = conference.give_back_seats(number)
        assert conference.seats_available == 50 - sum(booked) + sum(returned)
        assert 0 <= conference.seats_available <= conference.max_attendees

    def test_mutators_return_copies(self):
        """The original aggregate is unchanged by a booking."""
        conference = make_conference(max_attendees=10)
        conference.book_seats(3)
        assert conference.seats_available == 10


class TestOrganizerDisplayName:
    """Tests for the injected organizer lookup."""

    def test_uses_profile_display_name(self):
        """The organizer's display name comes from their profile."""
        profile = Profile.create("u1", "Lemon", "lemoncake@example.com")
        conference = make_conference()
        assert conference.organizer_display_name({profile.key: profile}.get) == "Lemon"

    def test_falls_back_to_user_id(self):
        """Without a profile the organizer's user id is returned."""
        assert make_conference().organizer_display_name(lambda key: None) == "u1"


class TestConferenceKey:
    """Tests for web-safe key encoding."""

    def test_round_trip(self):
        """Decoding a web-safe key yields the original key."""
        key = ConferenceKey(ProfileKey("user@example.com"), 12345)
        assert ConferenceKey.from_websafe(key.to_websafe()) == key

    def test_is_url_safe(self):
        """Encoded keys contain only URL-safe characters and no padding."""
        websafe = ConferenceKey(ProfileKey("ü/+?"), 1).to_websafe()
        assert "=" not in websafe
        assert all(ch.isalnum() or ch in "-_" for ch in websafe)

    def test_conference_exposes_websafe_key(self):
        """Conference.websafe_key encodes its composite key."""
        conference = make_conference()
        assert ConferenceKey.from_websafe(conference.websafe_key) == conference.key

    def test_path(self):
        """Key paths list ancestors first."""
        key = ConferenceKey(ProfileKey("u1"), 3)
        assert key.path == (("Profile", "u1"), ("Conference", 3))
        assert key.root == ProfileKey("u1")

    @pytest.mark.parametrize("value", ["", "not base64!", "bm90IGpzb24", "WzEsMl0"])
    def test_rejects_garbage(self, value: str):
        """Undecodable values raise InvalidWebsafeKeyError."""
        with pytest.raises(InvalidWebsafeKeyError):
            ConferenceKey.from_websafe(value)

    def test_rejects_unknown_version(self):
        """Keys from another format version are rejected."""
        raw = b'[2,"Profile","u1","Conference",1]'
        value = base64.urlsafe_b64encode(raw).decode().rstrip("=")
        with pytest.raises(InvalidWebsafeKeyError):
            ConferenceKey.from_websafe(value)
