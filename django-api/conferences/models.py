"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Every row carries a ``version`` used for optimistic concurrency control.
"""

from django.db import models
from django.db.models import Q

from conferences.domain.models import DEFAULT_CITY
from conferences.domain.value_objects import TeeShirtSize


class Profile(models.Model):
    """Persistence model for profiles. Root of an entity group."""

    user_id = models.CharField(primary_key=True, max_length=255)
    display_name = models.CharField(max_length=255)
    main_email = models.CharField(max_length=255)
    tee_shirt_size = models.CharField(
        max_length=16,
        choices=[(size.value, size.value) for size in TeeShirtSize],
        default=TeeShirtSize.NOT_SPECIFIED.value,
    )
    conference_keys_to_attend = models.JSONField(default=list)
    version = models.PositiveIntegerField(default=1)

    def __str__(self) -> str:
        return self.display_name


class Conference(models.Model):
    """Persistence model for conferences, keyed by (profile, conference_id)."""

    profile = models.ForeignKey(Profile, on_delete=models.PROTECT, related_name="conferences")
    conference_id = models.BigIntegerField()
    organizer_user_id = models.CharField(max_length=255)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    topics = models.JSONField(default=list)
    city = models.CharField(max_length=255, default=DEFAULT_CITY)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    month = models.PositiveSmallIntegerField(default=0)
    max_attendees = models.PositiveIntegerField(default=0)
    seats_available = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["name", "conference_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["profile", "conference_id"],
                name="unique_conference_per_profile",
            ),
            models.CheckConstraint(
                condition=Q(seats_available__lte=models.F("max_attendees")),
                name="seats_available_within_capacity",
            ),
        ]
        indexes = [
            models.Index(fields=["name", "conference_id"], name="conference_name_idx"),
            models.Index(fields=["topics"], name="conference_topics_idx"),
            models.Index(fields=["month"], name="conference_month_idx"),
            models.Index(fields=["max_attendees"], name="conference_capacity_idx"),
            models.Index(fields=["seats_available"], name="conference_seats_idx"),
            models.Index(
                fields=["city"],
                condition=~Q(city=DEFAULT_CITY),
                name="conference_city_not_default",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class ConferenceIdSequence(models.Model):
    """Last conference id issued under a profile."""

    user_id = models.CharField(primary_key=True, max_length=255)
    last_id = models.BigIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.user_id}: {self.last_id}"
