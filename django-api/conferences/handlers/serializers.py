"""Serializers for parsing request forms and rendering domain models.

Wire names are camelCase. ``profileKey`` and ``organizerUserId`` are never
rendered.
"""

from rest_framework import serializers

from conferences.domain import ConferenceForm, ProfileForm, TeeShirtSize


class ProfileFormSerializer(serializers.Serializer):
    """Parses a ProfileForm request body."""

    displayName = serializers.CharField(required=False, allow_null=True)
    teeShirtSize = serializers.ChoiceField(
        choices=[size.value for size in TeeShirtSize],
        required=False,
        allow_null=True,
    )

    def to_form(self) -> ProfileForm:
        size = self.validated_data.get("teeShirtSize")
        return ProfileForm(
            display_name=self.validated_data.get("displayName"),
            tee_shirt_size=None if size is None else TeeShirtSize(size),
        )


class ConferenceFormSerializer(serializers.Serializer):
    """Parses a ConferenceForm request body.

    A missing name is left for the domain to reject so the error is the same
    whichever surface calls the service.
    """

    name = serializers.CharField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    topics = serializers.ListField(
        child=serializers.CharField(), required=False, allow_null=True
    )
    city = serializers.CharField(required=False, allow_null=True)
    startDate = serializers.DateField(required=False, allow_null=True)
    endDate = serializers.DateField(required=False, allow_null=True)
    maxAttendees = serializers.IntegerField(required=False, default=0)

    def to_form(self) -> ConferenceForm:
        data = self.validated_data
        topics = data.get("topics")
        return ConferenceForm(
            name=data.get("name"),
            description=data.get("description"),
            topics=None if topics is None else tuple(topics),
            city=data.get("city"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            max_attendees=data["maxAttendees"],
        )


class SeatsSerializer(serializers.Serializer):
    """Parses a seat booking or return request."""

    number = serializers.IntegerField(required=False, default=1)


class ProfileSerializer(serializers.Serializer):
    """Serializer for Profile domain model."""

    userId = serializers.CharField(source="user_id")
    displayName = serializers.CharField(source="display_name")
    mainEmail = serializers.CharField(source="main_email")
    teeShirtSize = serializers.CharField(source="tee_shirt_size.value")
    conferenceKeysToAttend = serializers.ListField(
        source="conference_keys_to_attend", child=serializers.CharField()
    )


class ConferenceSerializer(serializers.Serializer):
    """Serializer for Conference domain model.

    Expects ``organizer_display_name`` in the context: a callable taking the
    conference and returning the organizer's display name.
    """

    websafeKey = serializers.CharField(source="websafe_key")
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    topics = serializers.ListField(child=serializers.CharField())
    city = serializers.CharField()
    startDate = serializers.DateField(source="start_date", allow_null=True)
    endDate = serializers.DateField(source="end_date", allow_null=True)
    month = serializers.IntegerField()
    maxAttendees = serializers.IntegerField(source="max_attendees")
    seatsAvailable = serializers.IntegerField(source="seats_available")
    organizerDisplayName = serializers.SerializerMethodField()

    def get_organizerDisplayName(self, conference) -> str:
        return self.context["organizer_display_name"](conference)
