import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("user_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("display_name", models.CharField(max_length=255)),
                ("main_email", models.CharField(max_length=255)),
                (
                    "tee_shirt_size",
                    models.CharField(
                        choices=[
                            ("NOT_SPECIFIED", "NOT_SPECIFIED"),
                            ("XS", "XS"),
                            ("S", "S"),
                            ("M", "M"),
                            ("L", "L"),
                            ("XL", "XL"),
                            ("XXL", "XXL"),
                            ("XXXL", "XXXL"),
                        ],
                        default="NOT_SPECIFIED",
                        max_length=16,
                    ),
                ),
                ("conference_keys_to_attend", models.JSONField(default=list)),
                ("version", models.PositiveIntegerField(default=1)),
            ],
        ),
        migrations.CreateModel(
            name="ConferenceIdSequence",
            fields=[
                ("user_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("last_id", models.BigIntegerField(default=0)),
            ],
        ),
        migrations.CreateModel(
            name="Conference",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("conference_id", models.BigIntegerField()),
                ("organizer_user_id", models.CharField(max_length=255)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("topics", models.JSONField(default=list)),
                ("city", models.CharField(default="Default City", max_length=255)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("month", models.PositiveSmallIntegerField(default=0)),
                ("max_attendees", models.PositiveIntegerField(default=0)),
                ("seats_available", models.PositiveIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "profile",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="conferences",
                        to="conferences.profile",
                    ),
                ),
            ],
            options={
                "ordering": ["name", "conference_id"],
                "indexes": [
                    models.Index(
                        fields=["name", "conference_id"], name="conference_name_idx"
                    ),
                    models.Index(fields=["topics"], name="conference_topics_idx"),
                    models.Index(fields=["month"], name="conference_month_idx"),
                    models.Index(fields=["max_attendees"], name="conference_capacity_idx"),
                    models.Index(fields=["seats_available"], name="conference_seats_idx"),
                    models.Index(
                        condition=models.Q(("city", "Default City"), _negated=True),
                        fields=["city"],
                        name="conference_city_not_default",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("profile", "conference_id"), name="unique_conference_per_profile"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("seats_available__lte", models.F("max_attendees"))),
                        name="seats_available_within_capacity",
                    ),
                ],
            },
        ),
    ]
