from django.urls import path

from conferences.handlers import (
    BookSeatsView,
    ConferenceCreateView,
    ConferenceDetailView,
    ConferencesCreatedView,
    GiveBackSeatsView,
    ProfileView,
    QueryConferencesView,
)

urlpatterns = [
    path("profile", ProfileView.as_view(), name="profile"),
    path("conference", ConferenceCreateView.as_view(), name="conference-create"),
    path(
        "conference/<str:websafe_key>",
        ConferenceDetailView.as_view(),
        name="conference-detail",
    ),
    path(
        "conference/<str:websafe_key>/bookSeats",
        BookSeatsView.as_view(),
        name="conference-book-seats",
    ),
    path(
        "conference/<str:websafe_key>/giveBackSeats",
        GiveBackSeatsView.as_view(),
        name="conference-give-back-seats",
    ),
    path("queryConferences", QueryConferencesView.as_view(), name="query-conferences"),
    path(
        "getConferencesCreated",
        ConferencesCreatedView.as_view(),
        name="conferences-created",
    ),
]
