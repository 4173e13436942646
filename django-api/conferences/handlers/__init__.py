from conferences.handlers.views import (
    BookSeatsView,
    ConferenceCreateView,
    ConferenceDetailView,
    ConferencesCreatedView,
    GiveBackSeatsView,
    ProfileView,
    QueryConferencesView,
)

__all__ = [
    "BookSeatsView",
    "ConferenceCreateView",
    "ConferenceDetailView",
    "ConferencesCreatedView",
    "GiveBackSeatsView",
    "ProfileView",
    "QueryConferencesView",
]
