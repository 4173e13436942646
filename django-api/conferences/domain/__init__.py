from conferences.domain.forms import ConferenceForm, ProfileForm
from conferences.domain.models import Conference, Profile
from conferences.domain.value_objects import ConferenceKey, Identity, ProfileKey, TeeShirtSize

__all__ = [
    "Conference",
    "Profile",
    "ConferenceForm",
    "ProfileForm",
    "ConferenceKey",
    "ProfileKey",
    "Identity",
    "TeeShirtSize",
]
