"""Input forms handed to the domain by the service layer.

Forms carry raw client intent. Defaulting and validation happen in the
aggregates, never here.
"""

from dataclasses import dataclass
from datetime import date

from conferences.domain.value_objects import TeeShirtSize


@dataclass(frozen=True)
class ProfileForm:
    """Fields a caller may change on their profile. None leaves a field unchanged."""

    display_name: str | None = None
    tee_shirt_size: TeeShirtSize | None = None


@dataclass(frozen=True)
class ConferenceForm:
    """Fields a caller supplies when creating or updating a conference."""

    name: str | None
    description: str | None = None
    topics: tuple[str, ...] | None = None
    city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    max_attendees: int = 0
