"""Domain primitives that enforce validity at creation time."""

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum
from typing import Self

from conferences.domain.errors import InvalidWebsafeKeyError

PROFILE_KIND = "Profile"
CONFERENCE_KIND = "Conference"

# Bump when the web-safe key layout changes; decoders reject unknown versions.
WEBSAFE_KEY_VERSION = 1


class TeeShirtSize(Enum):
    """T-shirt sizes a profile can declare."""

    NOT_SPECIFIED = "NOT_SPECIFIED"
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
    XXXL = "XXXL"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as seen by the core."""

    user_id: str
    email: str


@dataclass(frozen=True)
class ProfileKey:
    """Key of a Profile entity, the root of its entity group."""

    user_id: str

    @property
    def path(self) -> tuple[tuple[str, str | int], ...]:
        return ((PROFILE_KIND, self.user_id),)

    @property
    def root(self) -> Self:
        return self


@dataclass(frozen=True)
class ConferenceKey:
    """Composite key of a Conference: its parent profile plus a numeric id."""

    profile_key: ProfileKey
    conference_id: int

    @property
    def path(self) -> tuple[tuple[str, str | int], ...]:
        return self.profile_key.path + ((CONFERENCE_KIND, self.conference_id),)

    @property
    def root(self) -> ProfileKey:
        return self.profile_key

    def to_websafe(self) -> str:
        """Encode the key as URL-safe base64 of a versioned JSON array."""
        payload = json.dumps(
            [
                WEBSAFE_KEY_VERSION,
                PROFILE_KIND,
                self.profile_key.user_id,
                CONFERENCE_KIND,
                self.conference_id,
            ],
            separators=(",", ":"),
        )
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")

    @classmethod
    def from_websafe(cls, value: str) -> Self:
        """Decode a key produced by ``to_websafe``.

        Raises:
            InvalidWebsafeKeyError: If the value is not a v1 conference key.
        """
        padded = value + "=" * (-len(value) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeError, binascii.Error, ValueError) as exc:
            raise InvalidWebsafeKeyError(value) from exc

        if not isinstance(decoded, list) or len(decoded) != 5:
            raise InvalidWebsafeKeyError(value)
        version, profile_kind, user_id, conference_kind, conference_id = decoded
        if (
            version != WEBSAFE_KEY_VERSION
            or profile_kind != PROFILE_KIND
            or conference_kind != CONFERENCE_KIND
            or not isinstance(user_id, str)
            or not isinstance(conference_id, int)
            or isinstance(conference_id, bool)
        ):
            raise InvalidWebsafeKeyError(value)
        return cls(profile_key=ProfileKey(user_id), conference_id=conference_id)
