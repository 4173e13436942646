from conferences.services.conference_service import ConferenceService
from conferences.services.identity import identity_of

__all__ = ["ConferenceService", "identity_of"]
