"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors reach the exception handler, which maps them to HTTP
- Never contain business logic
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from conferences.cache import CONFERENCE_LIST_CACHE_KEY, conference_list_timeout
from conferences.domain import Conference
from conferences.domain.errors import ProfileNotFoundError
from conferences.handlers.serializers import (
    ConferenceFormSerializer,
    ConferenceSerializer,
    ProfileFormSerializer,
    ProfileSerializer,
    SeatsSerializer,
)
from conferences.services import ConferenceService, identity_of
from conferences.stores.django_store import DjangoConferenceStore


def get_conference_service() -> ConferenceService:
    return ConferenceService(DjangoConferenceStore())


def _render_conferences(service: ConferenceService, conferences: list[Conference]):
    return ConferenceSerializer(
        conferences,
        many=True,
        context={"organizer_display_name": service.organizer_display_name},
    ).data


def _render_conference(service: ConferenceService, conference: Conference):
    return ConferenceSerializer(
        conference,
        context={"organizer_display_name": service.organizer_display_name},
    ).data


class ProfileView(APIView):
    """Handler for GET/POST /api/profile"""

    def get(self, request: Request) -> Response:
        profile = get_conference_service().get_profile(request.user)
        if profile is None:
            raise ProfileNotFoundError(identity_of(request.user).user_id)
        return Response(ProfileSerializer(profile).data)

    def post(self, request: Request) -> Response:
        form = ProfileFormSerializer(data=request.data)
        form.is_valid(raise_exception=True)
        profile = get_conference_service().save_profile(request.user, form.to_form())
        return Response(ProfileSerializer(profile).data)


class ConferenceCreateView(APIView):
    """Handler for POST /api/conference"""

    def post(self, request: Request) -> Response:
        form = ConferenceFormSerializer(data=request.data)
        form.is_valid(raise_exception=True)
        service = get_conference_service()
        conference = service.create_conference(request.user, form.to_form())
        return Response(_render_conference(service, conference), status=status.HTTP_201_CREATED)


class ConferenceDetailView(APIView):
    """Handler for GET/PUT /api/conference/{websafe_key}"""

    def get(self, request: Request, websafe_key: str) -> Response:
        service = get_conference_service()
        return Response(_render_conference(service, service.get_conference(websafe_key)))

    def put(self, request: Request, websafe_key: str) -> Response:
        form = ConferenceFormSerializer(data=request.data)
        form.is_valid(raise_exception=True)
        service = get_conference_service()
        conference = service.update_conference(request.user, websafe_key, form.to_form())
        return Response(_render_conference(service, conference))


class BookSeatsView(APIView):
    """Handler for POST /api/conference/{websafe_key}/bookSeats"""

    def post(self, request: Request, websafe_key: str) -> Response:
        seats = SeatsSerializer(data=request.data)
        seats.is_valid(raise_exception=True)
        service = get_conference_service()
        conference = service.book_seats(request.user, websafe_key, seats.validated_data["number"])
        return Response(_render_conference(service, conference))


class GiveBackSeatsView(APIView):
    """Handler for POST /api/conference/{websafe_key}/giveBackSeats"""

    def post(self, request: Request, websafe_key: str) -> Response:
        seats = SeatsSerializer(data=request.data)
        seats.is_valid(raise_exception=True)
        service = get_conference_service()
        conference = service.give_back_seats(
            request.user, websafe_key, seats.validated_data["number"]
        )
        return Response(_render_conference(service, conference))


class QueryConferencesView(APIView):
    """Handler for POST /api/queryConferences (no authentication needed)"""

    def post(self, request: Request) -> Response:
        data = cache.get(CONFERENCE_LIST_CACHE_KEY)
        if data is None:
            service = get_conference_service()
            data = _render_conferences(service, service.query_conferences())
            cache.set(CONFERENCE_LIST_CACHE_KEY, data, conference_list_timeout())
        return Response(data)


class ConferencesCreatedView(APIView):
    """Handler for POST /api/getConferencesCreated"""

    def post(self, request: Request) -> Response:
        service = get_conference_service()
        return Response(_render_conferences(service, service.get_conferences_created(request.user)))
