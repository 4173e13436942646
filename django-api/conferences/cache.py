"""Cache keys and helpers for the public conference listing."""

from django.conf import settings
from django.core.cache import cache

CONFERENCE_LIST_CACHE_KEY = "conferences:list"


def conference_list_timeout() -> int:
    return getattr(settings, "CONFERENCE_CENTRAL", {}).get("CONFERENCE_LIST_CACHE_TIMEOUT", 60)


def invalidate_conference_list() -> None:
    cache.delete(CONFERENCE_LIST_CACHE_KEY)
