"""Django signals for cache invalidation.

Store writes announce themselves through ``entities_saved``; direct ORM
changes (shell, data fixes) go through the model signals.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from conferences.cache import invalidate_conference_list
from conferences.models import Conference, Profile
from conferences.stores.interfaces import entities_saved


@receiver(entities_saved)
def invalidate_on_store_write(sender, keys, **kwargs):
    """Any profile or conference write can change the public listing."""
    if keys:
        invalidate_conference_list()


@receiver([post_save, post_delete], sender=Conference)
def invalidate_conference_cache(sender, instance, **kwargs):
    """Invalidate the listing when a conference row is saved or deleted."""
    invalidate_conference_list()


@receiver([post_save, post_delete], sender=Profile)
def invalidate_profile_cache(sender, instance, **kwargs):
    """Profiles feed organizerDisplayName in the listing."""
    invalidate_conference_list()
