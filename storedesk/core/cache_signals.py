"""
Cache invalidation signals
Automatically invalidate cached store payloads when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete, m2m_changed
from django.dispatch import receiver
import logging

from storedesk.core.model_cache import invalidate_store_cache
from storedesk.inventory.models import InventoryItem
from storedesk.locations.models import Store

logger = logging.getLogger(__name__)


def invalidate_store_after_commit(store_id):
    """Invalidate now and again after commit so readers never re-cache stale rows"""
    invalidate_store_cache(store_id)
    transaction.on_commit(lambda: invalidate_store_cache(store_id))


@receiver([post_save, post_delete], sender=Store)
def invalidate_store_on_change(sender, instance, **kwargs):
    invalidate_store_after_commit(instance.pk)


@receiver(m2m_changed, sender=Store.owners.through)
def invalidate_store_on_owner_change(sender, instance, action, **kwargs):
    if action in ('post_add', 'post_remove', 'post_clear') and isinstance(instance, Store):
        invalidate_store_after_commit(instance.pk)


@receiver([post_save, post_delete], sender=InventoryItem)
def invalidate_store_on_item_change(sender, instance, **kwargs):
    invalidate_store_after_commit(instance.store_id)
