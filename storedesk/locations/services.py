"""
Store registry operations.

Each function raises a StoreDeskError subclass on failure; the views turn
those into responses.
"""
import logging

from django.db import transaction

from storedesk.core.exceptions import InvalidCredentials, StoreNotFound
from storedesk.core.models import StoreAssignment
from storedesk.core.permissions import require_profile, require_role
from .models import Store

logger = logging.getLogger(__name__)


def get_store(store_id):
    try:
        return Store.objects.get(pk=store_id)
    except Store.DoesNotExist:
        raise StoreNotFound()


def create_store(user, name, password):
    """
    Create a store owned by ``user`` and append it to their assigned stores.

    The caller needs a profile; any role may create a store.
    """
    profile = require_profile(user)
    with transaction.atomic():
        store = Store(name=name)
        store.set_password(password)
        store.save()
        store.owners.add(profile)
        assign_store(profile, store)
    logger.info(f"Store '{store.name}' (ID: {store.id}) created by {user.username}")
    return store


def assign_store(profile, store):
    """Append ``store`` to the profile's assigned stores; no-op if already there"""
    assignment, created = StoreAssignment.objects.get_or_create(profile=profile, store=store)
    if created:
        logger.debug(f"Store {store.id} assigned to profile {profile.id}")
    return created


def find_store_by_credentials(name, password):
    """
    Return the store whose name matches exactly and whose password verifies.

    Store names are not unique, so every store with the name is tried.
    """
    for store in Store.objects.filter(name=name).order_by('id'):
        if store.check_password(password):
            return store
    raise InvalidCredentials()


def stores_owned_by(user):
    profile = require_role(user)
    return Store.objects.filter(owners=profile).order_by('created_at', 'id')


def stores_assigned_to(user):
    """Assigned stores in assignment order"""
    profile = require_role(user)
    assignments = StoreAssignment.objects.filter(profile=profile).select_related('store').order_by('assigned_at', 'id')
    return [assignment.store for assignment in assignments if assignment.store is not None]
