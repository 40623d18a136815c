"""Role and store access checks shared by the store and inventory views"""
from .exceptions import RoleRequired, StoreAccessDenied, UserNotFound
from .models import Profile
from .tokens import store_id_from_request


def get_profile(user):
    """Return the caller's profile or None when no role was ever assigned"""
    if not user or not user.is_authenticated:
        return None
    return Profile.objects.filter(user=user).first()


def require_profile(user):
    profile = get_profile(user)
    if profile is None:
        raise UserNotFound()
    return profile


def require_role(user):
    """
    Profile of a caller whose role is set.

    Raises UserNotFound without a profile and RoleRequired otherwise.
    """
    profile = require_profile(user)
    if profile.role is None:
        raise RoleRequired()
    return profile


def can_manage_store(request, store):
    profile = get_profile(request.user)
    return profile is not None and store.owners.filter(pk=profile.pk).exists()


def can_sell_in_store(request, store):
    if store_id_from_request(request) == store.id:
        return True
    profile = get_profile(request.user)
    if profile is None:
        return False
    if store.owners.filter(pk=profile.pk).exists():
        return True
    return profile.assignments.filter(store=store).exists()


def check_manage_access(request, store):
    if not can_manage_store(request, store):
        raise StoreAccessDenied('Only an owner of this store can manage its inventory')


def check_sell_access(request, store):
    if not can_sell_in_store(request, store):
        raise StoreAccessDenied()
