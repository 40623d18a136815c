"""Store session tokens issued by the store credential login"""
from datetime import timedelta

from django.conf import settings
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import Token


class StoreSessionToken(Token):
    """
    Signed token naming one store.

    A cashier who logged in with the store name and password sends it back in
    the X-Store-Token header. It is never accepted as a user access token
    because its token_type differs from the access token type.
    """
    token_type = 'store_session'
    lifetime = timedelta(hours=getattr(settings, 'STORE_TOKEN_LIFETIME_HOURS', 12))

    @classmethod
    def for_store(cls, store):
        token = cls()
        token['store_id'] = store.id
        return token


def store_id_from_request(request):
    """Return the store id carried by the request's store token, or None"""
    header = getattr(settings, 'STORE_TOKEN_HEADER', 'HTTP_X_STORE_TOKEN')
    raw = request.META.get(header)
    if not raw:
        return None
    try:
        token = StoreSessionToken(raw)
    except TokenError:
        return None
    return token.get('store_id')
