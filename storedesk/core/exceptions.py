"""
Domain errors raised by the store and inventory services.

Views catch these and turn them into responses with ``error_response``.
"""
from rest_framework import status
from rest_framework.response import Response


class StoreDeskError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be completed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self):
        return {'error': self.message}


class UserNotFound(StoreDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'User not found'


class StoreNotFound(StoreDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Store not found'


class ItemNotFound(StoreDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Inventory item not found'


class InvalidCredentials(StoreDeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Invalid store credentials'


class RoleRequired(StoreDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Choose a role before using the store dashboards'


class StoreAccessDenied(StoreDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'You do not have access to this store'


class InsufficientStock(StoreDeskError):
    default_message = 'Insufficient stock'

    def __init__(self, available, requested):
        self.available = available
        self.requested = requested
        super().__init__()

    def to_payload(self):
        return {
            'error': self.message,
            'message': f'Available stock: {self.available}, Requested: {self.requested}',
        }


def error_response(exc):
    """Build the API response for a domain error"""
    return Response(exc.to_payload(), status=exc.status_code)
