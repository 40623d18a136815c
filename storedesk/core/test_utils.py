"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from storedesk.core.models import Profile
from storedesk.core.tokens import StoreSessionToken
from storedesk.locations.models import Store
from storedesk.inventory.models import InventoryItem
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_profile(user=None, role=Profile.ROLE_OWNER):
        """Create a profile (role record) for a user"""
        if not user:
            user = TestDataFactory.create_user()
        return Profile.objects.create(user=user, role=role)

    @staticmethod
    def create_store(owner=None, name=None, password='secret'):
        """Create a test store; ``owner`` is a Profile"""
        if not name:
            name = f'Store_{TestDataFactory.random_string(6)}'
        store = Store(name=name)
        store.set_password(password)
        store.save()
        if owner:
            store.owners.add(owner)
            owner.assignments.get_or_create(store=store)
        return store

    @staticmethod
    def create_item(store, name=None, price=None, stock=10):
        """Create a test inventory item"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        if price is None:
            price = Decimal('9.99')
        return InventoryItem.objects.create(store=store, name=name, price=price, stock=stock)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helpers"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def use_store_token(self, store):
        """Send a store session token for ``store`` with every request"""
        token = StoreSessionToken.for_store(store)
        self.credentials(HTTP_X_STORE_TOKEN=str(token))
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
