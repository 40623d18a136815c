"""
Test suite for the Store registry
Tests: Store creation, owner/cashier listings, lookup by id, credential login
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from storedesk.core.models import Profile
from storedesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storedesk.locations.models import Store


class StoreModelTests(TestCase):
    """Test Store model methods"""

    def test_password_is_hashed(self):
        store = TestDataFactory.create_store(name='Acme', password='secret')
        self.assertNotEqual(store.password, 'secret')
        self.assertTrue(store.check_password('secret'))
        self.assertFalse(store.check_password('Secret'))

    def test_store_str(self):
        store = TestDataFactory.create_store(name='Acme')
        self.assertEqual(str(store), 'Acme')


class StoreCreateTests(TestCase):
    """Test store creation"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_store_as_owner(self):
        """Creator becomes the only owner and the store joins their assigned list"""
        profile = TestDataFactory.create_profile(user=self.user, role='owner')
        response = self.client.post('/api/v1/stores/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Acme')
        self.assertEqual(response.data['owner_ids'], [profile.id])
        self.assertEqual(response.data['inventory'], [])
        self.assertEqual(Decimal(response.data['total_sales']), Decimal('0'))
        self.assertEqual(Decimal(response.data['debt']), Decimal('0'))
        self.assertNotIn('password', response.data)

        store = Store.objects.get(pk=response.data['id'])
        self.assertTrue(store.check_password('secret'))
        self.assertEqual(profile.assigned_store_ids(), [store.id])

    def test_create_store_appends_to_assigned_stores(self):
        profile = TestDataFactory.create_profile(user=self.user, role='owner')
        existing = TestDataFactory.create_store(owner=profile)
        response = self.client.post('/api/v1/stores/', {'name': 'Second', 'password': 'pw'}, format='json')
        self.assertEqual(profile.assigned_store_ids(), [existing.id, response.data['id']])

    def test_create_store_without_profile(self):
        """Role must be assigned first"""
        response = self.client.post('/api/v1/stores/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'User not found')
        self.assertFalse(Store.objects.exists())

    def test_create_store_as_cashier(self):
        """Any profile may create a store and becomes its owner"""
        profile = TestDataFactory.create_profile(user=self.user, role='cashier')
        response = self.client.post('/api/v1/stores/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['owner_ids'], [profile.id])
        self.assertEqual(profile.assigned_store_ids(), [response.data['id']])

    def test_create_store_requires_name_and_password(self):
        TestDataFactory.create_profile(user=self.user, role='owner')
        response = self.client.post('/api/v1/stores/', {'name': '', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/stores/', {'name': 'Acme'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/stores/', {'name': '   ', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/stores/', {'name': 'Acme', 'password': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Store.objects.exists())

    def test_padded_credentials_are_kept_exactly(self):
        """Surrounding spaces in name and password are part of the credentials"""
        TestDataFactory.create_profile(user=self.user, role='owner')
        response = self.client.post('/api/v1/stores/', {'name': ' Acme ', 'password': ' secret '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], ' Acme ')
        store_id = response.data['id']

        self.client.logout()
        response = self.client.post('/api/v1/stores/login/', {'name': ' Acme ', 'password': ' secret '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], store_id)
        response = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_store_requires_authentication(self):
        self.client.logout()
        response = self.client.post('/api/v1/stores/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class StoreListTests(TestCase):
    """Test owner and cashier store listings"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_stores_by_owner(self):
        profile = TestDataFactory.create_profile(user=self.user, role='owner')
        mine = TestDataFactory.create_store(owner=profile)
        TestDataFactory.create_store(owner=TestDataFactory.create_profile())
        response = self.client.get('/api/v1/stores/owned/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data], [mine.id])

    def test_stores_by_cashier_in_assignment_order(self):
        profile = TestDataFactory.create_profile(user=self.user, role='cashier')
        first = TestDataFactory.create_store(name='Zeta')
        second = TestDataFactory.create_store(name='Alpha')
        profile.assignments.create(store=first)
        profile.assignments.create(store=second)
        response = self.client.get('/api/v1/stores/assigned/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data], [first.id, second.id])

    def test_deleted_store_drops_from_assigned_list(self):
        profile = TestDataFactory.create_profile(user=self.user, role='cashier')
        kept = TestDataFactory.create_store()
        gone = TestDataFactory.create_store()
        profile.assignments.create(store=kept)
        profile.assignments.create(store=gone)
        gone.delete()
        response = self.client.get('/api/v1/stores/assigned/')
        self.assertEqual([s['id'] for s in response.data], [kept.id])

    def test_listings_without_profile(self):
        self.assertEqual(self.client.get('/api/v1/stores/owned/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/v1/stores/assigned/').status_code, status.HTTP_404_NOT_FOUND)

    def test_listings_with_unset_role(self):
        """An unset role blocks both dashboards"""
        Profile.objects.create(user=self.user, role=None)
        self.assertEqual(self.client.get('/api/v1/stores/owned/').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get('/api/v1/stores/assigned/').status_code, status.HTTP_403_FORBIDDEN)

    def test_listings_require_authentication(self):
        self.client.logout()
        self.assertEqual(self.client.get('/api/v1/stores/owned/').status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(self.client.get('/api/v1/stores/assigned/').status_code, status.HTTP_401_UNAUTHORIZED)


class StoreLookupTests(TestCase):
    """Test store lookup by id and by credentials"""

    def setUp(self):
        self.owner = TestDataFactory.create_profile(role='owner')
        self.store = TestDataFactory.create_store(owner=self.owner, name='Acme', password='secret')
        self.client = AuthenticatedAPIClient()

    def test_get_store_by_id(self):
        TestDataFactory.create_item(self.store, name='Widget', price=Decimal('9.99'), stock=10)
        response = self.client.get(f'/api/v1/stores/{self.store.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Acme')
        self.assertEqual(len(response.data['inventory']), 1)
        self.assertEqual(response.data['inventory'][0]['name'], 'Widget')
        self.assertNotIn('password', response.data)

    def test_get_store_by_id_reflects_new_items(self):
        """Cached detail is dropped when inventory changes"""
        self.client.get(f'/api/v1/stores/{self.store.id}/')
        TestDataFactory.create_item(self.store, name='Widget')
        response = self.client.get(f'/api/v1/stores/{self.store.id}/')
        self.assertEqual(len(response.data['inventory']), 1)

    def test_get_missing_store(self):
        response = self.client.get('/api/v1/stores/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Store not found')

    def test_login_with_correct_credentials(self):
        response = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], self.store.id)
        self.assertIn('store_token', response.data)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid store credentials')

    def test_login_password_is_case_sensitive(self):
        response = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'SECRET'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_with_unknown_name(self):
        response = self.client.post('/api/v1/stores/login/', {'name': 'Nope', 'password': 'secret'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_picks_store_whose_password_matches(self):
        """Names are not unique; the password decides"""
        other = TestDataFactory.create_store(name='Acme', password='other')
        response = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'other'}, format='json')
        self.assertEqual(response.data['id'], other.id)

    def test_login_assigns_store_to_cashier(self):
        cashier = TestDataFactory.create_profile(role='cashier')
        self.client.authenticate_user(cashier.user)
        self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.assertEqual(cashier.assigned_store_ids(), [self.store.id])

        response = self.client.get('/api/v1/stores/assigned/')
        self.assertEqual([s['id'] for s in response.data], [self.store.id])
