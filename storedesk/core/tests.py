"""
Test suite for the core module
Tests: Role assignment, profile lookup, auth endpoints, audit log, store session tokens
"""
from io import StringIO
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from storedesk.core.models import Profile, AuditLog
from storedesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storedesk.core.tokens import StoreSessionToken
from storedesk.core.utils import create_audit_log
from storedesk.core.model_cache import cache_store_data


class RoleAssignmentTests(TestCase):
    """Test assigning roles to the caller"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_assign_role_creates_profile(self):
        """First role assignment creates the profile"""
        response = self.client.post('/api/v1/users/me/role/', {'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        profile = Profile.objects.get(user=self.user)
        self.assertEqual(profile.role, 'owner')
        self.assertEqual(profile.assigned_store_ids(), [])

    def test_assign_role_is_idempotent(self):
        """Assigning the same role twice leaves exactly one profile"""
        self.client.post('/api/v1/users/me/role/', {'role': 'cashier'}, format='json')
        self.client.post('/api/v1/users/me/role/', {'role': 'cashier'}, format='json')
        self.assertEqual(Profile.objects.filter(user=self.user).count(), 1)
        self.assertEqual(Profile.objects.get(user=self.user).role, 'cashier')

    def test_assign_role_overwrites_previous_role(self):
        """A different role replaces the old one"""
        self.client.post('/api/v1/users/me/role/', {'role': 'owner'}, format='json')
        self.client.post('/api/v1/users/me/role/', {'role': 'cashier'}, format='json')
        self.assertEqual(Profile.objects.filter(user=self.user).count(), 1)
        self.assertEqual(Profile.objects.get(user=self.user).role, 'cashier')

    def test_assign_role_keeps_stores(self):
        """Changing role does not touch stores"""
        profile = TestDataFactory.create_profile(user=self.user, role='owner')
        store = TestDataFactory.create_store(owner=profile)
        self.client.post('/api/v1/users/me/role/', {'role': 'cashier'}, format='json')
        profile.refresh_from_db()
        self.assertEqual(profile.assigned_store_ids(), [store.id])
        self.assertTrue(store.owners.filter(pk=profile.pk).exists())

    def test_assign_invalid_role(self):
        """Only owner and cashier can be chosen"""
        response = self.client.post('/api/v1/users/me/role/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Profile.objects.filter(user=self.user).exists())

    def test_assign_role_requires_authentication(self):
        """Anonymous callers are rejected"""
        self.client.logout()
        response = self.client.post('/api/v1/users/me/role/', {'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_assign_role_is_audited(self):
        """Role assignment writes an audit log entry"""
        self.client.post('/api/v1/users/me/role/', {'role': 'owner'}, format='json')
        self.assertTrue(AuditLog.objects.filter(action='role_assign', user=self.user).exists())


class ProfileLookupTests(TestCase):
    """Test fetching the caller's profile"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_profile_is_null_before_role(self):
        response = self.client.get('/api/v1/users/me/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['profile'])

    def test_profile_after_role(self):
        profile = TestDataFactory.create_profile(user=self.user, role='cashier')
        response = self.client.get('/api/v1/users/me/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['profile']['role'], 'cashier')
        self.assertEqual(response.data['profile']['subject'], str(self.user.id))
        self.assertEqual(response.data['profile']['id'], profile.id)

    def test_profile_lists_assigned_stores_in_order(self):
        profile = TestDataFactory.create_profile(user=self.user, role='owner')
        first = TestDataFactory.create_store(owner=profile)
        second = TestDataFactory.create_store(owner=profile)
        response = self.client.get('/api/v1/users/me/profile/')
        self.assertEqual(response.data['profile']['assigned_store_ids'], [first.id, second.id])

    def test_profile_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/users/me/profile/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuthTests(TestCase):
    """Test registration, login and the me endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_register_returns_tokens(self):
        data = {
            'username': 'newcashier',
            'email': 'newcashier@test.com',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Str0ng-pass-123',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'newcashier')

    def test_register_password_mismatch(self):
        data = {
            'username': 'mismatch',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Other-pass-456',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        TestDataFactory.create_user(username='loginuser', password='testpass123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'loginuser', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_without_role(self):
        user = TestDataFactory.create_user()
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['role'])
        self.assertTrue(response.data['needs_role'])
        self.assertFalse(response.data['can_access_owner_dashboard'])
        self.assertFalse(response.data['can_access_cashier_dashboard'])

    def test_me_with_owner_role(self):
        user = TestDataFactory.create_user()
        TestDataFactory.create_profile(user=user, role='owner')
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.data['role'], 'owner')
        self.assertTrue(response.data['can_access_owner_dashboard'])
        self.assertFalse(response.data['can_access_cashier_dashboard'])


class AuditLogTests(TestCase):
    """Test audit log helper and listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_audit_log_skips_missing_fields(self):
        self.assertIsNone(create_audit_log(user=self.user, action='create'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_non_staff_sees_only_own_logs(self):
        create_audit_log(user=self.user, action='create', model_name='Store', object_id='1')
        create_audit_log(user=self.other, action='create', model_name='Store', object_id='2')
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['object_id'], '1')

    def test_malformed_date_filter_is_rejected(self):
        create_audit_log(user=self.user, action='create', model_name='Store', object_id='1')
        for params in ({'date_from': 'yesterday'}, {'date_to': '2024-13-45'}):
            response = self.client.get('/api/v1/audit-logs/', params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, params)
            self.assertIn('error', response.data)

    def test_date_filters(self):
        create_audit_log(user=self.user, action='create', model_name='Store', object_id='1')
        response = self.client.get('/api/v1/audit-logs/', {'date_from': '2000-01-01'})
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/audit-logs/', {'date_to': '2000-01-01T00:00:00'})
        self.assertEqual(len(response.data), 0)

    def test_detail_of_other_users_log_is_denied(self):
        log = create_audit_log(user=self.other, action='create', model_name='Store', object_id='2')
        response = self.client.get(f'/api/v1/audit-logs/{log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StoreSessionTokenTests(TestCase):
    """Test store session tokens"""

    def test_token_round_trip_carries_store(self):
        store = TestDataFactory.create_store()
        token = StoreSessionToken(str(StoreSessionToken.for_store(store)))
        self.assertEqual(token['store_id'], store.id)

    def test_store_token_is_not_an_access_token(self):
        """A store token cannot authenticate as a user"""
        store = TestDataFactory.create_store()
        client = AuthenticatedAPIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {StoreSessionToken.for_store(store)}')
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CheckCacheCommandTests(TestCase):
    """Test the check_cache management command"""

    def test_check_cache_reports_success(self):
        out = StringIO()
        call_command('check_cache', stdout=out)
        self.assertIn('Cache is working', out.getvalue())

    def test_check_cache_reports_cached_store(self):
        store = TestDataFactory.create_store()
        cache_store_data(store.id, {'id': store.id})
        out = StringIO()
        call_command('check_cache', store=store.id, stdout=out)
        self.assertIn(f'Store {store.id}: cached', out.getvalue())
