"""
Test suite for the Inventory module
Tests: Add/update/delete items, checkout stock rules, store access, listing filters
"""
from decimal import Decimal
from unittest import mock
from django.test import TestCase
from rest_framework import status
from storedesk.core.models import AuditLog
from storedesk.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storedesk.inventory.models import InventoryItem
from storedesk.inventory import services
from storedesk.core.exceptions import InsufficientStock, ItemNotFound


class InventoryServiceTests(TestCase):
    """Test inventory service functions directly"""

    def setUp(self):
        self.store = TestDataFactory.create_store()
        self.item = TestDataFactory.create_item(self.store, name='Widget', price=Decimal('2.50'), stock=10)

    def test_checkout_decrements_stock_and_records_sale(self):
        item, sale_total = services.checkout_item(self.store, self.item.item_id, 4)
        self.assertEqual(item.stock, 6)
        self.assertEqual(sale_total, Decimal('10.00'))
        self.store.refresh_from_db()
        self.assertEqual(self.store.total_sales, Decimal('10.00'))

    def test_checkout_whole_stock(self):
        item, _ = services.checkout_item(self.store, self.item.item_id, 10)
        self.assertEqual(item.stock, 0)

    def test_checkout_over_stock_changes_nothing(self):
        with self.assertRaises(InsufficientStock) as ctx:
            services.checkout_item(self.store, self.item.item_id, 11)
        self.assertEqual(ctx.exception.available, 10)
        self.assertEqual(ctx.exception.requested, 11)
        self.item.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(self.item.stock, 10)
        self.assertEqual(self.store.total_sales, Decimal('0.00'))

    def test_checkout_item_from_other_store(self):
        other_store = TestDataFactory.create_store()
        with self.assertRaises(ItemNotFound):
            services.checkout_item(other_store, self.item.item_id, 1)

    def test_checkout_item_deleted_after_lookup(self):
        """An item removed between lookup and sale is reported as missing"""
        stale = InventoryItem.objects.get(pk=self.item.pk)
        self.item.delete()
        with mock.patch('storedesk.inventory.services.get_item', return_value=stale):
            with self.assertRaises(ItemNotFound):
                services.checkout_item(self.store, stale.item_id, 1)
        self.store.refresh_from_db()
        self.assertEqual(self.store.total_sales, Decimal('0.00'))

    def test_update_keeps_omitted_fields(self):
        item, changes = services.update_item(self.store, self.item.item_id, price=Decimal('3.00'))
        self.assertEqual(item.name, 'Widget')
        self.assertEqual(item.stock, 10)
        self.assertEqual(item.price, Decimal('3.00'))
        self.assertEqual(set(changes), {'price'})

    def test_delete_unknown_item_is_noop(self):
        other = TestDataFactory.create_item(TestDataFactory.create_store())
        self.assertIsNone(services.delete_item(self.store, other.item_id))
        self.assertTrue(InventoryItem.objects.filter(pk=other.pk).exists())


class InventoryAPITests(TestCase):
    """Test inventory endpoints as the store owner"""

    def setUp(self):
        self.owner = TestDataFactory.create_profile(role='owner')
        self.store = TestDataFactory.create_store(owner=self.owner, name='Acme', password='secret')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.owner.user)
        self.base_url = f'/api/v1/stores/{self.store.id}/inventory/'

    def test_add_item(self):
        """Adding grows the inventory by one with a fresh identifier"""
        existing = TestDataFactory.create_item(self.store, name='Gadget')
        response = self.client.post(self.base_url, {'name': 'Widget', 'price': '9.99', 'stock': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Widget')
        self.assertEqual(Decimal(response.data['price']), Decimal('9.99'))
        self.assertEqual(response.data['stock'], 10)
        self.assertNotEqual(response.data['item_id'], str(existing.item_id))
        self.assertEqual(self.store.inventory.count(), 2)

    def test_money_fields_render_as_numbers(self):
        item = TestDataFactory.create_item(self.store, name='Widget', price=Decimal('9.99'), stock=10)
        response = self.client.post(f'{self.base_url}{item.item_id}/checkout/', {'quantity': 3}, format='json')
        body = response.json()
        self.assertEqual(body['item']['price'], 9.99)
        self.assertEqual(body['sale_total'], 29.97)

        store = self.client.get(f'/api/v1/stores/{self.store.id}/').json()
        self.assertEqual(store['total_sales'], 29.97)
        self.assertEqual(store['debt'], 0)

    def test_add_item_validation(self):
        cases = [
            {'price': '1.00', 'stock': 1},
            {'name': 'Neg price', 'price': '-1.00', 'stock': 1},
            {'name': 'Neg stock', 'price': '1.00', 'stock': -1},
            {'name': 'Fraction stock', 'price': '1.00', 'stock': 1.5},
        ]
        for data in cases:
            response = self.client.post(self.base_url, data, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, data)
        self.assertEqual(self.store.inventory.count(), 0)

    def test_add_item_zero_price_and_stock(self):
        response = self.client.post(self.base_url, {'name': 'Freebie', 'price': '0', 'stock': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_add_duplicate_name_rejected(self):
        TestDataFactory.create_item(self.store, name='Widget')
        response = self.client.post(self.base_url, {'name': 'Widget', 'price': '1.00', 'stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_same_name_allowed_in_other_store(self):
        TestDataFactory.create_item(TestDataFactory.create_store(), name='Widget')
        response = self.client.post(self.base_url, {'name': 'Widget', 'price': '1.00', 'stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_add_item_to_missing_store(self):
        response = self.client.post('/api/v1/stores/999999/inventory/', {'name': 'Widget', 'price': '1.00', 'stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_item_partial(self):
        item = TestDataFactory.create_item(self.store, name='Widget', price=Decimal('9.99'), stock=10)
        response = self.client.patch(f'{self.base_url}{item.item_id}/', {'stock': 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        item.refresh_from_db()
        self.assertEqual(item.stock, 25)
        self.assertEqual(item.name, 'Widget')
        self.assertEqual(item.price, Decimal('9.99'))

    def test_update_item_rename_to_own_name(self):
        item = TestDataFactory.create_item(self.store, name='Widget')
        response = self.client.patch(f'{self.base_url}{item.item_id}/', {'name': 'Widget', 'price': '5.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_update_unknown_item(self):
        other = TestDataFactory.create_item(TestDataFactory.create_store())
        response = self.client.patch(f'{self.base_url}{other.item_id}/', {'stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        other.refresh_from_db()
        self.assertEqual(other.stock, 10)

    def test_delete_item(self):
        item = TestDataFactory.create_item(self.store)
        response = self.client.delete(f'{self.base_url}{item.item_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertFalse(InventoryItem.objects.filter(pk=item.pk).exists())

    def test_delete_unknown_item(self):
        TestDataFactory.create_item(self.store)
        response = self.client.delete(f'{self.base_url}00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(self.store.inventory.count(), 1)

    def test_checkout(self):
        item = TestDataFactory.create_item(self.store, name='Widget', price=Decimal('9.99'), stock=10)
        other = TestDataFactory.create_item(self.store, name='Gadget', stock=4)
        response = self.client.post(f'{self.base_url}{item.item_id}/checkout/', {'quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['item']['stock'], 7)
        self.assertEqual(Decimal(response.data['sale_total']), Decimal('29.97'))
        other.refresh_from_db()
        self.assertEqual(other.stock, 4)
        self.assertEqual(self.store.inventory.count(), 2)
        self.assertTrue(AuditLog.objects.filter(action='stock_sale', object_id=str(item.item_id)).exists())

    def test_checkout_insufficient_stock(self):
        item = TestDataFactory.create_item(self.store, stock=2)
        response = self.client.post(f'{self.base_url}{item.item_id}/checkout/', {'quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Insufficient stock')
        item.refresh_from_db()
        self.assertEqual(item.stock, 2)

    def test_checkout_invalid_quantity(self):
        item = TestDataFactory.create_item(self.store, stock=2)
        for quantity in (0, -1, 'abc'):
            response = self.client.post(f'{self.base_url}{item.item_id}/checkout/', {'quantity': quantity}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        item.refresh_from_db()
        self.assertEqual(item.stock, 2)

    def test_checkout_unknown_item(self):
        response = self.client.post(f'{self.base_url}00000000-0000-0000-0000-000000000000/checkout/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_acme_widget_scenario(self):
        """Create store, add an item, sell some, then fail to oversell"""
        owner_user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient()
        client.authenticate_user(owner_user)
        client.post('/api/v1/users/me/role/', {'role': 'owner'}, format='json')

        response = client.post('/api/v1/stores/', {'name': 'Acme', 'password': 'secret'}, format='json')
        store_id = response.data['id']
        self.assertEqual(response.data['owner_ids'], [owner_user.profile.id])
        self.assertEqual(response.data['inventory'], [])

        url = f'/api/v1/stores/{store_id}/inventory/'
        response = client.post(url, {'name': 'Widget', 'price': 9.99, 'stock': 10}, format='json')
        item_id = response.data['item_id']

        detail = client.get(f'/api/v1/stores/{store_id}/').data
        self.assertEqual(len(detail['inventory']), 1)
        self.assertEqual(detail['inventory'][0]['name'], 'Widget')
        self.assertEqual(Decimal(detail['inventory'][0]['price']), Decimal('9.99'))
        self.assertEqual(detail['inventory'][0]['stock'], 10)

        response = client.post(f'{url}{item_id}/checkout/', {'quantity': 3}, format='json')
        self.assertEqual(response.data['item']['stock'], 7)

        response = client.post(f'{url}{item_id}/checkout/', {'quantity': 20}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        detail = client.get(f'/api/v1/stores/{store_id}/').data
        self.assertEqual(detail['inventory'][0]['stock'], 7)
        self.assertEqual(Decimal(detail['total_sales']), Decimal('29.97'))


class InventoryAccessTests(TestCase):
    """Test who may manage and sell in a store"""

    def setUp(self):
        self.owner = TestDataFactory.create_profile(role='owner')
        self.store = TestDataFactory.create_store(owner=self.owner, name='Acme', password='secret')
        self.item = TestDataFactory.create_item(self.store, name='Widget', stock=10)
        self.base_url = f'/api/v1/stores/{self.store.id}/inventory/'
        self.client = AuthenticatedAPIClient()

    def test_anonymous_cannot_manage_or_sell(self):
        response = self.client.post(self.base_url, {'name': 'New', 'price': '1.00', 'stock': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(f'{self.base_url}{self.item.item_id}/checkout/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.item.refresh_from_db()
        self.assertEqual(self.item.stock, 10)

    def test_other_owner_cannot_manage(self):
        stranger = TestDataFactory.create_profile(role='owner')
        self.client.authenticate_user(stranger.user)
        response = self.client.delete(f'{self.base_url}{self.item.item_id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(InventoryItem.objects.filter(pk=self.item.pk).exists())

    def test_assigned_cashier_can_sell_but_not_manage(self):
        cashier = TestDataFactory.create_profile(role='cashier')
        cashier.assignments.create(store=self.store)
        self.client.authenticate_user(cashier.user)
        response = self.client.post(f'{self.base_url}{self.item.item_id}/checkout/', {'quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.patch(f'{self.base_url}{self.item.item_id}/', {'price': '0.01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_store_token_allows_checkout_and_listing(self):
        self.client.use_store_token(self.store)
        response = self.client.post(f'{self.base_url}{self.item.item_id}/checkout/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get(self.base_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_store_token_for_other_store_is_refused(self):
        other = TestDataFactory.create_store()
        self.client.use_store_token(other)
        response = self.client.post(f'{self.base_url}{self.item.item_id}/checkout/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_token_from_credential_login_works(self):
        login = self.client.post('/api/v1/stores/login/', {'name': 'Acme', 'password': 'secret'}, format='json')
        self.client.credentials(HTTP_X_STORE_TOKEN=login.data['store_token'])
        response = self.client.post(f'{self.base_url}{self.item.item_id}/checkout/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_garbage_store_token_is_refused(self):
        self.client.credentials(HTTP_X_STORE_TOKEN='not-a-token')
        response = self.client.get(self.base_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class InventoryListTests(TestCase):
    """Test inventory listing filters, ordering and pagination"""

    def setUp(self):
        self.owner = TestDataFactory.create_profile(role='owner')
        self.store = TestDataFactory.create_store(owner=self.owner)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.owner.user)
        self.url = f'/api/v1/stores/{self.store.id}/inventory/'
        TestDataFactory.create_item(self.store, name='Apple', price=Decimal('1.00'), stock=50)
        TestDataFactory.create_item(self.store, name='Banana', price=Decimal('0.50'), stock=3)
        TestDataFactory.create_item(self.store, name='Cherry Pie', price=Decimal('12.00'), stock=5)

    def names(self, response):
        return [item['name'] for item in response.data['results']]

    def test_default_order_is_name(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.names(response), ['Apple', 'Banana', 'Cherry Pie'])
        self.assertEqual(response.data['count'], 3)

    def test_search(self):
        response = self.client.get(self.url, {'search': 'pie'})
        self.assertEqual(self.names(response), ['Cherry Pie'])

    def test_price_range(self):
        response = self.client.get(self.url, {'min_price': '0.75', 'max_price': '10'})
        self.assertEqual(self.names(response), ['Apple'])

    def test_low_stock(self):
        response = self.client.get(self.url, {'low_stock': 'true'})
        self.assertEqual(self.names(response), ['Banana', 'Cherry Pie'])

    def test_ordering(self):
        response = self.client.get(self.url, {'ordering': 'price'})
        self.assertEqual(self.names(response), ['Banana', 'Apple', 'Cherry Pie'])
        response = self.client.get(self.url, {'ordering': '-stock'})
        self.assertEqual(self.names(response), ['Apple', 'Cherry Pie', 'Banana'])

    def test_pagination(self):
        response = self.client.get(self.url, {'limit': 2, 'page': 2})
        self.assertEqual(self.names(response), ['Cherry Pie'])
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['previous'], 1)
        self.assertIsNone(response.data['next'])
