"""
Inventory operations on a store's items.

Stock only moves through conditional UPDATE statements, so two checkouts
racing on the same item can never drive it below zero.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from storedesk.core.exceptions import InsufficientStock, ItemNotFound
from storedesk.core.model_cache import invalidate_store_cache
from storedesk.locations.models import Store
from .models import InventoryItem

logger = logging.getLogger(__name__)


def get_item(store, item_id):
    try:
        return InventoryItem.objects.get(store=store, item_id=item_id)
    except (InventoryItem.DoesNotExist, ValidationError):
        raise ItemNotFound()


def add_item(store, name, price, stock):
    item = InventoryItem.objects.create(store=store, name=name, price=price, stock=stock)
    logger.info(f"Added item '{item.name}' ({item.item_id}) to store {store.id}")
    return item


def update_item(store, item_id, **fields):
    """Apply the given fields; fields left out keep their current values"""
    item = get_item(store, item_id)
    changes = {}
    for field in ('name', 'price', 'stock'):
        if field in fields and fields[field] is not None:
            old_value = getattr(item, field)
            if old_value != fields[field]:
                changes[field] = {'old': str(old_value), 'new': str(fields[field])}
            setattr(item, field, fields[field])
    item.save()
    logger.info(f"Updated item {item.item_id} in store {store.id}: {changes}")
    return item, changes


def delete_item(store, item_id):
    """Remove an item; returns the removed item or None when it was not there"""
    item = InventoryItem.objects.filter(store=store, item_id=item_id).first()
    if item is None:
        logger.debug(f"Delete of unknown item {item_id} in store {store.id} ignored")
        return None
    item.delete()
    logger.info(f"Deleted item '{item.name}' ({item_id}) from store {store.id}")
    return item


def checkout_item(store, item_id, quantity):
    """
    Sell ``quantity`` units of an item.

    The decrement only applies while stock >= quantity; otherwise nothing
    changes and InsufficientStock is raised. The store's total sales grow by
    price * quantity in the same transaction.
    """
    item = get_item(store, item_id)
    with transaction.atomic():
        updated = InventoryItem.objects.filter(
            pk=item.pk,
            stock__gte=quantity,
        ).update(stock=F('stock') - quantity)

        if not updated:
            try:
                item.refresh_from_db(fields=['stock'])
            except InventoryItem.DoesNotExist:
                raise ItemNotFound()
            logger.warning(f"Insufficient stock for item {item.item_id}: available {item.stock}, requested {quantity}")
            raise InsufficientStock(item.stock, quantity)

        sale_total = (item.price * Decimal(quantity)).quantize(Decimal('0.01'))
        Store.objects.filter(pk=store.pk).update(total_sales=F('total_sales') + sale_total)

    # update() bypasses model signals
    invalidate_store_cache(store.pk)
    item.refresh_from_db()
    logger.info(f"Checked out {quantity} x {item.item_id} in store {store.id} (sale total {sale_total})")
    return item, sale_total
