import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from storedesk.locations.models import Store


class InventoryItem(models.Model):
    """Item on sale in one store; stock changes only through conditional updates"""
    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='inventory')
    item_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    stock = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.store.name})"

    class Meta:
        db_table = 'inventory_items'
        indexes = [
            models.Index(fields=['store', 'name'], name='idx_item_store_name'),
        ]
