from decimal import Decimal

from rest_framework import serializers
from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    store_id = serializers.IntegerField(read_only=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['item_id', 'store_id', 'name', 'price', 'stock', 'created_at', 'updated_at']


class InventoryItemWriteSerializer(serializers.ModelSerializer):
    """
    Validates item fields for add and update.

    Expects the item's store in context['store']; names are unique per store.
    """
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.00'))
    stock = serializers.IntegerField(min_value=0)

    class Meta:
        model = InventoryItem
        fields = ['name', 'price', 'stock']

    def validate_name(self, value):
        store = self.context.get('store')
        if store is None:
            return value
        duplicates = InventoryItem.objects.filter(store=store, name=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('An item with this name already exists.')
        return value


class CheckoutSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
