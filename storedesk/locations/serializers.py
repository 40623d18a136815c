from rest_framework import serializers
from storedesk.inventory.serializers import InventoryItemSerializer
from .models import Store


class StoreSerializer(serializers.ModelSerializer):
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False, read_only=True)
    debt = serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False, read_only=True)
    owner_ids = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = ['id', 'name', 'owner_ids', 'total_sales', 'debt', 'item_count', 'created_at', 'updated_at']

    def get_owner_ids(self, obj):
        return obj.owner_ids()

    def get_item_count(self, obj):
        return obj.inventory.count()


class StoreDetailSerializer(StoreSerializer):
    inventory = serializers.SerializerMethodField()

    class Meta(StoreSerializer.Meta):
        fields = StoreSerializer.Meta.fields + ['inventory']

    def get_inventory(self, obj):
        items = obj.inventory.order_by('created_at', 'id')
        return InventoryItemSerializer(items, many=True).data


class StoreCreateSerializer(serializers.Serializer):
    """Name and password are stored exactly as given so credential login can match them"""
    name = serializers.CharField(max_length=200, trim_whitespace=False)
    password = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('This field may not be blank.')
        return value

    def validate_password(self, value):
        if not value.strip():
            raise serializers.ValidationError('This field may not be blank.')
        return value


class StoreLoginSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, trim_whitespace=False)
    password = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)
