import django_filters
from .models import InventoryItem

LOW_STOCK_THRESHOLD = 5


class InventoryItemFilter(django_filters.FilterSet):
    """Filters for a store's inventory listing"""

    search = django_filters.CharFilter(field_name='name', lookup_expr='icontains', label='Search')
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')
    low_stock = django_filters.BooleanFilter(method='filter_low_stock', label='Low Stock')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('name', 'name'),
            ('price', 'price'),
            ('stock', 'stock'),
        ),
    )

    class Meta:
        model = InventoryItem
        fields = ['search', 'min_price', 'max_price', 'low_stock']

    def filter_low_stock(self, queryset, name, value):
        """Items at or under the low stock threshold"""
        if value:
            return queryset.filter(stock__lte=LOW_STOCK_THRESHOLD)
        return queryset
