from django.contrib import admin
from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'store', 'price', 'stock', 'updated_at']
    list_filter = ['store']
    search_fields = ['name', 'item_id', 'store__name']
    ordering = ['store', 'name']
    readonly_fields = ['item_id', 'created_at', 'updated_at']
