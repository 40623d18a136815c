from django.contrib import admin
from .models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'total_sales', 'debt', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name']
    ordering = ['name']
    filter_horizontal = ['owners']
    readonly_fields = ['password', 'total_sales', 'created_at', 'updated_at']
