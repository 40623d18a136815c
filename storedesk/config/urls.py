"""
URL configuration for the StoreDesk backend.

All API routes are mounted under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "StoreDesk Admin Panel"
admin.site.site_title = "StoreDesk Admin Portal"
admin.site.index_title = "Store and inventory administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('storedesk.core.urls')),
    path('api/v1/', include('storedesk.locations.urls')),
    path('api/v1/', include('storedesk.inventory.urls')),
]
