from django.urls import path
from .views import (
    inventory_list_create, inventory_item_detail, inventory_item_checkout
)

urlpatterns = [
    path('stores/<int:store_pk>/inventory/', inventory_list_create, name='inventory-list-create'),
    path('stores/<int:store_pk>/inventory/<uuid:item_id>/', inventory_item_detail, name='inventory-item-detail'),
    path('stores/<int:store_pk>/inventory/<uuid:item_id>/checkout/', inventory_item_checkout, name='inventory-item-checkout'),
]
