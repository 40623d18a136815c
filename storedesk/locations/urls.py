from django.urls import path
from .views import (
    store_create, stores_owned, stores_assigned,
    store_detail, store_login
)

urlpatterns = [
    path('stores/', store_create, name='store-create'),
    path('stores/owned/', stores_owned, name='store-owned'),
    path('stores/assigned/', stores_assigned, name='store-assigned'),
    path('stores/login/', store_login, name='store-login'),
    path('stores/<int:pk>/', store_detail, name='store-detail'),
]
