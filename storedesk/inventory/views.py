import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.core.paginator import Paginator
from storedesk.core.exceptions import StoreDeskError, error_response
from storedesk.core.permissions import check_manage_access, check_sell_access
from storedesk.core.utils import create_audit_log
from storedesk.locations.services import get_store
from .filters import InventoryItemFilter
from .models import InventoryItem
from .serializers import InventoryItemSerializer, InventoryItemWriteSerializer, CheckoutSerializer
from . import services

logger = logging.getLogger('storedesk.inventory')

DEFAULT_PAGE_SIZE = 10


def _positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def inventory_list_create(request, store_pk):
    """List a store's inventory or add an item to it"""
    try:
        store = get_store(store_pk)
        if request.method == 'GET':
            check_sell_access(request, store)
        else:
            check_manage_access(request, store)
    except StoreDeskError as e:
        logger.warning(f"Inventory access to store {store_pk} refused: {e.message}")
        return error_response(e)

    if request.method == 'GET':
        queryset = InventoryItem.objects.filter(store=store).order_by('name', 'id')
        filterset = InventoryItemFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

        page = _positive_int(request.query_params.get('page'), 1)
        limit = _positive_int(request.query_params.get('limit'), DEFAULT_PAGE_SIZE)
        paginator = Paginator(filterset.qs, limit)
        page_obj = paginator.get_page(page)

        serializer = InventoryItemSerializer(page_obj, many=True)
        return Response({
            'results': serializer.data,
            'count': paginator.count,
            'next': page_obj.next_page_number() if page_obj.has_next() else None,
            'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
            'page': page_obj.number,
            'page_size': limit,
            'total_pages': paginator.num_pages,
        })

    serializer = InventoryItemWriteSerializer(data=request.data, context={'store': store})
    if not serializer.is_valid():
        logger.warning(f"Inventory item validation failed for store {store.id}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        item = services.add_item(store, **serializer.validated_data)
    except Exception as e:
        logger.error(f"Unexpected error adding item to store {store.id}: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='item_add',
        model_name='InventoryItem',
        object_id=str(item.item_id),
        object_name=item.name,
        object_reference=str(store.id),
        changes={'price': str(item.price), 'stock': item.stock},
    )
    return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def inventory_item_detail(request, store_pk, item_id):
    """Update or delete one inventory item"""
    try:
        store = get_store(store_pk)
        check_manage_access(request, store)
    except StoreDeskError as e:
        logger.warning(f"Inventory access to store {store_pk} refused: {e.message}")
        return error_response(e)

    if request.method == 'DELETE':
        item = services.delete_item(store, item_id)
        if item is not None:
            create_audit_log(
                request=request,
                action='item_delete',
                model_name='InventoryItem',
                object_id=str(item_id),
                object_name=item.name,
                object_reference=str(store.id),
            )
        return Response({'success': True})

    try:
        item = services.get_item(store, item_id)
    except StoreDeskError as e:
        logger.warning(f"Update of unknown item {item_id} in store {store.id}")
        return error_response(e)

    serializer = InventoryItemWriteSerializer(item, data=request.data, partial=True, context={'store': store})
    if not serializer.is_valid():
        logger.warning(f"Inventory item update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        item, changes = services.update_item(store, item_id, **serializer.validated_data)
    except StoreDeskError as e:
        return error_response(e)

    create_audit_log(
        request=request,
        action='item_update',
        model_name='InventoryItem',
        object_id=str(item.item_id),
        object_name=item.name,
        object_reference=str(store.id),
        changes=changes,
    )
    return Response({'success': True, 'item': InventoryItemSerializer(item).data})


@api_view(['POST'])
@permission_classes([AllowAny])
def inventory_item_checkout(request, store_pk, item_id):
    """Sell a quantity of one item"""
    try:
        store = get_store(store_pk)
        check_sell_access(request, store)
    except StoreDeskError as e:
        logger.warning(f"Checkout access to store {store_pk} refused: {e.message}")
        return error_response(e)

    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    quantity = serializer.validated_data['quantity']

    try:
        item, sale_total = services.checkout_item(store, item_id, quantity)
    except StoreDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error during checkout in store {store.id}: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='stock_sale',
        model_name='InventoryItem',
        object_id=str(item.item_id),
        object_name=item.name,
        object_reference=str(store.id),
        changes={
            'quantity': quantity,
            'unit_price': str(item.price),
            'sale_total': str(sale_total),
            'new_stock_quantity': item.stock,
        },
    )
    return Response({
        'success': True,
        'item': InventoryItemSerializer(item).data,
        'sale_total': sale_total,
    })
