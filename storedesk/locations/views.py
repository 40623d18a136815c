import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from storedesk.core.exceptions import StoreDeskError, error_response
from storedesk.core.model_cache import get_cached_store, cache_store_data
from storedesk.core.models import Profile
from storedesk.core.permissions import get_profile
from storedesk.core.tokens import StoreSessionToken
from storedesk.core.utils import create_audit_log
from .serializers import (
    StoreSerializer, StoreDetailSerializer,
    StoreCreateSerializer, StoreLoginSerializer
)
from . import services

logger = logging.getLogger('storedesk.locations')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def store_create(request):
    """Create a store owned by the caller"""
    serializer = StoreCreateSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Store creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        store = services.create_store(
            request.user,
            serializer.validated_data['name'],
            serializer.validated_data['password'],
        )
    except StoreDeskError as e:
        logger.warning(f"User {request.user.username} could not create store: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error creating store: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='store_create',
        model_name='Store',
        object_id=str(store.id),
        object_name=store.name,
    )
    return Response(StoreDetailSerializer(store).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stores_owned(request):
    """Stores whose owners include the caller"""
    try:
        stores = services.stores_owned_by(request.user)
    except StoreDeskError as e:
        logger.warning(f"Owned store list refused for {request.user.username}: {e.message}")
        return error_response(e)
    return Response(StoreSerializer(stores, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stores_assigned(request):
    """Stores in the caller's assigned list"""
    try:
        stores = services.stores_assigned_to(request.user)
    except StoreDeskError as e:
        logger.warning(f"Assigned store list refused for {request.user.username}: {e.message}")
        return error_response(e)
    return Response(StoreSerializer(stores, many=True).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def store_detail(request, pk):
    """Retrieve a store with its inventory"""
    cached_data = get_cached_store(pk)
    if cached_data:
        return Response(cached_data)

    try:
        store = services.get_store(pk)
    except StoreDeskError as e:
        logger.warning(f"Store {pk} not found")
        return error_response(e)

    response_data = StoreDetailSerializer(store).data
    cache_store_data(store.id, response_data)
    return Response(response_data)


@api_view(['POST'])
@permission_classes([AllowAny])
def store_login(request):
    """
    Store credential login.

    Returns the store and a store session token for later inventory calls.
    An authenticated cashier also gets the store added to their assigned stores.
    """
    serializer = StoreLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    name = serializer.validated_data['name']
    try:
        store = services.find_store_by_credentials(name, serializer.validated_data['password'])
    except StoreDeskError as e:
        logger.warning(f"Failed store login for name '{name}'")
        return error_response(e)

    profile = get_profile(request.user)
    if profile is not None and profile.role == Profile.ROLE_CASHIER:
        services.assign_store(profile, store)

    logger.info(f"Store login succeeded for store {store.id}")
    create_audit_log(
        request=request,
        action='store_login',
        model_name='Store',
        object_id=str(store.id),
        object_name=store.name,
    )

    response_data = dict(StoreDetailSerializer(store).data)
    response_data['store_token'] = str(StoreSessionToken.for_store(store))
    return Response(response_data)
