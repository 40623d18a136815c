import logging
from datetime import datetime, time
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from .models import Profile, AuditLog
from .permissions import get_profile
from .serializers import (
    UserSerializer, UserCreateSerializer, ProfileSerializer,
    RoleAssignSerializer, AuditLogSerializer
)
from .utils import create_audit_log

logger = logging.getLogger('storedesk.core')
User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        # Ensure user is active
        if not self.user.is_active:
            from rest_framework_simplejwt.exceptions import AuthenticationFailed
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        profile = get_profile(user)
        token['role'] = profile.role if profile else None
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Custom token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            # User referenced in token doesn't exist anymore
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    """Custom token refresh view that handles deleted users gracefully"""
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"Registered user {user.username}")
        token = CustomTokenObtainPairSerializer.get_token(user)
        return Response({
            'user': UserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with role and dashboard access flags"""
    user = request.user
    user_data = UserSerializer(user).data

    profile = get_profile(user)
    role = profile.role if profile else None
    user_data['role'] = role
    user_data['assigned_store_ids'] = profile.assigned_store_ids() if profile else []

    # The role picks the dashboard; an unset role blocks both until chosen
    user_data['needs_role'] = role is None
    user_data['can_access_owner_dashboard'] = role == Profile.ROLE_OWNER
    user_data['can_access_cashier_dashboard'] = role == Profile.ROLE_CASHIER

    return Response(user_data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def assign_role(request):
    """Set the caller's role, creating their profile on first use"""
    serializer = RoleAssignSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Role assignment validation failed for {request.user.username}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    role = serializer.validated_data['role']
    profile, created = Profile.objects.update_or_create(
        user=request.user,
        defaults={'role': role},
    )
    logger.info(f"User {request.user.username} assigned role '{role}' (new profile: {created})")

    create_audit_log(
        request=request,
        action='role_assign',
        model_name='Profile',
        object_id=str(profile.id),
        object_name=request.user.username,
        changes={'role': role, 'created': created},
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    """Return the caller's profile, or null when no role was assigned yet"""
    profile = get_profile(request.user)
    if profile is None:
        return Response({'profile': None})
    return Response({'profile': ProfileSerializer(profile).data})


def _parse_date_filter(raw):
    """Aware datetime for an ISO date or datetime query value, or None when malformed"""
    try:
        value = parse_datetime(raw)
        if value is None:
            day = parse_date(raw)
            if day is None:
                return None
            value = datetime.combine(day, time.min)
    except ValueError:
        return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    # Filter by user if not admin
    if not request.user.is_staff:
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    reference = request.query_params.get('reference', None)
    if reference:
        queryset = queryset.filter(object_reference=reference)

    for param, lookup in (('date_from', 'created_at__gte'), ('date_to', 'created_at__lte')):
        raw = request.query_params.get(param, None)
        if not raw:
            continue
        value = _parse_date_filter(raw)
        if value is None:
            return Response({'error': f'Invalid {param}: expected an ISO date or datetime'}, status=status.HTTP_400_BAD_REQUEST)
        queryset = queryset.filter(**{lookup: value})

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not request.user.is_staff and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)
