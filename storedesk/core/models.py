from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Authenticated identity. str(pk) is the caller subject carried in JWTs"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'


class Profile(models.Model):
    """Store role record for a user, created on first role assignment"""
    ROLE_OWNER = 'owner'
    ROLE_CASHIER = 'cashier'
    ROLE_CHOICES = [
        (ROLE_OWNER, 'Owner'),
        (ROLE_CASHIER, 'Cashier'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, null=True, blank=True)
    assigned_stores = models.ManyToManyField(
        'locations.Store',
        through='StoreAssignment',
        related_name='assigned_profiles',
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username} ({self.role or 'unset'})"

    @property
    def subject(self):
        return str(self.user_id)

    def assigned_store_ids(self):
        """Store ids in the order they were assigned"""
        return list(
            self.assignments.order_by('assigned_at', 'id').values_list('store_id', flat=True)
        )

    class Meta:
        db_table = 'profiles'


class StoreAssignment(models.Model):
    """Ordered link between a profile and a store it can work in"""
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='assignments')
    store = models.ForeignKey('locations.Store', on_delete=models.CASCADE, related_name='assignments')
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'store_assignments'
        unique_together = [['profile', 'store']]
        ordering = ['assigned_at', 'id']


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('role_assign', 'Role Assigned'),
        ('store_create', 'Store Created'),
        ('store_login', 'Store Login'),
        ('item_add', 'Inventory Item Added'),
        ('item_update', 'Inventory Item Updated'),
        ('item_delete', 'Inventory Item Deleted'),
        ('stock_sale', 'Stock Removed (Sale)'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., store name, item name)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., store id for an inventory item)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_audit_created'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['model_name'], name='idx_audit_model'),
            models.Index(fields=['object_reference'], name='idx_audit_reference'),
        ]
