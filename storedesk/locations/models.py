from decimal import Decimal

from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class Store(models.Model):
    """Store run by one or more owners, reachable by cashiers through its credentials"""
    name = models.CharField(max_length=200, db_index=True)
    password = models.CharField(max_length=128, help_text="Salted hash of the store login password")
    owners = models.ManyToManyField('core.Profile', related_name='owned_stores')
    total_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    debt = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    def owner_ids(self):
        return list(self.owners.order_by('id').values_list('id', flat=True))

    class Meta:
        db_table = 'stores'
        ordering = ['name', 'id']
