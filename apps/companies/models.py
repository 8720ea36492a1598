"""
Company model for multi-tenancy support.

A company is a car-rental business using the platform. Every car, contract,
payment and booking belongs to exactly one company and is isolated from the
others at the data level.
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from auditlog.registry import auditlog


class Company(models.Model):
    """
    Represents a car-rental company (tenant) in the multi-tenant system.

    **Key Design Decisions:**
    - The owner is a user with the owner role; managers join via ``Manager``
    - Pricing configuration (seasons, duration ranges) lives in ``settings`` JSON
    - Soft delete via 'deleted_at' field
    """

    name = models.CharField(
        max_length=255,
        unique=True,
        help_text="Public name of the rental company"
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='owned_companies',
        help_text="User with the owner role who runs this company"
    )

    location = models.ForeignKey(
        'references.Location',
        on_delete=models.PROTECT,
        related_name='companies',
        help_text="Location the company operates in"
    )

    currency = models.ForeignKey(
        'references.Currency',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        help_text="Base currency for prices"
    )

    # Contact Information
    address = models.CharField(max_length=500, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    logo_url = models.URLField(max_length=500, blank=True)

    # Status and Configuration
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this company can access the system"
    )

    settings = models.JSONField(
        default=dict,
        blank=True,
        help_text="Company configuration (seasons, duration_ranges)"
    )

    # Soft Delete Support
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp when company was soft-deleted"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Company'
        verbose_name_plural = 'Companies'
        indexes = [
            models.Index(fields=['owner', 'is_active'], name='company_owner_active_idx'),
            models.Index(fields=['deleted_at'], name='company_deleted_idx'),
        ]

    def __str__(self):
        return self.name

    def soft_delete(self):
        """
        Soft delete this company.
        Sets deleted_at timestamp and deactivates the company.
        """
        self.deleted_at = timezone.now()
        self.is_active = False
        self.save(update_fields=['deleted_at', 'is_active', 'updated_at'])

    def activate(self):
        """Activate this company."""
        self.is_active = True
        self.save(update_fields=['is_active', 'updated_at'])

    def deactivate(self):
        """Deactivate this company (without soft deleting)."""
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def get_setting(self, key, default=None):
        return (self.settings or {}).get(key, default)

    def set_setting(self, key, value):
        current = dict(self.settings or {})
        current[key] = value
        self.settings = current
        self.save(update_fields=['settings', 'updated_at'])

    @property
    def seasons(self):
        return self.get_setting('seasons') or []

    @property
    def duration_ranges(self):
        from .pricing import DEFAULT_DURATION_RANGES
        return self.get_setting('duration_ranges') or [dict(r) for r in DEFAULT_DURATION_RANGES]


class CompanyCurrency(models.Model):
    """Currency accepted by a company; exactly one is the default."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='company_currencies')
    currency = models.ForeignKey('references.Currency', on_delete=models.CASCADE, related_name='company_links')
    is_default = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['company', 'currency'], name='unique_company_currency'),
            models.UniqueConstraint(
                fields=['company'],
                condition=models.Q(is_default=True),
                name='single_default_currency_per_company',
            ),
        ]

    def __str__(self):
        return f"{self.company} {self.currency}{' (default)' if self.is_default else ''}"


class DeliveryPrice(models.Model):
    """Company-specific delivery price to a district of its location."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='delivery_prices')
    district = models.ForeignKey('references.District', on_delete=models.CASCADE, related_name='delivery_prices')
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['company', 'district'], name='unique_company_district_price'),
            models.CheckConstraint(condition=models.Q(price__gte=0), name='delivery_price_non_negative'),
        ]

    def __str__(self):
        return f"{self.company} -> {self.district}: {self.price}"


# Register for audit logging
auditlog.register(Company)
