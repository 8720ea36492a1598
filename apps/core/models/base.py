"""
Base abstract models for the car-rental back-office.

These models provide common functionality for all company business rows:
- Company scoping
- Soft delete support
- Audit tracking (who created/modified)
- Timestamps
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.companies.context import get_current_company
from apps.companies.managers import CompanyScopedManager, CompanyScopedSoftDeleteManager


class CompanyScopedModel(models.Model):
    """
    Abstract base model for company-scoped entities.

    The company is taken from the request context when it is not assigned
    explicitly; saving without either is an error.
    """

    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.PROTECT,
        related_name='%(class)s_set',
        db_index=True,
        help_text="Rental company this record belongs to"
    )

    objects = CompanyScopedManager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self.company_id:
            company = get_current_company()
            if company is None:
                raise ValueError(
                    f"Cannot save {self.__class__.__name__} without a company. "
                    f"Set request context or assign company explicitly."
                )
            self.company = company
        super().save(*args, **kwargs)


class AuditableModel(models.Model):
    """
    Abstract base model for audit tracking.

    **Tracks:**
    - Who created the record and when
    - Who last modified it and when
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_created_set',
        help_text="User who created this record"
    )

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_updated_set',
        help_text="User who last updated this record"
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteModel(models.Model):
    """
    Abstract base model for soft delete support.

    - Instead of DELETE, ``deleted_at`` is set
    - The default manager hides deleted rows
    """

    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp when record was soft-deleted"
    )

    objects = CompanyScopedSoftDeleteManager()

    class Meta:
        abstract = True

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])

    def restore(self):
        self.deleted_at = None
        self.save(update_fields=['deleted_at', 'updated_at'])

    @property
    def is_deleted(self):
        return self.deleted_at is not None


class BaseModel(CompanyScopedModel, AuditableModel, SoftDeleteModel):
    """
    Company scoping, audit tracking and soft delete in one base.

    ```python
    class CompanyCar(BaseModel):
        license_plate = models.CharField(max_length=20)
    ```
    """

    objects = CompanyScopedSoftDeleteManager()

    class Meta:
        abstract = True
