"""
Company-aware querysets and managers.
Implements company isolation and soft-delete filtering for business models.
"""

import logging

from django.db import models

logger = logging.getLogger(__name__)


class CompanyScopedQuerySet(models.QuerySet):
    """
    QuerySet with company-aware filtering helpers.
    """

    def for_company(self, company):
        """Filter queryset for a specific company; no company means no rows."""
        if not company:
            return self.none()
        return self.filter(company=company)

    def active(self):
        """Filter for non-deleted records."""
        return self.filter(deleted_at__isnull=True)


class CompanyScopedManager(models.Manager.from_queryset(CompanyScopedQuerySet)):
    pass


class CompanyScopedSoftDeleteManager(CompanyScopedManager):
    """
    Manager combining company awareness with soft delete functionality.
    """

    def get_queryset(self):
        """Return queryset excluding soft-deleted records by default."""
        return super().get_queryset().active()

    def all_with_deleted(self):
        """Get all records including soft-deleted ones."""
        return CompanyScopedQuerySet(self.model, using=self._db)
