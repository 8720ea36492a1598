"""
Rental contract model.

A contract rents one company car to one client for a date range. Structured
pickup details (mileage, fuel, districts, add-ons) travel inside ``notes``;
see ``apps.core.services.contract_notes``.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog

from apps.companies.managers import CompanyScopedSoftDeleteManager
from .base import BaseModel


class Contract(BaseModel):
    """
    Rental agreement between a client and a company car.

    **Business Rules:**
    - Only available or booked cars can be contracted
    - Creating a contract marks the car rented; closing it frees the car
    - Completed and cancelled contracts cannot be closed again
    - Full history tracked
    """

    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    CLOSED_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='contracts',
        help_text="Client renting the car"
    )
    car = models.ForeignKey(
        'core.CompanyCar',
        on_delete=models.PROTECT,
        related_name='contracts',
    )
    manager = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='managed_contracts',
        help_text="Staff member responsible for the contract"
    )
    booking = models.ForeignKey(
        'core.Booking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contracts',
        help_text="Booking this contract was created from"
    )

    start_date = models.DateTimeField(db_index=True)
    end_date = models.DateTimeField(db_index=True)

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    deposit_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )

    notes = models.TextField(
        null=True,
        blank=True,
        help_text="Free-text notes followed by encoded pickup details"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        db_index=True,
    )
    photos = models.JSONField(default=list, blank=True)

    history = HistoricalRecords()

    objects = CompanyScopedSoftDeleteManager()

    class Meta:
        verbose_name = 'Contract'
        verbose_name_plural = 'Contracts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'status'], name='contract_company_status_idx'),
            models.Index(fields=['company', 'start_date'], name='contract_company_start_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name='contract_total_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(deposit_amount__gte=0),
                name='contract_deposit_non_negative',
            ),
        ]

    def __str__(self):
        return f"Contract #{self.pk} ({self.status})"

    def clean(self):
        super().clean()
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': 'End date must be after start date'})
        if self.car_id and self.company_id and self.car.company_id != self.company_id:
            raise ValidationError({'car': 'Car does not belong to this company'})

    @property
    def is_closed(self):
        return self.status in self.CLOSED_STATUSES


auditlog.register(Contract)
