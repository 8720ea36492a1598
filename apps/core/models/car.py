"""
Company car model.

A company car is a physical vehicle owned by a company and attached to a
catalog template (brand, model, spec).
"""

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog

from apps.companies.managers import CompanyScopedSoftDeleteManager
from .base import BaseModel

MIN_CAR_YEAR = 2015


class CompanyCar(BaseModel):
    """
    Car in a company's fleet.

    **Business Rules:**
    - License plate unique per company among live cars
    - VIN unique per company among live cars when given
    - Year between 2015 and next year
    - ``seasonal_prices`` maps season id -> duration range id -> daily price
    - Full history tracked
    """

    STATUS_AVAILABLE = 'available'
    STATUS_MAINTENANCE = 'maintenance'
    STATUS_RENTED = 'rented'
    STATUS_BOOKED = 'booked'

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_MAINTENANCE, 'Maintenance'),
        (STATUS_RENTED, 'Rented'),
        (STATUS_BOOKED, 'Booked'),
    ]

    RENTABLE_STATUSES = (STATUS_AVAILABLE, STATUS_BOOKED)

    template = models.ForeignKey(
        'references.CarTemplate',
        on_delete=models.PROTECT,
        related_name='company_cars',
        help_text="Catalog template (brand, model, spec)"
    )
    color = models.ForeignKey(
        'references.CarColor',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='company_cars',
    )

    year = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_CAR_YEAR)],
        help_text="Year of manufacture"
    )
    mileage = models.PositiveIntegerField(default=0, help_text="Odometer in km")
    vin = models.CharField(max_length=17, blank=True, db_index=True)
    license_plate = models.CharField(
        max_length=20,
        db_index=True,
        help_text="License plate number"
    )

    price_per_day = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Base daily price"
    )
    price_per_month = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    seasonal_prices = models.JSONField(
        default=dict,
        blank=True,
        help_text="Daily price per season id and duration range id"
    )

    # Add-on prices
    island_trip_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                            validators=[MinValueValidator(0)])
    krabi_trip_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                           validators=[MinValueValidator(0)])
    full_insurance_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                               validators=[MinValueValidator(0)])
    baby_seat_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                          validators=[MinValueValidator(0)])

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE,
        db_index=True,
    )

    # Maintenance and documents
    next_oil_change_mileage = models.PositiveIntegerField(null=True, blank=True)
    insurance_expiry = models.DateField(null=True, blank=True)
    registration_expiry = models.DateField(null=True, blank=True)
    insurance_type = models.CharField(max_length=50, blank=True)

    # Presentation
    photos = models.JSONField(default=list, blank=True, help_text="Storage keys of car photos")
    document_photos = models.JSONField(default=list, blank=True)
    featured_image_index = models.PositiveSmallIntegerField(default=0)
    marketing_headline = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    history = HistoricalRecords()

    objects = CompanyScopedSoftDeleteManager()

    class Meta:
        verbose_name = 'Company car'
        verbose_name_plural = 'Company cars'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'status'], name='car_company_status_idx'),
            models.Index(fields=['company', 'license_plate'], name='car_company_plate_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['company', 'license_plate'],
                condition=models.Q(deleted_at__isnull=True),
                name='unique_plate_per_company',
                violation_error_message='A car with this license plate already exists.',
            ),
            models.UniqueConstraint(
                fields=['company', 'vin'],
                condition=models.Q(deleted_at__isnull=True) & ~models.Q(vin=''),
                name='unique_vin_per_company',
                violation_error_message='A car with this VIN already exists.',
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_day__gte=0),
                name='car_price_per_day_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.license_plate})"

    @property
    def display_name(self):
        template = self.template
        return f"{template.brand.name} {template.model.name}"

    def clean(self):
        super().clean()
        if self.year and self.year > timezone.now().year + 1:
            raise ValidationError({'year': f'Year must be between {MIN_CAR_YEAR} and {timezone.now().year + 1}'})
        if self.license_plate:
            self.license_plate = self.license_plate.strip().upper()
        if self.vin:
            self.vin = self.vin.strip().upper()

    def get_active_contract(self):
        from .contract import Contract
        return Contract.objects.filter(car=self, status=Contract.STATUS_ACTIVE).first()

    def has_active_contract(self):
        return self.get_active_contract() is not None

    @property
    def is_rentable(self):
        return self.status in self.RENTABLE_STATUSES


auditlog.register(CompanyCar)
