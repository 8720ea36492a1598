"""
Geography reference data: rental locations, their districts and hotels.
"""

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

MONTH_DAY_VALIDATOR = RegexValidator(
    regex=r'^(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])$',
    message='Use the MM-DD format',
)


class Location(models.Model):
    """A city or island where companies operate (e.g. Phuket)."""

    name = models.CharField(
        max_length=255,
        unique=True,
        help_text="Location name shown to clients"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class District(models.Model):
    """Delivery district inside a location."""

    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        related_name='districts',
    )
    name = models.CharField(max_length=255)
    price_per_day = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Default delivery price before company overrides"
    )
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['location', 'name'], name='unique_district_per_location'),
        ]

    def __str__(self):
        return f"{self.name} ({self.location})"


class Hotel(models.Model):
    """Hotel used as a delivery/return point."""

    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        related_name='hotels',
    )
    district = models.ForeignKey(
        District,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='hotels',
    )
    name = models.CharField(max_length=255, db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()
        if self.district_id and self.location_id and self.district.location_id != self.location_id:
            raise ValidationError({'district': 'District must belong to the hotel location.'})


class LocationSeason(models.Model):
    """Platform-defined season for a location, replaced as a whole by admins."""

    location = models.ForeignKey(
        Location,
        on_delete=models.CASCADE,
        related_name='seasons',
    )
    name = models.CharField(max_length=100)
    start_date = models.CharField(max_length=5, validators=[MONTH_DAY_VALIDATOR])
    end_date = models.CharField(max_length=5, validators=[MONTH_DAY_VALIDATOR])
    price_coefficient = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=1,
        validators=[MinValueValidator(0)],
        help_text="Price multiplier (1.00 = base price)"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['location', 'start_date']

    def __str__(self):
        return f"{self.name} {self.start_date}..{self.end_date}"
