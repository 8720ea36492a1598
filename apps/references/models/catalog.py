"""
Car catalog: brands, models, body and fuel types, colors and car templates.

A car template is a brand/model/spec combination; companies attach their
physical cars (``CompanyCar``) to a template.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models


class CarBrand(models.Model):
    name = models.CharField(max_length=100, unique=True)
    logo_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CarModel(models.Model):
    brand = models.ForeignKey(
        CarBrand,
        on_delete=models.PROTECT,
        related_name='models',
    )
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['brand__name', 'name']
        constraints = [
            models.UniqueConstraint(fields=['brand', 'name'], name='unique_model_per_brand'),
        ]

    def __str__(self):
        return f"{self.brand.name} {self.name}"


class CarBodyType(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CarFuelType(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CarColor(models.Model):
    name = models.CharField(max_length=50, unique=True)
    hex_code = models.CharField(
        max_length=7,
        blank=True,
        validators=[RegexValidator(r'^#[0-9A-Fa-f]{6}$', 'Enter a color like #1A2B3C')],
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CarTemplate(models.Model):
    """
    Brand/model/spec combination shared by many company cars.

    **Business Rules:**
    - The model must belong to the brand
    - Doors 2-5, seats at least 1, engine volume 0.6-10 litres
    """

    TRANSMISSION_AUTOMATIC = 'Automatic'
    TRANSMISSION_MANUAL = 'Manual'

    TRANSMISSION_CHOICES = [
        (TRANSMISSION_AUTOMATIC, 'Automatic'),
        (TRANSMISSION_MANUAL, 'Manual'),
    ]

    brand = models.ForeignKey(CarBrand, on_delete=models.PROTECT, related_name='templates')
    model = models.ForeignKey(CarModel, on_delete=models.PROTECT, related_name='templates')
    body_type = models.ForeignKey(
        CarBodyType,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='templates',
    )
    fuel_type = models.ForeignKey(
        CarFuelType,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='templates',
    )
    transmission = models.CharField(
        max_length=20,
        choices=TRANSMISSION_CHOICES,
        default=TRANSMISSION_AUTOMATIC,
    )
    engine_volume = models.DecimalField(
        max_digits=4,
        decimal_places=1,
        validators=[MinValueValidator(Decimal('0.6')), MaxValueValidator(Decimal('10'))],
        help_text="Engine volume in litres"
    )
    seats = models.PositiveSmallIntegerField(
        default=5,
        validators=[MinValueValidator(1)],
    )
    doors = models.PositiveSmallIntegerField(
        default=4,
        validators=[MinValueValidator(2), MaxValueValidator(5)],
    )
    description = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['brand__name', 'model__name']
        indexes = [
            models.Index(fields=['brand', 'model'], name='template_brand_model_idx'),
        ]

    def __str__(self):
        return f"{self.brand.name} {self.model.name} {self.engine_volume}L {self.transmission}"

    def clean(self):
        super().clean()
        if self.brand_id and self.model_id and self.model.brand_id != self.brand_id:
            raise ValidationError({'model': 'Model does not belong to the selected brand.'})
