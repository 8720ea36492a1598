from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models

from .base import AuditableModel, CompanyScopedModel


class CalendarEvent(CompanyScopedModel, AuditableModel):
    """Company calendar entry: meetings, deliveries, pickups, maintenance slots."""

    TYPE_CHOICES = [
        ('general', 'General'),
        ('meeting', 'Meeting'),
        ('maintenance', 'Maintenance'),
        ('delivery', 'Delivery'),
        ('pickup', 'Pickup'),
        ('other', 'Other'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    event_date = models.DateField(db_index=True)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    event_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='general')
    color = models.CharField(
        max_length=7,
        default='#3B82F6',
        validators=[RegexValidator(r'^#[0-9A-Fa-f]{6}$', 'Color must be a hex value like #3B82F6')],
    )

    class Meta:
        ordering = ['event_date', 'start_time']

    def __str__(self):
        return f"{self.event_date} {self.title}"

    def clean(self):
        super().clean()
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': 'End time must be after start time'})
