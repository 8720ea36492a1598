from django.db import models
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog


class PlatformConfig(models.Model):
    """Platform-wide switches edited by admins; a single row."""

    maintenance_mode = models.BooleanField(default=False, db_index=True)
    support_email = models.EmailField(blank=True)
    announcement = models.TextField(
        blank=True,
        help_text="Message shown to every signed-in user"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        verbose_name = "Platform Configuration"
        verbose_name_plural = "Platform Configuration"

    def __str__(self):
        return "Platform Configuration"

    @classmethod
    def get_solo(cls):
        obj = cls.objects.order_by('id').first()
        if not obj:
            obj = cls.objects.create()
        return obj


auditlog.register(PlatformConfig)
