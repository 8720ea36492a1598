from django.db import models


class Citizenship(models.Model):
    """Country a client's passport is issued by; feeds the citizenship autocomplete."""

    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=3, blank=True, help_text="ISO 3166 alpha-2 or alpha-3 code")
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)
