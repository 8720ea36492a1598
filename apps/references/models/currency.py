from django.db import models


class Currency(models.Model):
    """ISO currency a company may accept."""

    code = models.CharField(
        max_length=3,
        unique=True,
        help_text="ISO 4217 code, e.g. THB"
    )
    symbol = models.CharField(max_length=8)
    name = models.CharField(max_length=100)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['code']
        verbose_name_plural = 'Currencies'

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)
