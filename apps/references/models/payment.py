from django.db import models


class PaymentStatus(models.Model):
    """
    Payment status classifier.

    ``value`` orders statuses: 0 is pending, positive values count as
    received money in revenue statistics.
    """

    name = models.CharField(max_length=50, unique=True)
    value = models.IntegerField(default=0, db_index=True)

    class Meta:
        ordering = ['value', 'name']
        verbose_name_plural = 'Payment statuses'

    def __str__(self):
        return self.name

    @property
    def is_pending(self):
        return self.name.lower() == 'pending' or self.value == 0


class PaymentType(models.Model):
    """Payment type with a sign: '+' is income, '-' is expense."""

    SIGN_INCOME = '+'
    SIGN_EXPENSE = '-'

    SIGN_CHOICES = [
        (SIGN_INCOME, 'Income'),
        (SIGN_EXPENSE, 'Expense'),
    ]

    name = models.CharField(max_length=100, unique=True)
    sign = models.CharField(max_length=1, choices=SIGN_CHOICES, default=SIGN_INCOME)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.sign})"
