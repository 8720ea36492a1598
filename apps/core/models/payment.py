"""
Payment model for the car-rental back-office.

Payments are money movements on a contract; the payment type's sign decides
whether a payment is income or expense.
"""

from django.db import models
from auditlog.registry import auditlog

from .base import AuditableModel, CompanyScopedModel


class Payment(CompanyScopedModel, AuditableModel):
    """
    Payment recorded against a contract.

    **Business Rules:**
    - Belongs to the contract's company
    - Pending payments use the status named "pending" (or value 0)
    - Auto-created payments carry the method "pending"
    """

    METHOD_PENDING = 'pending'

    METHOD_CHOICES = [
        (METHOD_PENDING, 'Pending'),
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('bank_transfer', 'Bank Transfer'),
        ('qr', 'QR Payment'),
    ]

    contract = models.ForeignKey(
        'core.Contract',
        on_delete=models.PROTECT,
        related_name='payments',
        help_text="Contract this payment belongs to"
    )
    payment_status = models.ForeignKey(
        'references.PaymentStatus',
        on_delete=models.PROTECT,
        related_name='payments',
    )
    payment_type = models.ForeignKey(
        'references.PaymentType',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Payment amount"
    )
    payment_method = models.CharField(
        max_length=30,
        choices=METHOD_CHOICES,
        help_text="Method of payment"
    )
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'created_at'], name='payment_company_created_idx'),
            models.Index(fields=['contract', 'created_at'], name='payment_contract_created_idx'),
        ]

    def __str__(self):
        return f"Payment {self.amount} on contract #{self.contract_id}"

    @property
    def is_income(self):
        if self.payment_type_id is None:
            return self.amount > 0
        return self.payment_type.sign == '+'


auditlog.register(Payment)
