from django.conf import settings
from django.db import models
from django.utils import timezone


class AuditLog(models.Model):
    """
    Application-level audit trail.

    One row per mutating API operation, detail view, login event or admin
    entering a company. ``before_state`` / ``after_state`` hold JSON snapshots
    of the entity around the change.
    """

    ACTION_CREATE = 'create'
    ACTION_UPDATE = 'update'
    ACTION_DELETE = 'delete'
    ACTION_LOGIN = 'login'
    ACTION_LOGOUT = 'logout'
    ACTION_LOGIN_FAILED = 'login_failed'
    ACTION_CORRECT = 'correct'
    ACTION_VIEW = 'view'

    ACTION_CHOICES = [
        (ACTION_CREATE, 'Create'),
        (ACTION_UPDATE, 'Update'),
        (ACTION_DELETE, 'Delete'),
        (ACTION_LOGIN, 'Login'),
        (ACTION_LOGOUT, 'Logout'),
        (ACTION_LOGIN_FAILED, 'Login failed'),
        (ACTION_CORRECT, 'Correct'),
        (ACTION_VIEW, 'View'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    role = models.CharField(max_length=20, blank=True)
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    entity_type = models.CharField(max_length=50, db_index=True)
    entity_id = models.CharField(max_length=64, blank=True)
    action = models.CharField(max_length=20, choices=ACTION_CHOICES, db_index=True)
    before_state = models.JSONField(null=True, blank=True)
    after_state = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'created_at'], name='audit_company_created_idx'),
            models.Index(fields=['entity_type', 'entity_id'], name='audit_entity_idx'),
            models.Index(fields=['user', 'created_at'], name='audit_user_created_idx'),
        ]
        verbose_name = 'Audit log'
        verbose_name_plural = 'Audit logs'

    def __str__(self):
        return f"{self.action} {self.entity_type}#{self.entity_id} by {self.user_id}"
