from django.conf import settings
from django.db import models

from .base import AuditableModel, CompanyScopedModel


class Task(CompanyScopedModel, AuditableModel):
    """
    To-do item handed from one staff member to another.

    Sending a task to several people creates one row per assignee, so each
    of them tracks their own status.
    """

    STATUS_PENDING = 'pending'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    due_date = models.DateTimeField(null=True, blank=True, db_index=True)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks',
        help_text="Owner or manager the task is addressed to"
    )

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'status'], name='task_company_status_idx'),
        ]

    def __str__(self):
        return self.title
