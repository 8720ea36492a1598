"""
Custom User model with role-based access.

This is the central authentication model for the back-office, covering the
platform admin, company owners, company managers and rental clients.
"""

import re

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    **Roles:**
    - admin: platform administrator, system scope over every company
    - owner: owns one company (``Company.owner``), company scope
    - manager: works for one company through a ``Manager`` record, company scope
    - client: rents cars, self scope only

    Company membership is not stored on the user: owners are found through
    ``Company.owner`` and managers through ``Manager.user``.
    """

    ROLE_ADMIN = 'admin'
    ROLE_OWNER = 'owner'
    ROLE_MANAGER = 'manager'
    ROLE_CLIENT = 'client'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_OWNER, 'Owner'),
        (ROLE_MANAGER, 'Manager'),
        (ROLE_CLIENT, 'Client'),
    ]

    STAFF_ROLES = (ROLE_ADMIN, ROLE_OWNER, ROLE_MANAGER)

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_CLIENT,
        db_index=True,
        help_text="Access role; decides the user's scope (system, company or self)"
    )

    # Contact profile
    phone = models.CharField(
        max_length=30,
        blank=True,
        db_index=True,
        help_text="Primary phone number"
    )
    second_phone = models.CharField(max_length=30, blank=True)
    telegram = models.CharField(max_length=100, blank=True)
    passport_number = models.CharField(
        max_length=50,
        blank=True,
        db_index=True,
        help_text="Passport or ID document number (clients)"
    )
    citizenship = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    avatar_url = models.URLField(max_length=500, blank=True)
    passport_photos = models.JSONField(
        default=list,
        blank=True,
        help_text="Storage keys of passport scans"
    )
    driver_license_photos = models.JSONField(
        default=list,
        blank=True,
        help_text="Storage keys of driver license scans"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
            models.Index(fields=['email'], name='user_email_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=['admin', 'owner', 'manager', 'client']),
                name='user_role_valid',
            ),
        ]

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.role})"

    def clean(self):
        """
        Validate user instance before saving.
        """
        super().clean()
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            digits = re.sub(r'\D', '', self.phone)
            if len(digits) < 10:
                raise ValidationError({
                    'phone': 'Phone number must contain at least 10 digits.'
                })

    def save(self, *args, **kwargs):
        """
        Override save to enforce business rules.
        """
        self.full_clean(exclude=['password'])
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_owner(self):
        return self.role == self.ROLE_OWNER

    @property
    def is_manager(self):
        return self.role == self.ROLE_MANAGER

    @property
    def is_client(self):
        return self.role == self.ROLE_CLIENT


class Manager(models.Model):
    """Employment of a manager-role user at a company."""

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='manager_records',
        help_text="User with the manager role"
    )
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.CASCADE,
        related_name='managers',
        help_text="Company this manager works for"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive managers lose company access"
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['company', 'is_active'], name='manager_company_active_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'company'],
                name='unique_manager_per_company',
            ),
        ]

    def __str__(self):
        return f"{self.user} @ {self.company}"

    def clean(self):
        super().clean()
        if self.user_id and self.user.role != User.ROLE_MANAGER:
            raise ValidationError({'user': 'User must have the manager role.'})
