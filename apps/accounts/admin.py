"""
Admin configuration for User and Manager models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Manager, User


class ManagerInline(admin.TabularInline):
    model = Manager
    extra = 0
    fk_name = 'user'
    fields = ('company', 'is_active', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = [
        'username', 'email', 'get_full_name', 'role', 'phone', 'is_active', 'created_at'
    ]
    list_filter = ['role', 'is_active', 'is_staff', 'created_at']
    search_fields = ['username', 'email', 'first_name', 'last_name', 'phone', 'passport_number']
    ordering = ['-created_at']
    inlines = [ManagerInline]

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Role', {
            'fields': ('role',)
        }),
        ('Contact profile', {
            'fields': ('phone', 'second_phone', 'telegram', 'passport_number',
                       'citizenship', 'city', 'gender', 'avatar_url')
        }),
        ('Important Dates', {
            'fields': ('created_at', 'updated_at', 'last_login_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'password1', 'password2', 'role', 'is_staff', 'is_active'),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login_at']

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} user(s) activated.')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} user(s) deactivated.')


@admin.register(Manager)
class ManagerAdmin(admin.ModelAdmin):
    list_display = ['user', 'company', 'is_active', 'created_at']
    list_filter = ['is_active', 'company']
    search_fields = ['user__email', 'user__first_name', 'user__last_name', 'company__name']
    raw_id_fields = ['user', 'company']
