"""
Admin configuration for company models.
"""

from django.contrib import admin

from .models import Company, CompanyCurrency, DeliveryPrice


class CompanyCurrencyInline(admin.TabularInline):
    model = CompanyCurrency
    extra = 0


class DeliveryPriceInline(admin.TabularInline):
    model = DeliveryPrice
    extra = 0


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'location', 'is_active', 'created_at']
    list_filter = ['is_active', 'location', 'created_at']
    search_fields = ['name', 'email', 'owner__email']
    readonly_fields = ['created_at', 'updated_at', 'deleted_at']
    inlines = [CompanyCurrencyInline, DeliveryPriceInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'owner', 'location', 'currency')
        }),
        ('Contact', {
            'fields': ('address', 'phone', 'email', 'logo_url')
        }),
        ('Status', {
            'fields': ('is_active', 'deleted_at')
        }),
        ('Pricing configuration', {
            'fields': ('settings',),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['activate_companies', 'deactivate_companies']

    @admin.action(description='Activate selected companies')
    def activate_companies(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} company(ies) activated.')

    @admin.action(description='Deactivate selected companies')
    def deactivate_companies(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} company(ies) deactivated.')
