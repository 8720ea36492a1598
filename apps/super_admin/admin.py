from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import PlatformConfig


@admin.register(PlatformConfig)
class PlatformConfigAdmin(SimpleHistoryAdmin):
    list_display = ("maintenance_mode", "support_email", "updated_at")
    readonly_fields = ("created_at", "updated_at")

    def has_add_permission(self, request):
        return not PlatformConfig.objects.exists()
