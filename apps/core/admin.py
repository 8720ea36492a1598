from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from apps.core.models import Booking, CalendarEvent, CompanyCar, Contract, Payment, Task


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ('payment_status', 'payment_type', 'amount', 'payment_method', 'notes', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(CompanyCar)
class CompanyCarAdmin(SimpleHistoryAdmin):
    list_display = ('id', 'license_plate', 'template', 'company', 'status', 'year', 'price_per_day', 'is_active')
    list_filter = ('company', 'status', 'year', 'deleted_at', 'created_at')
    search_fields = ('license_plate', 'vin', 'template__brand__name', 'template__model__name')
    raw_id_fields = ('company', 'template', 'color', 'created_by', 'updated_by')
    readonly_fields = ('created_at', 'updated_at', 'deleted_at')

    def is_active(self, obj):
        return obj.deleted_at is None
    is_active.boolean = True


@admin.register(Contract)
class ContractAdmin(SimpleHistoryAdmin):
    list_display = ('id', 'car', 'client', 'company', 'status', 'start_date', 'end_date', 'total_amount')
    list_filter = ('company', 'status', 'start_date', 'created_at')
    search_fields = ('car__license_plate', 'client__email', 'client__first_name', 'client__last_name', 'notes')
    raw_id_fields = ('company', 'car', 'client', 'manager', 'booking', 'created_by', 'updated_by')
    readonly_fields = ('created_at', 'updated_at', 'deleted_at')
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'contract', 'company', 'amount', 'payment_status', 'payment_type', 'payment_method', 'created_at')
    list_filter = ('company', 'payment_status', 'payment_type', 'payment_method', 'created_at')
    search_fields = ('contract__car__license_plate', 'notes', 'payment_method')
    raw_id_fields = ('company', 'contract', 'created_by', 'updated_by')


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'car', 'client', 'company', 'status', 'start_date', 'end_date', 'total_amount')
    list_filter = ('company', 'status', 'start_date')
    search_fields = ('car__license_plate', 'client__email', 'notes')
    raw_id_fields = ('company', 'car', 'client', 'created_by', 'updated_by')


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'company', 'assigned_to', 'status', 'due_date')
    list_filter = ('company', 'status')
    search_fields = ('title', 'description', 'assigned_to__email')
    raw_id_fields = ('company', 'assigned_to', 'created_by', 'updated_by')


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'company', 'event_date', 'start_time', 'event_type')
    list_filter = ('company', 'event_type', 'event_date')
    search_fields = ('title', 'description')
    raw_id_fields = ('company', 'created_by', 'updated_by')
