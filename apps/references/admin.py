from django.contrib import admin

from .models import (
    CarBodyType, CarBrand, CarColor, CarFuelType, CarModel, CarTemplate, Currency,
    Citizenship, District, Hotel, Location, LocationSeason, PaymentStatus, PaymentType,
)


class DistrictInline(admin.TabularInline):
    model = District
    extra = 0


class LocationSeasonInline(admin.TabularInline):
    model = LocationSeason
    extra = 0


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    inlines = [DistrictInline, LocationSeasonInline]


@admin.register(District)
class DistrictAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'price_per_day', 'is_active']
    list_filter = ['location', 'is_active']
    search_fields = ['name']


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'district', 'is_active']
    list_filter = ['location', 'is_active']
    search_fields = ['name']


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ['code', 'symbol', 'name', 'is_active']
    list_filter = ['is_active']
    search_fields = ['code', 'name']


class CarModelInline(admin.TabularInline):
    model = CarModel
    extra = 0


@admin.register(CarBrand)
class CarBrandAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    inlines = [CarModelInline]


@admin.register(CarModel)
class CarModelAdmin(admin.ModelAdmin):
    list_display = ['name', 'brand']
    list_filter = ['brand']
    search_fields = ['name', 'brand__name']


@admin.register(CarTemplate)
class CarTemplateAdmin(admin.ModelAdmin):
    list_display = ['brand', 'model', 'body_type', 'fuel_type', 'transmission', 'engine_volume', 'seats', 'doors']
    list_filter = ['brand', 'body_type', 'fuel_type', 'transmission']
    search_fields = ['brand__name', 'model__name']


admin.site.register(CarBodyType)
admin.site.register(CarFuelType)
admin.site.register(CarColor)


@admin.register(PaymentStatus)
class PaymentStatusAdmin(admin.ModelAdmin):
    list_display = ['name', 'value']


@admin.register(PaymentType)
class PaymentTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'sign', 'is_active']
    list_filter = ['sign', 'is_active']


@admin.register(Citizenship)
class CitizenshipAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'code']
