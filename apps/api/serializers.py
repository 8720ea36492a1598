"""
Serializers for the back-office API.

Output serializers render model rows for the DataTable front-end; input
serializers validate request payloads before they reach the domain services.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.accounts.models import Manager
from apps.accounts.scope import get_user_scope
from apps.audit.models import AuditLog
from apps.companies.models import Company
from apps.core.models import Booking, CalendarEvent, CompanyCar, Contract, Payment, Task
from apps.core.services.car_service import UPDATABLE_FIELDS as CAR_FIELDS
from apps.core.services.contract_notes import ContractDetails, clean_notes, decode_notes
from apps.references.models import (
    CarBodyType, CarBrand, CarColor, CarFuelType, CarModel, CarTemplate, Citizenship, Currency,
    District, Hotel, Location, LocationSeason, PaymentStatus, PaymentType,
)
from apps.super_admin.models import PlatformConfig

User = get_user_model()


# Accounts

class UserSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'phone', 'role']
        read_only_fields = fields


class MeSerializer(serializers.ModelSerializer):
    scope = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'role', 'phone',
            'second_phone', 'telegram', 'citizenship', 'city', 'gender', 'avatar_url',
            'last_login_at', 'scope',
        ]
        read_only_fields = fields

    def get_scope(self, obj):
        scope = get_user_scope(obj)
        return {'role': scope.role, 'scope': scope.scope, 'company_id': scope.company_id}


class ProfileSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    second_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    telegram = serializers.CharField(max_length=100, required=False, allow_blank=True)
    citizenship = serializers.CharField(max_length=100, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES, required=False, allow_blank=True)
    avatar_url = serializers.URLField(max_length=500, required=False, allow_blank=True)


class RegisterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['owner', 'client'], default='client')
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    company_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    location_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class ConfirmEmailSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()


class ClientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name', 'phone', 'second_phone',
            'telegram', 'passport_number', 'citizenship', 'city', 'gender',
            'passport_photos', 'driver_license_photos', 'created_at',
        ]
        read_only_fields = ['id', 'full_name', 'created_at']


class ClientInputSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    second_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    telegram = serializers.CharField(max_length=100, required=False, allow_blank=True)
    passport_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    citizenship = serializers.CharField(max_length=100, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES, required=False, allow_blank=True)
    passport_photos = serializers.ListField(child=serializers.CharField(), required=False)
    driver_license_photos = serializers.ListField(child=serializers.CharField(), required=False)


class ManagerSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Manager
        fields = ['id', 'user', 'company', 'company_name', 'is_active', 'created_at', 'updated_at']
        read_only_fields = fields


class ManagerInputSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    surname = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False, default=True)


# Companies

class CompanySerializer(serializers.ModelSerializer):
    owner_detail = UserSummarySerializer(source='owner', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True, default=None)
    currency_code = serializers.CharField(source='currency.code', read_only=True, default=None)

    class Meta:
        model = Company
        fields = [
            'id', 'name', 'owner', 'owner_detail', 'location', 'location_name', 'currency',
            'currency_code', 'address', 'phone', 'email', 'logo_url', 'is_active',
            'settings', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'owner_detail', 'location_name', 'currency_code', 'settings',
                            'created_at', 'updated_at']
        extra_kwargs = {
            'owner': {'required': False, 'allow_null': True},
            'is_active': {'required': False},
        }
        validators = []


class SeasonSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    start_date = serializers.CharField(max_length=5)
    end_date = serializers.CharField(max_length=5)
    price_coefficient = serializers.FloatField(min_value=0)


class DurationRangeSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    min_days = serializers.IntegerField(min_value=1)
    max_days = serializers.IntegerField(min_value=1, allow_null=True, required=False, default=None)
    price_coefficient = serializers.FloatField(min_value=0)


class CompanyCurrenciesInputSerializer(serializers.Serializer):
    currency_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)
    default_currency_id = serializers.IntegerField(required=False, allow_null=True)


class DeliveryPriceInputSerializer(serializers.Serializer):
    district_id = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_active = serializers.BooleanField(required=False, default=True)


# References

class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ['id', 'name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class DistrictSerializer(serializers.ModelSerializer):
    class Meta:
        model = District
        fields = ['id', 'location', 'name', 'price_per_day', 'is_active', 'created_at']
        read_only_fields = ['id', 'created_at']
        validators = []


class HotelSerializer(serializers.ModelSerializer):
    district_name = serializers.CharField(source='district.name', read_only=True, default=None)

    class Meta:
        model = Hotel
        fields = ['id', 'location', 'district', 'district_name', 'name', 'is_active', 'created_at']
        read_only_fields = ['id', 'district_name', 'created_at']


class LocationSeasonSerializer(serializers.ModelSerializer):
    class Meta:
        model = LocationSeason
        fields = ['id', 'location', 'name', 'start_date', 'end_date', 'price_coefficient']
        read_only_fields = fields


class CurrencySerializer(serializers.ModelSerializer):
    class Meta:
        model = Currency
        fields = ['id', 'code', 'symbol', 'name', 'is_active']
        read_only_fields = ['id']


class CarBrandSerializer(serializers.ModelSerializer):
    class Meta:
        model = CarBrand
        fields = ['id', 'name', 'logo_url', 'created_at']
        read_only_fields = ['id', 'created_at']


class CarModelSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source='brand.name', read_only=True)

    class Meta:
        model = CarModel
        fields = ['id', 'brand', 'brand_name', 'name', 'created_at']
        read_only_fields = ['id', 'brand_name', 'created_at']
        validators = []


class CarBodyTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = CarBodyType
        fields = ['id', 'name']


class CarFuelTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = CarFuelType
        fields = ['id', 'name']


class CarColorSerializer(serializers.ModelSerializer):
    class Meta:
        model = CarColor
        fields = ['id', 'name', 'hex_code']


class CarTemplateSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    model_name = serializers.CharField(source='model.name', read_only=True)
    body_type_name = serializers.CharField(source='body_type.name', read_only=True, default=None)
    fuel_type_name = serializers.CharField(source='fuel_type.name', read_only=True, default=None)

    class Meta:
        model = CarTemplate
        fields = [
            'id', 'brand', 'brand_name', 'model', 'model_name', 'body_type', 'body_type_name',
            'fuel_type', 'fuel_type_name', 'transmission', 'engine_volume', 'seats', 'doors',
            'description', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'brand_name', 'model_name', 'body_type_name', 'fuel_type_name',
                            'created_at', 'updated_at']


class PaymentStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentStatus
        fields = ['id', 'name', 'value']


class PaymentTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentType
        fields = ['id', 'name', 'sign', 'is_active']


class CitizenshipSerializer(serializers.ModelSerializer):
    class Meta:
        model = Citizenship
        fields = ['id', 'name', 'code', 'is_active']


# Fleet

class CompanyCarSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)
    template_detail = CarTemplateSerializer(source='template', read_only=True)
    color_detail = CarColorSerializer(source='color', read_only=True)

    class Meta:
        model = CompanyCar
        fields = ['id', 'company', 'name', 'template_detail', 'color_detail', *CAR_FIELDS,
                  'created_at', 'updated_at']
        read_only_fields = ['id', 'company', 'name', 'template_detail', 'color_detail',
                            'created_at', 'updated_at']
        validators = []


class CompanyCarInputSerializer(serializers.ModelSerializer):
    """Car payload; ``updated_at`` carries the optimistic-lock version on updates."""

    updated_at = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = CompanyCar
        fields = [*CAR_FIELDS, 'updated_at']
        validators = []


class MaintenanceInputSerializer(serializers.Serializer):
    performed_at_mileage = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    next_interval = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# Public catalog

class PublicCarSerializer(serializers.ModelSerializer):
    """Available car as the client site shows it; plates and VINs stay private."""

    name = serializers.CharField(source='display_name', read_only=True)
    template_detail = CarTemplateSerializer(source='template', read_only=True)
    color_detail = CarColorSerializer(source='color', read_only=True)
    company_detail = serializers.SerializerMethodField()

    class Meta:
        model = CompanyCar
        fields = ['id', 'name', 'template_detail', 'color_detail', 'company_detail', 'year', 'mileage',
                  'price_per_day', 'photos', 'featured_image_index', 'marketing_headline', 'description',
                  'created_at']
        read_only_fields = fields

    def get_company_detail(self, obj):
        return {'id': obj.company_id, 'name': obj.company.name}


# Contracts, payments, bookings

class ContractSerializer(serializers.ModelSerializer):
    client = UserSummarySerializer(read_only=True)
    manager = UserSummarySerializer(read_only=True)
    car = serializers.SerializerMethodField()
    details = serializers.SerializerMethodField()
    free_notes = serializers.SerializerMethodField()

    class Meta:
        model = Contract
        fields = [
            'id', 'company', 'client', 'car', 'manager', 'booking', 'start_date', 'end_date',
            'total_amount', 'deposit_amount', 'status', 'notes', 'free_notes', 'details',
            'photos', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_car(self, obj):
        return {'id': obj.car_id, 'name': obj.car.display_name, 'license_plate': obj.car.license_plate}

    def get_details(self, obj):
        return decode_notes(obj.notes).to_dict()

    def get_free_notes(self, obj):
        return clean_notes(obj.notes)


class ContractDetailsSerializer(serializers.Serializer):
    """Pickup details packed into the contract notes."""

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError('Expected an object of contract details.')
        return ContractDetails.from_dict(data)

    def to_representation(self, instance):
        return instance.to_dict()


class ContractInputSerializer(serializers.Serializer):
    company_car_id = serializers.IntegerField(required=False)
    client_id = serializers.IntegerField(required=False)
    manager_id = serializers.IntegerField(required=False, allow_null=True)
    booking_id = serializers.IntegerField(required=False, allow_null=True)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    deposit_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False,
                                              allow_null=True)
    status = serializers.ChoiceField(choices=Contract.STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    details = ContractDetailsSerializer(required=False)
    photos = serializers.ListField(child=serializers.CharField(), required=False)
    car_updated_at = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    updated_at = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_deposit_amount(self, value):
        return value if value is not None else 0


class CloseFeeSerializer(serializers.Serializer):
    type_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    custom_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CloseContractSerializer(serializers.Serializer):
    fees = CloseFeeSerializer(many=True, required=False)


class PaymentSerializer(serializers.ModelSerializer):
    payment_status_name = serializers.CharField(source='payment_status.name', read_only=True)
    payment_type_name = serializers.CharField(source='payment_type.name', read_only=True, default=None)
    payment_type_sign = serializers.CharField(source='payment_type.sign', read_only=True, default=None)
    client_name = serializers.CharField(source='contract.client.get_full_name', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'company', 'contract', 'payment_status', 'payment_status_name', 'payment_type',
            'payment_type_name', 'payment_type_sign', 'amount', 'payment_method', 'notes',
            'client_name', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentInputSerializer(serializers.Serializer):
    contract_id = serializers.IntegerField(required=False)
    payment_status_id = serializers.IntegerField(required=False)
    payment_type_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    payment_method = serializers.CharField(max_length=30, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BookingSerializer(serializers.ModelSerializer):
    client = UserSummarySerializer(read_only=True)
    car = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = ['id', 'company', 'client', 'car', 'start_date', 'end_date', 'total_amount',
                  'status', 'notes', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_car(self, obj):
        return {'id': obj.car_id, 'name': obj.car.display_name, 'license_plate': obj.car.license_plate}


class BookingInputSerializer(serializers.Serializer):
    company_car_id = serializers.IntegerField(required=False)
    client_id = serializers.IntegerField(required=False, allow_null=True)
    start_date = serializers.CharField(required=False)
    end_date = serializers.CharField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


# Tasks and calendar

class RecipientsField(serializers.ListField):
    """One user id or a list of them."""

    child = serializers.IntegerField()

    def to_internal_value(self, data):
        if not isinstance(data, list):
            data = [data]
        return super().to_internal_value(data)


class TaskSerializer(serializers.ModelSerializer):
    assigned_to = UserSummarySerializer(read_only=True)
    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'company', 'title', 'description', 'status', 'due_date', 'assigned_to',
                  'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class TaskInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    status = serializers.ChoiceField(choices=Task.STATUS_CHOICES, default=Task.STATUS_PENDING)
    due_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    assigned_to = RecipientsField(required=False, default=list)


class TaskUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=Task.STATUS_CHOICES, required=False)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    assigned_to = serializers.IntegerField(required=False, allow_null=True)


class CalendarEventSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = CalendarEvent
        fields = ['id', 'company', 'title', 'description', 'event_date', 'start_time', 'end_time',
                  'event_type', 'color', 'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class CalendarEventInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    event_date = serializers.DateField(required=False)
    start_time = serializers.TimeField(required=False, allow_null=True)
    end_time = serializers.TimeField(required=False, allow_null=True)
    event_type = serializers.ChoiceField(choices=CalendarEvent.TYPE_CHOICES, required=False)
    color = serializers.CharField(max_length=7, required=False)


# Audit and platform

class AuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.CharField(source='user.email', read_only=True, default=None)
    company_name = serializers.CharField(source='company.name', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'user', 'user_email', 'role', 'company', 'company_name', 'entity_type',
            'entity_id', 'action', 'before_state', 'after_state', 'ip_address', 'user_agent',
            'created_at',
        ]
        read_only_fields = fields


class PlatformConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformConfig
        fields = ['maintenance_mode', 'support_email', 'announcement', 'updated_at']
        read_only_fields = ['updated_at']
