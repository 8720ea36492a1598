"""
Test factories for the car-rental back-office.
Build companies, users, catalog entries, cars, contracts and payments with
sensible defaults.
"""

import factory
from factory.django import DjangoModelFactory
from django.contrib.auth import get_user_model
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.accounts.models import Manager
from apps.companies.models import Company
from apps.core.models import Booking, CompanyCar, Contract, Payment
from apps.references.models import (
    CarBodyType, CarBrand, CarColor, CarFuelType, CarModel, CarTemplate, Currency,
    District, Location, PaymentStatus, PaymentType,
)

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Client user by default; use the role subclasses for staff."""

    class Meta:
        model = User
        django_get_or_create = ('username',)

    username = factory.Sequence(lambda n: f"user{n}@example.com")
    email = factory.LazyAttribute(lambda obj: obj.username)
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    phone = factory.Sequence(lambda n: f"+6680{n:07d}")
    is_active = True
    role = User.ROLE_CLIENT
    password = factory.PostGenerationMethodCall('set_password', 'Strong!Pass123')


class AdminUserFactory(UserFactory):
    role = User.ROLE_ADMIN


class OwnerUserFactory(UserFactory):
    role = User.ROLE_OWNER


class ManagerUserFactory(UserFactory):
    role = User.ROLE_MANAGER


class LocationFactory(DjangoModelFactory):
    class Meta:
        model = Location
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f"Location {n}")


class DistrictFactory(DjangoModelFactory):
    class Meta:
        model = District

    location = factory.SubFactory(LocationFactory)
    name = factory.Sequence(lambda n: f"District {n}")
    price_per_day = Decimal('300.00')


class CurrencyFactory(DjangoModelFactory):
    class Meta:
        model = Currency
        django_get_or_create = ('code',)

    code = 'THB'
    symbol = '฿'
    name = 'Thai baht'


class CompanyFactory(DjangoModelFactory):
    """Company with an owner user."""

    class Meta:
        model = Company

    name = factory.Sequence(lambda n: f"Test Rental Company {n}")
    owner = factory.SubFactory(OwnerUserFactory)
    location = factory.SubFactory(LocationFactory)
    email = factory.LazyAttribute(lambda obj: f"contact{obj.name.split()[-1]}@example.com")
    is_active = True


class ManagerFactory(DjangoModelFactory):
    class Meta:
        model = Manager

    user = factory.SubFactory(ManagerUserFactory)
    company = factory.SubFactory(CompanyFactory)
    is_active = True


class CarBrandFactory(DjangoModelFactory):
    class Meta:
        model = CarBrand
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f"Brand {n}")


class CarModelFactory(DjangoModelFactory):
    class Meta:
        model = CarModel

    brand = factory.SubFactory(CarBrandFactory)
    name = factory.Sequence(lambda n: f"Model {n}")


class CarBodyTypeFactory(DjangoModelFactory):
    class Meta:
        model = CarBodyType
        django_get_or_create = ('name',)

    name = 'Sedan'


class CarFuelTypeFactory(DjangoModelFactory):
    class Meta:
        model = CarFuelType
        django_get_or_create = ('name',)

    name = 'Petrol'


class CarColorFactory(DjangoModelFactory):
    class Meta:
        model = CarColor
        django_get_or_create = ('name',)

    name = 'White'
    hex_code = '#FFFFFF'


class CarTemplateFactory(DjangoModelFactory):
    class Meta:
        model = CarTemplate

    brand = factory.SubFactory(CarBrandFactory)
    model = factory.SubFactory(CarModelFactory, brand=factory.SelfAttribute('..brand'))
    body_type = factory.SubFactory(CarBodyTypeFactory)
    fuel_type = factory.SubFactory(CarFuelTypeFactory)
    transmission = CarTemplate.TRANSMISSION_AUTOMATIC
    engine_volume = Decimal('1.5')
    seats = 5
    doors = 4


class CompanyCarFactory(DjangoModelFactory):
    class Meta:
        model = CompanyCar

    company = factory.SubFactory(CompanyFactory)
    template = factory.SubFactory(CarTemplateFactory)
    color = factory.SubFactory(CarColorFactory)
    license_plate = factory.Sequence(lambda n: f"KB {1000 + n}")
    year = 2022
    mileage = 10000
    price_per_day = Decimal('1000.00')
    status = CompanyCar.STATUS_AVAILABLE


class PaymentStatusFactory(DjangoModelFactory):
    class Meta:
        model = PaymentStatus
        django_get_or_create = ('name',)

    name = 'Paid'
    value = 1


class PaymentTypeFactory(DjangoModelFactory):
    class Meta:
        model = PaymentType
        django_get_or_create = ('name',)

    name = 'Rental payment'
    sign = PaymentType.SIGN_INCOME


class ContractFactory(DjangoModelFactory):
    class Meta:
        model = Contract

    company = factory.SubFactory(CompanyFactory)
    car = factory.SubFactory(CompanyCarFactory, company=factory.SelfAttribute('..company'))
    client = factory.SubFactory(UserFactory)
    start_date = factory.LazyFunction(timezone.now)
    end_date = factory.LazyAttribute(lambda obj: obj.start_date + timedelta(days=3))
    total_amount = Decimal('3000.00')
    deposit_amount = Decimal('0.00')
    status = Contract.STATUS_ACTIVE


class PaymentFactory(DjangoModelFactory):
    class Meta:
        model = Payment

    contract = factory.SubFactory(ContractFactory)
    company = factory.SelfAttribute('contract.company')
    payment_status = factory.SubFactory(PaymentStatusFactory)
    payment_type = factory.SubFactory(PaymentTypeFactory)
    amount = Decimal('1000.00')
    payment_method = 'cash'


class BookingFactory(DjangoModelFactory):
    class Meta:
        model = Booking

    company = factory.SubFactory(CompanyFactory)
    car = factory.SubFactory(CompanyCarFactory, company=factory.SelfAttribute('..company'))
    client = factory.SubFactory(UserFactory)
    start_date = factory.LazyFunction(lambda: timezone.now() + timedelta(days=1))
    end_date = factory.LazyAttribute(lambda obj: obj.start_date + timedelta(days=2))
    total_amount = Decimal('2000.00')
    status = Booking.STATUS_PENDING
