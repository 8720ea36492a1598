from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.utils import timezone

from apps.core.exceptions import ConflictError
from apps.core.models import CompanyCar
from apps.core.services import (
    cars_needing_attention, create_car, record_maintenance, soft_delete_car, update_car,
)
from apps.core.services.car_service import validate_seasonal_prices
from apps.core.tasks import report_fleet_attention
from tests.factories import (
    CarTemplateFactory, CompanyCarFactory, CompanyFactory, ContractFactory, ManagerFactory,
)


class CreateCarTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.template = CarTemplateFactory()

    def test_owner_creates_car_with_normalized_plate(self):
        car = create_car(actor=self.company.owner, company=self.company, template=self.template,
                         license_plate=" kb 1234 ", year=2023, price_per_day=Decimal('1200'))
        self.assertEqual(car.license_plate, "KB 1234")
        self.assertEqual(car.status, CompanyCar.STATUS_AVAILABLE)
        self.assertEqual(car.created_by, self.company.owner)

    def test_duplicate_plate_in_same_company_is_rejected(self):
        CompanyCarFactory(company=self.company, license_plate="KB 1234")
        with self.assertRaises(ValidationError) as ctx:
            create_car(actor=self.company.owner, company=self.company, template=self.template,
                       license_plate="kb 1234", year=2023, price_per_day=1000)
        self.assertIn("A car with this license plate already exists.", str(ctx.exception))

    def test_same_plate_allowed_in_other_company_and_after_delete(self):
        other = CompanyCarFactory(license_plate="KB 1234")
        create_car(actor=self.company.owner, company=self.company, template=self.template,
                   license_plate="KB 1234", year=2023, price_per_day=1000)
        other.soft_delete()
        create_car(actor=other.company.owner, company=other.company, template=self.template,
                   license_plate="KB 1234", year=2023, price_per_day=1000)

    def test_year_bounds(self):
        for year in (2014, timezone.now().year + 2):
            with self.assertRaises(ValidationError):
                create_car(actor=self.company.owner, company=self.company, template=self.template,
                           license_plate=f"Y {year}", year=year, price_per_day=1000)

    def test_managers_cannot_create_cars(self):
        manager = ManagerFactory(company=self.company)
        with self.assertRaises(PermissionDenied):
            create_car(actor=manager.user, company=self.company, template=self.template,
                       license_plate="M 1", year=2023, price_per_day=1000)


class SeasonalPriceValidationTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory(settings={'seasons': [
            {'id': 'all', 'name': 'All year', 'start_date': '01-01', 'end_date': '12-31', 'price_coefficient': 1},
        ]})

    def test_empty_cells_are_dropped(self):
        cleaned = validate_seasonal_prices(self.company, {'all': {'d1': '1000', 'd2': ''}})
        self.assertEqual(cleaned, {'all': {'d1': 1000.0}})

    def test_unknown_ids_and_negative_prices(self):
        for prices in ({'winter': {'d1': 1}}, {'all': {'d99': 1}}, {'all': {'d1': -5}}, {'all': {'d1': 'x'}}):
            with self.assertRaises(ValidationError):
                validate_seasonal_prices(self.company, prices)


class UpdateCarTests(TestCase):
    def setUp(self):
        self.car = CompanyCarFactory()
        self.owner = self.car.company.owner

    def test_update_with_current_version(self):
        car = update_car(actor=self.owner, car=self.car, expected_updated_at=self.car.updated_at.isoformat(),
                         mileage=20000, description="Fresh tyres")
        self.assertEqual(car.mileage, 20000)

    def test_stale_version_raises_conflict(self):
        stale = (self.car.updated_at - timedelta(seconds=5)).isoformat()
        with self.assertRaises(ConflictError):
            update_car(actor=self.owner, car=self.car, expected_updated_at=stale, mileage=1)
        self.car.refresh_from_db()
        self.assertEqual(self.car.mileage, 10000)

    def test_soft_delete_refuses_rented_car(self):
        ContractFactory(company=self.car.company, car=self.car)
        with self.assertRaises(ValidationError):
            soft_delete_car(actor=self.owner, car=self.car)

    def test_soft_delete_hides_car(self):
        soft_delete_car(actor=self.owner, car=self.car)
        self.assertFalse(CompanyCar.objects.filter(pk=self.car.pk).exists())
        self.assertTrue(CompanyCar.objects.all_with_deleted().filter(pk=self.car.pk).exists())


class MaintenanceTests(TestCase):
    def setUp(self):
        self.car = CompanyCarFactory(mileage=10000)
        self.manager = ManagerFactory(company=self.car.company)

    def test_manager_records_oil_change(self):
        result = record_maintenance(actor=self.manager.user, car=self.car,
                                    performed_at_mileage="12000", next_interval="10000")
        self.assertEqual(result, {'success': True, 'next_due': 22000})
        self.car.refresh_from_db()
        self.assertEqual(self.car.mileage, 12000)
        self.assertEqual(self.car.next_oil_change_mileage, 22000)

    def test_both_values_required(self):
        with self.assertRaises(ValidationError):
            record_maintenance(actor=self.manager.user, car=self.car, performed_at_mileage="", next_interval="5000")

    def test_attention_list(self):
        today = timezone.localdate()
        due = CompanyCarFactory(company=self.car.company, mileage=30000, next_oil_change_mileage=29000)
        expiring = CompanyCarFactory(company=self.car.company, insurance_expiry=today + timedelta(days=10))
        CompanyCarFactory(company=self.car.company, insurance_expiry=today + timedelta(days=90))

        rows = {row['id']: row['reasons'] for row in cars_needing_attention(self.car.company, today=today)}
        self.assertEqual(rows, {due.pk: ['oil_change'], expiring.pk: ['insurance_expiring']})

    def test_attention_task_counts_cars(self):
        CompanyCarFactory(company=self.car.company, registration_expiry=timezone.localdate() - timedelta(days=1))
        self.assertEqual(report_fleet_attention.apply().get(), 1)
