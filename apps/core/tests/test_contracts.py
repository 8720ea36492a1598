from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from django.test import TestCase
from django.utils import timezone

from apps.core.exceptions import ConflictError
from apps.core.models import Booking, CompanyCar, Contract, Payment
from apps.core.services import close_contract, create_contract, update_contract
from apps.core.services.contract_notes import decode_notes
from tests.factories import (
    BookingFactory, CompanyCarFactory, CompanyFactory, ContractFactory, ManagerFactory,
    PaymentStatusFactory, PaymentTypeFactory, UserFactory,
)

PICKUP = {
    'fuel_level': 'Full', 'cleanliness': 'Clean', 'pickup_district': 'Patong',
    'return_district': 'Kata', 'start_mileage': '10000',
}


class ContractFixturesMixin:
    def setUp(self):
        self.company = CompanyFactory()
        self.manager = ManagerFactory(company=self.company).user
        self.car = CompanyCarFactory(company=self.company, mileage=10000)
        self.client_user = UserFactory()
        self.pending = PaymentStatusFactory(name='Pending', value=0)
        self.rental = PaymentTypeFactory(name='Rental fee', sign='+')
        self.deposit = PaymentTypeFactory(name='Deposit', sign='+')
        self.other = PaymentTypeFactory(name='Other charges', sign='+')

    def _create(self, **overrides):
        start = timezone.now()
        values = dict(
            actor=self.manager, company=self.company, car=self.car, client=self.client_user,
            start_date=start, end_date=start + timedelta(days=3), total_amount=Decimal('3000'),
            deposit_amount=Decimal('5000'), details=dict(PICKUP, notes='Leaves early'),
        )
        values.update(overrides)
        return create_contract(**values)


class CreateContractTests(ContractFixturesMixin, TestCase):
    def test_contract_rents_car_and_creates_pending_payments(self):
        contract = self._create()

        self.car.refresh_from_db()
        self.assertEqual(self.car.status, CompanyCar.STATUS_RENTED)
        self.assertEqual(contract.manager, self.manager)
        self.assertEqual(decode_notes(contract.notes).pickup_district, 'Patong')
        self.assertEqual(decode_notes(contract.notes).notes, 'Leaves early')

        payments = {p.notes: p for p in Payment.objects.filter(contract=contract)}
        self.assertEqual(set(payments), {'Rental Fee (Auto-created)', 'Deposit Received (Auto-created)'})
        rental = payments['Rental Fee (Auto-created)']
        self.assertEqual(rental.amount, Decimal('3000'))
        self.assertEqual(rental.payment_type, self.rental)
        self.assertEqual(rental.payment_status, self.pending)
        self.assertEqual(rental.payment_method, Payment.METHOD_PENDING)
        self.assertEqual(payments['Deposit Received (Auto-created)'].payment_type, self.deposit)

    def test_blank_deposit_defaults_to_zero_and_skips_deposit_payment(self):
        contract = self._create(deposit_amount=None)
        self.assertEqual(contract.deposit_amount, Decimal('0'))
        self.assertEqual(Payment.objects.filter(contract=contract).count(), 1)

    def test_missing_reference_rows_skip_auto_payments(self):
        self.deposit.delete()
        with self.assertLogs('apps.core.services.payment_service', level='WARNING'):
            contract = self._create()
        self.assertFalse(Payment.objects.filter(contract=contract).exists())

    def test_unavailable_car_is_rejected(self):
        self.car.status = CompanyCar.STATUS_MAINTENANCE
        self.car.save()
        with self.assertRaises(ValidationError):
            self._create()

    def test_stale_car_version_conflicts(self):
        stale = (self.car.updated_at - timedelta(seconds=1)).isoformat()
        with self.assertRaises(ConflictError):
            self._create(car_version=stale)

    def test_car_of_other_company_is_rejected(self):
        foreign = CompanyCarFactory()
        with self.assertRaises(ValidationError):
            self._create(car=foreign)

    def test_pickup_details_are_validated(self):
        with self.assertRaises(ValidationError) as ctx:
            self._create(details=dict(PICKUP, start_mileage='9000'))
        self.assertIn('start_mileage', ctx.exception.message_dict)

    def test_source_booking_is_confirmed(self):
        booking = BookingFactory(company=self.company, car=self.car, client=self.client_user)
        contract = self._create(booking=booking)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CONFIRMED)
        self.assertEqual(contract.booking, booking)

    def test_end_before_start_is_rejected(self):
        start = timezone.now()
        with self.assertRaises(ValidationError):
            self._create(start_date=start, end_date=start - timedelta(days=1))


class UpdateContractTests(ContractFixturesMixin, TestCase):
    def test_free_notes_update_keeps_pickup_lines(self):
        contract = self._create()
        contract = update_contract(actor=self.manager, contract=contract, notes='Returned late')
        details = decode_notes(contract.notes)
        self.assertEqual(details.notes, 'Returned late')
        self.assertEqual(details.fuel_level, 'Full')
        self.assertEqual(contract.notes.count('Fuel Level:'), 1)

    def test_stale_version_conflicts(self):
        contract = self._create()
        stale = (contract.updated_at - timedelta(seconds=1)).isoformat()
        with self.assertRaises(ConflictError):
            update_contract(actor=self.manager, contract=contract, expected_updated_at=stale,
                            total_amount=Decimal('1'))

    def test_other_company_staff_are_forbidden(self):
        contract = self._create()
        outsider = CompanyFactory().owner
        with self.assertRaises(PermissionDenied):
            update_contract(actor=outsider, contract=contract, total_amount=Decimal('1'))


class CloseContractTests(ContractFixturesMixin, TestCase):
    def test_close_frees_car_and_charges_fees(self):
        contract = self._create()
        result = close_contract(actor=self.manager, contract_id=contract.pk, fees=[
            {'type_id': str(self.rental.pk), 'amount': '500'},
            {'type_id': 'custom', 'amount': '200', 'custom_name': 'Scratch', 'notes': 'rear bumper'},
        ])
        self.assertEqual(result, {'success': True, 'fees_created': 2})

        contract.refresh_from_db()
        self.car.refresh_from_db()
        self.assertEqual(contract.status, Contract.STATUS_COMPLETED)
        self.assertEqual(self.car.status, CompanyCar.STATUS_AVAILABLE)

        fees = Payment.objects.filter(contract=contract, amount__in=[Decimal('500'), Decimal('200')])
        notes = {p.amount: (p.payment_type, p.notes) for p in fees}
        self.assertEqual(notes[Decimal('500')], (self.rental, 'Fee added at closing'))
        self.assertEqual(notes[Decimal('200')], (self.other, 'Scratch: rear bumper'))

    def test_closing_twice_is_rejected(self):
        contract = ContractFactory(company=self.company, car=self.car, status=Contract.STATUS_COMPLETED)
        with self.assertRaises(ValidationError) as ctx:
            close_contract(actor=self.manager, contract_id=contract.pk)
        self.assertEqual(ctx.exception.messages, ['Contract is already closed'])

    def test_unknown_contract(self):
        with self.assertRaises(Http404):
            close_contract(actor=self.manager, contract_id=999999)
