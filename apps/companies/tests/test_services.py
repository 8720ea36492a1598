from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase

from apps.companies.models import CompanyCurrency, DeliveryPrice
from apps.companies.services import (
    FREE_DELIVERY_REQUIRED, create_company, list_delivery_prices, set_company_currencies,
    soft_delete_company, update_company, update_company_duration_ranges, upsert_delivery_prices,
)
from tests.factories import (
    AdminUserFactory, CompanyFactory, CurrencyFactory, DistrictFactory, LocationFactory,
    ManagerFactory, OwnerUserFactory,
)


class CompanyServiceTests(TestCase):
    def setUp(self):
        self.admin = AdminUserFactory()
        self.location = LocationFactory()

    def test_owner_creates_company_for_themself_once(self):
        owner = OwnerUserFactory()
        company = create_company(actor=owner, name=" Sunny Cars ", location=self.location, email="INFO@Sunny.com")
        self.assertEqual(company.owner, owner)
        self.assertEqual(company.name, "Sunny Cars")
        self.assertEqual(company.email, "info@sunny.com")
        with self.assertRaises(ValidationError):
            create_company(actor=owner, name="Second", location=self.location)

    def test_admin_creates_company_for_owner(self):
        owner = OwnerUserFactory()
        company = create_company(actor=self.admin, name="Rent Me", location=self.location, owner=owner)
        self.assertEqual(company.owner, owner)

    def test_owner_must_have_owner_role(self):
        manager = ManagerFactory().user
        with self.assertRaises(ValidationError):
            create_company(actor=self.admin, name="Bad", location=self.location, owner=manager)

    def test_managers_cannot_create_or_update(self):
        manager = ManagerFactory()
        with self.assertRaises(PermissionDenied):
            create_company(actor=manager.user, name="X", location=self.location)
        with self.assertRaises(PermissionDenied):
            update_company(actor=manager.user, company=manager.company, phone="1")

    def test_only_admin_toggles_is_active(self):
        company = CompanyFactory()
        with self.assertRaises(PermissionDenied):
            update_company(actor=company.owner, company=company, is_active=False)
        update_company(actor=self.admin, company=company, is_active=False)
        company.refresh_from_db()
        self.assertFalse(company.is_active)

    def test_soft_delete_deactivates(self):
        company = CompanyFactory()
        soft_delete_company(actor=self.admin, company=company)
        company.refresh_from_db()
        self.assertIsNotNone(company.deleted_at)
        self.assertFalse(company.is_active)

    def test_duration_ranges_are_stored_sorted(self):
        company = CompanyFactory()
        update_company_duration_ranges(actor=company.owner, company=company, duration_ranges=[
            {'id': 'b', 'name': 'Long', 'min_days': 4, 'max_days': None, 'price_coefficient': 0.9},
            {'id': 'a', 'name': 'Short', 'min_days': 1, 'max_days': 3, 'price_coefficient': 1},
        ])
        company.refresh_from_db()
        self.assertEqual([r['id'] for r in company.duration_ranges], ['a', 'b'])


class CompanyCurrencyTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.thb = CurrencyFactory(code='THB')
        self.usd = CurrencyFactory(code='USD', symbol='$', name='US dollar')

    def test_selection_replaces_previous_and_sets_default(self):
        set_company_currencies(actor=self.company.owner, company=self.company,
                               currency_ids=[self.thb.pk, self.usd.pk], default_id=self.usd.pk)
        rows = set_company_currencies(actor=self.company.owner, company=self.company,
                                      currency_ids=[self.thb.pk], default_id=self.thb.pk)
        self.assertEqual(CompanyCurrency.objects.filter(company=self.company).count(), 1)
        self.company.refresh_from_db()
        self.assertEqual(self.company.currency, self.thb)
        selected = [row['code'] for row in rows if row['is_selected']]
        self.assertEqual(selected, ['THB'])

    def test_default_must_be_selected(self):
        with self.assertRaises(ValidationError):
            set_company_currencies(actor=self.company.owner, company=self.company,
                                   currency_ids=[self.thb.pk], default_id=self.usd.pk)

    def test_empty_selection_is_rejected(self):
        with self.assertRaises(ValidationError):
            set_company_currencies(actor=self.company.owner, company=self.company,
                                   currency_ids=[], default_id=None)


class DeliveryPriceTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.district = DistrictFactory(location=self.company.location, name='Center')
        self.free = DistrictFactory(location=self.company.location, name='Airport')
        self.free_item = {'district_id': self.free.pk, 'price': '0'}

    def test_upsert_and_list(self):
        self.assertIsNone(list_delivery_prices(self.company)[0]['price'])
        upsert_delivery_prices(actor=self.company.owner, company=self.company,
                               items=[self.free_item, {'district_id': self.district.pk, 'price': '250'}])
        rows = upsert_delivery_prices(actor=self.company.owner, company=self.company,
                                      items=[self.free_item, {'district_id': self.district.pk, 'price': '300'}])
        by_district = {row['district_id']: row for row in rows}
        self.assertEqual(by_district[self.district.pk]['price'], Decimal('300'))
        self.assertTrue(by_district[self.district.pk]['is_active'])
        self.assertEqual(by_district[self.free.pk]['price'], Decimal('0'))

    def test_one_active_district_must_be_free(self):
        with self.assertRaises(ValidationError) as ctx:
            upsert_delivery_prices(actor=self.company.owner, company=self.company,
                                   items=[{'district_id': self.district.pk, 'price': 500, 'is_active': True}])
        self.assertEqual(ctx.exception.message_dict['price'], [FREE_DELIVERY_REQUIRED])

        # An inactive free district does not count
        with self.assertRaises(ValidationError):
            upsert_delivery_prices(actor=self.company.owner, company=self.company,
                                   items=[{'district_id': self.district.pk, 'price': 500},
                                          {'district_id': self.free.pk, 'price': 0, 'is_active': False}])
        self.assertFalse(DeliveryPrice.objects.filter(company=self.company).exists())

    def test_district_of_other_location_is_rejected(self):
        foreign = DistrictFactory()
        with self.assertRaises(ValidationError):
            upsert_delivery_prices(actor=self.company.owner, company=self.company,
                                   items=[self.free_item, {'district_id': foreign.pk, 'price': '100'}])

    def test_negative_price_is_rejected(self):
        with self.assertRaises(ValidationError):
            upsert_delivery_prices(actor=self.company.owner, company=self.company,
                                   items=[self.free_item, {'district_id': self.district.pk, 'price': '-1'}])
