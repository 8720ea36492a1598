from datetime import datetime, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from apps.core.models import CompanyCar, Payment
from apps.reports.services import dashboard_stats, financial_report, period_ranges
from tests.factories import (
    AdminUserFactory, CompanyCarFactory, CompanyFactory, ContractFactory, ManagerFactory, PaymentFactory,
    PaymentStatusFactory, PaymentTypeFactory,
)


def aware(*args):
    return timezone.make_aware(datetime(*args))


class PeriodRangeTests(SimpleTestCase):
    # Wednesday
    now = aware(2024, 5, 15, 12)

    def test_week_starts_on_sunday(self):
        (start, end), (prev_start, prev_end) = period_ranges('week', now=self.now)
        self.assertEqual(start, aware(2024, 5, 12))
        self.assertEqual(end.date().isoformat(), '2024-05-18')
        self.assertEqual(prev_start, aware(2024, 5, 5))

    def test_month_and_previous_month(self):
        (start, end), (prev_start, prev_end) = period_ranges('month', now=self.now)
        self.assertEqual(start, aware(2024, 5, 1))
        self.assertEqual(end.date().isoformat(), '2024-05-31')
        self.assertEqual(prev_start, aware(2024, 4, 1))
        self.assertEqual(prev_end.date().isoformat(), '2024-04-30')

    def test_unknown_period_is_month(self):
        self.assertEqual(period_ranges('fortnight', now=self.now), period_ranges('month', now=self.now))

    def test_custom_range_previous_has_same_length(self):
        (start, end), (prev_start, prev_end) = period_ranges(start_date='2024-05-01', end_date='2024-05-10')
        self.assertEqual(start, aware(2024, 5, 1))
        self.assertEqual(prev_end, start - timedelta(microseconds=1))
        self.assertEqual(prev_start, aware(2024, 4, 21))
        self.assertEqual(end - start, prev_end - prev_start)


class FinancialReportTests(TestCase):
    def setUp(self):
        self.contract = ContractFactory()
        self.company = self.contract.company
        self.expense_type = PaymentTypeFactory(name='Fuel', sign='-')

    def _payment(self, amount, when, **kwargs):
        payment = PaymentFactory(contract=self.contract, amount=Decimal(amount), **kwargs)
        Payment.objects.filter(pk=payment.pk).update(created_at=when)
        return payment

    def test_totals_and_trends(self):
        self._payment('1000', aware(2024, 5, 5, 12))
        self._payment('200', aware(2024, 5, 6, 12), payment_type=self.expense_type)
        self._payment('-50', aware(2024, 5, 7, 12), payment_type=None)
        self._payment('500', aware(2024, 4, 25, 12))

        report = financial_report(self.company, start_date='2024-05-01', end_date='2024-05-10')

        self.assertEqual(report['current'], {'income': 1000.0, 'expenses': 250.0, 'profit': 750.0})
        self.assertEqual(report['previous'], {'income': 500.0, 'expenses': 0.0, 'profit': 500.0})
        self.assertEqual(report['trends'], {'income': 100.0, 'expenses': 100.0, 'profit': 50.0})

    def test_company_without_cars_reports_zeros(self):
        report = financial_report(CompanyFactory())
        self.assertEqual(report['current'], {'income': 0, 'expenses': 0, 'profit': 0})
        self.assertEqual(report['period']['type'], 'month')

    def test_dashboard_stats(self):
        CompanyCarFactory(company=self.company, status=CompanyCar.STATUS_RENTED)
        self._payment('1000', timezone.now())
        self._payment('200', timezone.now(), payment_type=self.expense_type)
        self._payment('300', timezone.now(), payment_status=PaymentStatusFactory(name='Pending', value=0))

        stats = dashboard_stats(self.company)

        self.assertEqual(stats['totalCars'], 2)
        self.assertEqual(stats['availableCars'], 1)
        self.assertEqual(stats['activeContracts'], 1)
        self.assertEqual(stats['totalClients'], 1)
        self.assertEqual(stats['totalRevenue'], 1000.0)


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = ContractFactory().company

    def test_owner_reads_financial_report(self):
        self.client.force_login(self.company.owner)
        resp = self.client.get(reverse('api:financial-report'), {'period': 'week'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['period']['type'], 'week')

    def test_manager_cannot_read_financial_report_but_reads_stats(self):
        self.client.force_login(ManagerFactory(company=self.company).user)
        self.assertEqual(self.client.get(reverse('api:financial-report')).status_code, 403)
        resp = self.client.get(reverse('api:stats'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['totalContracts'], 1)

    def test_admin_needs_company(self):
        self.client.force_login(AdminUserFactory())
        resp = self.client.get(reverse('api:financial-report'))
        self.assertEqual(resp.status_code, 400)
        resp = self.client.get(reverse('api:financial-report'), {'company_id': self.company.pk})
        self.assertEqual(resp.status_code, 200)
