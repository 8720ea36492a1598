from datetime import datetime, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from apps.companies.pricing import (
    day_of_year, find_duration_range, find_season, quote_daily_price, rental_days, season_days,
    validate_duration_ranges, validate_seasons,
)
from tests.factories import CompanyCarFactory

HIGH_AND_LOW = [
    {'id': 'high', 'name': 'High', 'start_date': '11-01', 'end_date': '04-30', 'price_coefficient': 1.5},
    {'id': 'low', 'name': 'Low', 'start_date': '05-01', 'end_date': '10-31', 'price_coefficient': 1.0},
]


class SeasonValidationTests(SimpleTestCase):
    def test_day_of_year_uses_leap_calendar(self):
        self.assertEqual(day_of_year('01-01'), 1)
        self.assertEqual(day_of_year('02-29'), 60)
        self.assertEqual(day_of_year('03-01'), 61)
        self.assertEqual(day_of_year('12-31'), 366)

    def test_invalid_dates_are_rejected(self):
        for value in ('13-01', '02-30', 'xx', '0101'):
            with self.assertRaises(ValidationError):
                day_of_year(value)

    def test_season_wrapping_new_year(self):
        days = season_days('12-30', '01-02')
        self.assertEqual(days, [365, 366, 1, 2])

    def test_full_year_coverage_is_valid(self):
        validate_seasons(HIGH_AND_LOW)

    def test_overlap_is_reported(self):
        seasons = [dict(HIGH_AND_LOW[0]), dict(HIGH_AND_LOW[1], start_date='04-30')]
        with self.assertRaises(ValidationError) as ctx:
            validate_seasons(seasons)
        self.assertIn('overlap', ctx.exception.message_dict['seasons'][0])

    def test_gap_is_reported_with_day_count(self):
        seasons = [dict(HIGH_AND_LOW[0]), dict(HIGH_AND_LOW[1], start_date='05-03')]
        with self.assertRaises(ValidationError) as ctx:
            validate_seasons(seasons)
        self.assertIn('2 days', ctx.exception.message_dict['seasons'][0])

    def test_empty_seasons_are_rejected(self):
        with self.assertRaises(ValidationError):
            validate_seasons([])


class DurationRangeValidationTests(SimpleTestCase):
    def _ranges(self, *bounds):
        return [
            {'id': f'r{i}', 'name': f'R{i}', 'min_days': lo, 'max_days': hi, 'price_coefficient': 1}
            for i, (lo, hi) in enumerate(bounds)
        ]

    def test_contiguous_ranges_are_valid(self):
        validate_duration_ranges(self._ranges((8, None), (1, 3), (4, 7)))

    def test_must_start_at_one_day(self):
        with self.assertRaises(ValidationError):
            validate_duration_ranges(self._ranges((2, 5), (6, None)))

    def test_gap_and_overlap(self):
        with self.assertRaises(ValidationError):
            validate_duration_ranges(self._ranges((1, 3), (5, None)))
        with self.assertRaises(ValidationError):
            validate_duration_ranges(self._ranges((1, 3), (3, None)))

    def test_open_range_must_be_last(self):
        with self.assertRaises(ValidationError):
            validate_duration_ranges(self._ranges((1, None), (2, 5)))

    def test_lookup_helpers(self):
        ranges = self._ranges((1, 3), (4, None))
        self.assertEqual(find_duration_range(ranges, 3)['id'], 'r0')
        self.assertEqual(find_duration_range(ranges, 40)['id'], 'r1')
        self.assertEqual(find_season(HIGH_AND_LOW, datetime(2025, 1, 15))['id'], 'high')
        self.assertEqual(find_season(HIGH_AND_LOW, datetime(2025, 7, 1))['id'], 'low')

    def test_rental_days_round_up(self):
        start = datetime(2025, 1, 1, 10, 0)
        self.assertEqual(rental_days(start, start + timedelta(hours=1)), 1)
        self.assertEqual(rental_days(start, start + timedelta(days=2, hours=1)), 3)


class QuoteDailyPriceTests(TestCase):
    def setUp(self):
        self.car = CompanyCarFactory(price_per_day=Decimal('1000.00'))
        self.car.company.settings = {'seasons': HIGH_AND_LOW}
        self.car.company.save()

    def test_coefficients_apply_without_explicit_price(self):
        start = timezone.make_aware(datetime(2025, 1, 10, 10, 0))
        # High season, 5 days -> default 4-7 day range at 0.95
        self.assertEqual(quote_daily_price(self.car, start, start + timedelta(days=5)), Decimal('1425.00'))

    def test_explicit_seasonal_price_wins(self):
        self.car.seasonal_prices = {'high': {'d2': '1300'}}
        start = timezone.make_aware(datetime(2025, 1, 10, 10, 0))
        self.assertEqual(quote_daily_price(self.car, start, start + timedelta(days=5)), Decimal('1300.00'))

    def test_no_seasons_uses_standard_column(self):
        self.car.company.settings = {}
        self.car.seasonal_prices = {'standard': {'d1': '900'}}
        start = timezone.make_aware(datetime(2025, 7, 1, 10, 0))
        self.assertEqual(quote_daily_price(self.car, start, start + timedelta(days=2)), Decimal('900.00'))
