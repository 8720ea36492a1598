from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings
from types import SimpleNamespace

from apps.core.services.contract_notes import (
    ContractDetails, clean_notes, decode_notes, encode_notes, validate_contract_details,
)


@override_settings(DEFAULT_CURRENCY='THB')
class EncodeNotesTests(SimpleTestCase):
    def test_lines_follow_fixed_order_after_free_text(self):
        details = ContractDetails(
            notes='VIP client', start_mileage='12000', fuel_level='Full', pickup_district='Patong',
            return_district='Kata', hotel='Sea View', baby_seat=True, island_trip=True,
            total_currency='USD', delivery_price='300', city='Moscow',
        )
        self.assertEqual(encode_notes(details).split('\n'), [
            'VIP client',
            'Start Mileage: 12000',
            'Fuel Level: Full',
            'Pickup District: Patong',
            'District: Kata',
            'Hotel: Sea View',
            'Island Trip: Yes',
            'Baby Seat: Yes',
            'Total Currency: USD',
            'Delivery Price: 300',
            'City: Moscow',
        ])

    def test_base_currency_is_not_written(self):
        details = ContractDetails(total_currency='THB', deposit_currency='EUR')
        self.assertEqual(encode_notes(details), 'Deposit Currency: EUR')

    def test_empty_details_encode_to_none(self):
        self.assertIsNone(encode_notes(ContractDetails()))


class DecodeNotesTests(SimpleTestCase):
    def test_decode_reads_prefixes_and_flags(self):
        notes = 'Call before\nFuel Level: Half\nDistrict: Karon\nPickup District: Chalong\nKrabi Trip: Yes'
        details = decode_notes(notes)
        self.assertEqual(details.fuel_level, 'Half')
        self.assertEqual(details.return_district, 'Karon')
        self.assertEqual(details.pickup_district, 'Chalong')
        self.assertTrue(details.krabi_trip)
        self.assertFalse(details.full_insurance)
        self.assertEqual(details.notes, 'Call before')

    def test_reencoding_does_not_duplicate_system_lines(self):
        original = ContractDetails(notes='Hello', fuel_level='Full', whatsapp='+66 81 000')
        decoded = decode_notes(encode_notes(original))
        self.assertEqual(decoded, original)
        self.assertEqual(encode_notes(decoded), encode_notes(original))

    def test_clean_notes_strips_every_system_line(self):
        self.assertEqual(clean_notes('Start Mileage: 5\nfree\nCitizenship: TH'), 'free')
        self.assertEqual(clean_notes(None), '')


class ValidateContractDetailsTests(SimpleTestCase):
    def _details(self, **overrides):
        values = dict(fuel_level='Full', cleanliness='Clean', pickup_district='Patong',
                      return_district='Patong', start_mileage='15000')
        values.update(overrides)
        return ContractDetails(**values)

    def test_valid_details_pass(self):
        validate_contract_details(self._details(), SimpleNamespace(mileage=15000))

    def test_required_fields_are_reported_together(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_contract_details(ContractDetails(), None)
        self.assertEqual(
            set(ctx.exception.message_dict),
            {'fuel_level', 'cleanliness', 'pickup_district', 'return_district', 'start_mileage'},
        )

    def test_start_mileage_below_car_mileage(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_contract_details(self._details(start_mileage='100'), SimpleNamespace(mileage=15000))
        self.assertIn('15000 km', ctx.exception.message_dict['start_mileage'][0])

    def test_start_mileage_must_be_numeric(self):
        with self.assertRaises(ValidationError):
            validate_contract_details(self._details(start_mileage='lots'), None)
