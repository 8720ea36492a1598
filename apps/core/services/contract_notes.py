"""
Contract notes codec.

Pickup details are stored in the contract's ``notes`` column as
``Prefix: value`` lines appended after the free-text notes. Decoding matches
each line by prefix (flags by substring), and ``clean_notes`` strips every
system line so re-encoding never duplicates them.
"""

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError

# (attribute, line prefix) in encoding order
VALUE_LINES = [
    ('start_mileage', 'Start Mileage: '),
    ('fuel_level', 'Fuel Level: '),
    ('pickup_district', 'Pickup District: '),
    ('return_district', 'District: '),
    ('hotel', 'Hotel: '),
    ('room_number', 'Room Number: '),
    ('whatsapp', 'WhatsApp: '),
    ('telegram', 'Telegram: '),
    ('cleanliness', 'Cleanliness: '),
]

FLAG_LINES = [
    ('island_trip', 'Island Trip: Yes'),
    ('krabi_trip', 'Krabi Trip: Yes'),
    ('full_insurance', 'Full Insurance: Yes'),
    ('baby_seat', 'Baby Seat: Yes'),
]

CURRENCY_LINES = [
    ('total_currency', 'Total Currency: '),
    ('deposit_currency', 'Deposit Currency: '),
]

PRICE_LINES = [
    ('delivery_price', 'Delivery Price: '),
    ('return_price', 'Return Price: '),
    ('island_trip_price', 'Island Trip Price: '),
    ('krabi_trip_price', 'Krabi Trip Price: '),
    ('full_insurance_price', 'Full Insurance Price: '),
    ('baby_seat_price', 'Baby Seat Price: '),
    ('citizenship', 'Citizenship: '),
    ('city', 'City: '),
]

SYSTEM_PREFIXES = (
    'Start Mileage:', 'Fuel Level:', 'Pickup District:', 'District:',
    'Hotel:', 'Room Number:', 'WhatsApp:', 'Telegram:', 'Cleanliness:',
    'Island Trip:', 'Full Insurance:', 'Baby Seat:', 'Krabi Trip:',
    'Total Currency:', 'Deposit Currency:',
    'Island Trip Price:', 'Krabi Trip Price:', 'Full Insurance Price:', 'Baby Seat Price:',
    'Citizenship:', 'City:', 'Delivery Price:', 'Return Price:',
)


def base_currency() -> str:
    return getattr(settings, 'DEFAULT_CURRENCY', 'THB')


@dataclass
class ContractDetails:
    notes: str = ''
    start_mileage: str = ''
    fuel_level: str = ''
    pickup_district: str = ''
    return_district: str = ''
    hotel: str = ''
    room_number: str = ''
    whatsapp: str = ''
    telegram: str = ''
    cleanliness: str = ''
    island_trip: bool = False
    krabi_trip: bool = False
    full_insurance: bool = False
    baby_seat: bool = False
    total_currency: str = ''
    deposit_currency: str = ''
    delivery_price: str = ''
    return_price: str = ''
    island_trip_price: str = ''
    krabi_trip_price: str = ''
    full_insurance_price: str = ''
    baby_seat_price: str = ''
    citizenship: str = ''
    city: str = ''

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ContractDetails':
        """Build from request data; unknown keys are ignored, ``None`` becomes empty."""
        data = data or {}
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            if f.type is bool:
                values[f.name] = bool(raw)
            else:
                values[f.name] = '' if raw is None else str(raw).strip()
        return cls(**values)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def encode_notes(details: ContractDetails) -> Optional[str]:
    """Pack details into the notes column; an empty result is ``None``."""
    base = base_currency()
    items = [details.notes]
    items += [f'{prefix}{getattr(details, attr)}' if getattr(details, attr) else ''
              for attr, prefix in VALUE_LINES]
    items += [line if getattr(details, attr) else '' for attr, line in FLAG_LINES]
    items += [f'{prefix}{getattr(details, attr)}'
              if getattr(details, attr) and getattr(details, attr) != base else ''
              for attr, prefix in CURRENCY_LINES]
    items += [f'{prefix}{getattr(details, attr)}' if getattr(details, attr) else ''
              for attr, prefix in PRICE_LINES]
    encoded = '\n'.join(item for item in items if item).strip()
    return encoded or None


def clean_notes(notes: Optional[str]) -> str:
    """Free text of ``notes`` with every system line removed."""
    if not notes:
        return ''
    lines = [line for line in notes.split('\n') if not line.startswith(SYSTEM_PREFIXES)]
    return '\n'.join(lines).strip()


def decode_notes(notes: Optional[str]) -> ContractDetails:
    """Unpack a notes column written by ``encode_notes``."""
    details = ContractDetails()
    if not notes:
        return details
    lines = notes.split('\n')

    for attr, prefix in VALUE_LINES + CURRENCY_LINES + PRICE_LINES:
        line = next((line for line in lines if line.startswith(prefix)), None)
        if line is not None:
            setattr(details, attr, line[len(prefix):].strip())

    for attr, flag in FLAG_LINES:
        if any(flag in line for line in lines):
            setattr(details, attr, True)

    details.notes = clean_notes(notes)
    return details


def validate_contract_details(details: ContractDetails, car=None) -> None:
    """
    Check the pickup details required to hand a car over.

    Raises:
        ValidationError: keyed by detail name
    """
    errors = {}
    if not details.fuel_level:
        errors['fuel_level'] = 'Fuel Level is required'
    if not details.cleanliness:
        errors['cleanliness'] = 'Cleanliness is required'
    if not details.pickup_district:
        errors['pickup_district'] = 'Pickup District is required'
    if not details.return_district:
        errors['return_district'] = 'District is required'

    if not details.start_mileage:
        errors['start_mileage'] = 'Start Mileage is required'
    else:
        try:
            mileage = Decimal(details.start_mileage)
        except (InvalidOperation, ValueError):
            errors['start_mileage'] = 'Start Mileage must be a number'
        else:
            current = (car.mileage if car is not None else 0) or 0
            if mileage < current:
                errors['start_mileage'] = (
                    f'Start Mileage cannot be less than current car mileage ({current} km)'
                )

    if errors:
        raise ValidationError(errors)

