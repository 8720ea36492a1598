"""
Reference data shared by every company: geography, currencies, the car
catalog, payment classifiers and citizenships.
"""

from .location import Location, District, Hotel, LocationSeason
from .currency import Currency
from .catalog import CarBrand, CarModel, CarBodyType, CarFuelType, CarColor, CarTemplate
from .payment import PaymentStatus, PaymentType
from .citizenship import Citizenship

__all__ = [
    'Location',
    'District',
    'Hotel',
    'LocationSeason',
    'Currency',
    'CarBrand',
    'CarModel',
    'CarBodyType',
    'CarFuelType',
    'CarColor',
    'CarTemplate',
    'PaymentStatus',
    'PaymentType',
    'Citizenship',
]
