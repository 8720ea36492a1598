"""
Core domain models package.
"""

from .base import (
    BaseModel,
    CompanyScopedModel,
    AuditableModel,
    SoftDeleteModel,
)

# Domain models; imported after the bases to avoid circular imports
from .car import CompanyCar
from .booking import Booking
from .contract import Contract
from .payment import Payment
from .task import Task
from .calendar import CalendarEvent

__all__ = [
    'BaseModel',
    'CompanyScopedModel',
    'AuditableModel',
    'SoftDeleteModel',
    'CompanyCar',
    'Booking',
    'Contract',
    'Payment',
    'Task',
    'CalendarEvent',
]
