"""
Thread-local storage for current company context.

This module provides thread-safe storage and retrieval of the current company
throughout the request-response cycle.
"""

import threading
from typing import Optional

from .models import Company

# Thread-local storage for company context
_thread_locals = threading.local()


def get_current_company() -> Optional[Company]:
    """
    Get the current company from thread-local storage.

    Returns:
        Current Company instance or None if not set.
    """
    return getattr(_thread_locals, 'company', None)


def set_current_company(company: Optional[Company]) -> None:
    """
    Set the current company in thread-local storage.

    Args:
        company: Company instance to set as current, or None to clear.
    """
    _thread_locals.company = company


def clear_current_company() -> None:
    if hasattr(_thread_locals, 'company'):
        del _thread_locals.company
