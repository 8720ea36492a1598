from datetime import datetime
from typing import Optional, Union

from django.utils.dateparse import parse_datetime

from apps.core.exceptions import ConflictError


def ensure_version(instance, expected: Optional[Union[str, datetime]]) -> None:
    """
    Optimistic lock on ``updated_at``.

    ``expected`` is the ``updated_at`` the caller read; ``None`` skips the
    check. A mismatch means someone saved in between.
    """
    if expected in (None, ''):
        return
    if isinstance(expected, str):
        parsed = parse_datetime(expected)
        if parsed is None:
            raise ConflictError('Invalid version timestamp')
        expected = parsed
    current = instance.updated_at
    if current is None or current.timestamp() != expected.timestamp():
        raise ConflictError()
