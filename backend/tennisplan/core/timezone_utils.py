"""
Timezone utilities for the Tennisplan backend.

The school runs in a single timezone; "today" always means today at the
school, not on the server.
"""

from datetime import date, datetime, timezone

import pytz

from .config import settings


def get_school_timezone() -> pytz.BaseTzInfo:
    """Return the configured school timezone as a pytz timezone object."""
    return pytz.timezone(settings.school_timezone)


def get_school_now() -> datetime:
    """Current datetime in the school's timezone."""
    return datetime.now(get_school_timezone())


def get_school_today() -> date:
    """Today's date in the school's timezone."""
    return get_school_now().date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
