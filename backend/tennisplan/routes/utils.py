"""Helpers shared by the route modules."""

from typing import NoReturn

from ..core.exceptions import DomainException
from ..core.ulid_helper import ULID_PATTERN
from ..utils.time_utils import MONTH_REGEX

ULID_PATH_PATTERN = ULID_PATTERN
MONTH_PATH_PATTERN = MONTH_REGEX.pattern


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Re-raise a domain exception as the matching HTTP error."""
    raise exc.to_http_exception()
