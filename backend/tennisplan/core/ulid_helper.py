"""
Record identifiers.

Every table uses 26 character ULID strings as primary key. They sort by
creation time, which keeps exports and listings stable without an extra
sequence column.
"""

import re

import ulid

# Crockford base32 without I, L, O and U
ULID_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"
ULID_REGEX = re.compile(ULID_PATTERN)


def generate_ulid() -> str:
    return str(ulid.ULID())


def is_valid_ulid(value: object) -> bool:
    """True for a canonical (upper-case) ULID string."""
    if not isinstance(value, str) or not ULID_REGEX.fullmatch(value):
        return False
    try:
        ulid.ULID.from_str(value)
    except ValueError:
        return False
    return True
