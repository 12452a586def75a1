"""Business identifiers.

Row ids are UUID4 strings. Order-group ids are human-readable and double as
the gateway-facing ``orderId``: ORD-YYYYMMDD-HHMMSS-XXX.
"""

import secrets
import string
import uuid
from datetime import datetime

from src.wm_common.datetime_utils import business_now

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
_SUFFIX_LEN = 3


def generate_id() -> str:
    """Generate a row id (UUID4 string)."""
    return str(uuid.uuid4())


def generate_order_group_id(now: datetime | None = None) -> str:
    """Generate the correlation key shared by every order of one checkout."""
    ts = now or business_now()
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LEN))
    return f"ORD-{ts:%Y%m%d}-{ts:%H%M%S}-{suffix}"


def normalize_id(value: str) -> str:
    """Canonical lowercase, hyphenated form of a UUID; ValueError if malformed.

    uuid.UUID accepts uppercase, unhyphenated and braced input, while stored
    ids compare as lowercase text.
    """
    return str(uuid.UUID(str(value)))
