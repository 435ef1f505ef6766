"""Human-readable booking identifiers: <PREFIX>-<6 uppercase alphanumerics>"""

import secrets
import string

from ...config import BLOCK_ID_PREFIX, BOOKING_ID_PREFIX

ID_ALPHABET = string.ascii_uppercase + string.digits
ID_SUFFIX_LENGTH = 6


def generate_id(prefix: str) -> str:
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}-{suffix}"


def generate_booking_id() -> str:
    return generate_id(BOOKING_ID_PREFIX)


def generate_block_id() -> str:
    return generate_id(BLOCK_ID_PREFIX)
