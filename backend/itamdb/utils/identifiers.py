from __future__ import annotations

import os
import secrets
import string
import time
import uuid

_USER_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_uuid7() -> str:
    """
    Time-ordered UUIDv7 string.

    Layout: 48-bit Unix timestamp in milliseconds, 4-bit version (0b0111),
    then random bits. Used to correlate audit entries written for one action.
    """
    ts_ms = int(time.time() * 1000)
    raw = bytearray(ts_ms.to_bytes(6, "big", signed=False) + os.urandom(10))
    raw[6] = (raw[6] & 0x0F) | 0x70
    raw[8] = (raw[8] & 0x3F) | 0x80
    return str(uuid.UUID(bytes=bytes(raw)))


def generate_user_id(prefix: str = "USR") -> str:
    """
    Short user id like 'USR-8K2L0P9Q'.

    Used as a SQLAlchemy column default, so it must work with no arguments.
    """
    block = "".join(secrets.choice(_USER_ID_ALPHABET) for _ in range(8))
    return f"{prefix}-{block}" if prefix else block
