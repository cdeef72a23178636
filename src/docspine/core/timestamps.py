"""
Clock and identifier helpers.

Entity ids and event ids are ULIDs: 26 Crockford base32 characters, the
first 10 encoding a millisecond timestamp, so ids sort by creation time.

Tags:
    timestamps, ulid, utc, doc-spine
"""

import random
import time
from datetime import UTC, datetime

# Crockford's base32 alphabet (no I, L, O, U)
_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_ULID_LENGTH = 26


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(UTC)


def generate_ulid() -> str:
    """Generate a ULID: 48 bits of milliseconds followed by 80 random bits."""
    value = (int(time.time() * 1000) << 80) | random.getrandbits(80)
    chars = []
    for _ in range(_ULID_LENGTH):
        value, index = divmod(value, 32)
        chars.append(_CROCKFORD[index])
    return "".join(reversed(chars))


__all__ = ["utc_now", "generate_ulid"]
