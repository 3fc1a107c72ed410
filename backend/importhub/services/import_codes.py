# importhub/services/import_codes.py
import re
import secrets
import time
from typing import Optional

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
RANDOM_PART_LENGTH = 5

IMPORT_CODE_RE = re.compile(r"^IMP-[0-9A-Z]+-[0-9A-Z]{5}$")


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_import_code(now_ms: Optional[int] = None) -> str:
    """
    IMP-<base36 millisecond timestamp>-<5 random base36 chars>, uppercased.
    Not unique on its own; the caller retries on a unique-constraint conflict.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
    return f"IMP-{to_base36(now_ms)}-{random_part}".upper()
