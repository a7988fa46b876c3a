# brewshare_backend/app/utils/ids.py
from __future__ import annotations
import random, string, time

_ALPHABET = string.digits + string.ascii_lowercase

def now_ms() -> int:
    return int(time.time() * 1000)

# What it does:
# Timestamp + random base36 suffix, e.g. "1718000000000-k3j9x0q2a".
# Imported records get one of these so they never collide with stored ones.
def new_record_id(prefix: str | None = None) -> str:
    suffix = "".join(random.choice(_ALPHABET) for _ in range(9))
    rid = f"{now_ms()}-{suffix}"
    return f"{prefix}-{rid}" if prefix else rid
