# brewshare_backend/app/utils/strings.py

import unicodedata

# Values the text formats print for "no value"; parsing treats them as absent.
NOT_SET_SENTINELS = ("未设置", "未知")

# What it does:
# Strip whitespace or convert falsy/nulls to None
def null_to_none_or_strip(x) -> str | None:
    if x is None:
        return None
    return str(x).strip() or None

# What it does:
# Like null_to_none_or_strip, but also drops the "not set" sentinels.
def meaningful(x) -> str | None:
    s = null_to_none_or_strip(x)
    if s is None or s in NOT_SET_SENTINELS:
        return None
    return s

def normalize_text(text: str) -> str:
    """
    Normalize pasted text before parsing:
    - unify line endings
    - drop zero-width / BOM characters chat apps like to inject
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Cf")
    return text
