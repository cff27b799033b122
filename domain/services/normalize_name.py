from __future__ import annotations

import re

# Applied before lower-casing so that "İ" never turns into "i" + combining dot.
_TRANSLITERATION = str.maketrans(
    {
        "ı": "i",
        "İ": "i",
        "ş": "s",
        "Ş": "s",
        "ğ": "g",
        "Ğ": "g",
        "ü": "u",
        "Ü": "u",
        "ö": "o",
        "Ö": "o",
        "ç": "c",
        "Ç": "c",
    }
)
_DISALLOWED_RE = re.compile(r"[^a-z0-9\-\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHEN_RUN_RE = re.compile(r"-+")


def normalize_name(text: object) -> str:
    if text is None:
        return ""
    value = str(text).translate(_TRANSLITERATION).strip().lower()
    value = value.translate(_TRANSLITERATION)
    value = _DISALLOWED_RE.sub("", value)
    value = _WHITESPACE_RE.sub("-", value)
    return _HYPHEN_RUN_RE.sub("-", value)
