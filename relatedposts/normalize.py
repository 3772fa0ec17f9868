from __future__ import annotations

"""
Normalisation helpers for catalog records.

Posts reach us in more than one shape: tags can be plain strings or
``{"id", "name", "slug"}`` objects, categories likewise, and timestamps can
be ISO strings, epoch numbers or pandas Timestamps. Everything that feeds
the ranker goes through here so two posts describing the same tag always
compare equal.

Public helpers:

* basic_clean(text) -> str
    Display-text clean (HTML stripped, unicode and whitespace normalised).

* normalize_identifier(value) -> str
    Category / tag identifier.

* normalize_tags(value) -> frozenset[str]

* parse_timestamp(value) -> datetime (UTC)
"""

from datetime import datetime, timezone
from typing import Any, FrozenSet, Mapping
import re
import unicodedata

import numpy as np
import pandas as pd
from bs4 import BeautifulSoup

from .config import MAX_INPUT_CHARS

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Preference order when an identifier arrives as an object
_IDENTIFIER_KEYS = ("id", "slug", "name")


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _strip_html(text: str) -> str:
    if not text or "<" not in text:
        return text
    soup = BeautifulSoup(text, "html.parser")
    return soup.get_text(" ", strip=True)


def _normalise_unicode(text: str) -> str:
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("‘", "'").replace("’", "'")
    text = text.replace("“", '"').replace("”", '"')
    text = text.replace("–", "-").replace("—", "-")
    return text


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return value is pd.NaT


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def basic_clean(text: Any) -> str:
    """Light-weight clean for title / excerpt fields.

    * strips HTML
    * normalises unicode and whitespace
    * truncates excessively long inputs
    """
    if _is_missing(text):
        return ""
    if not isinstance(text, str):
        text = str(text)

    if len(text) > MAX_INPUT_CHARS:
        text = text[:MAX_INPUT_CHARS]

    text = _strip_html(text)
    text = _normalise_unicode(text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def normalize_identifier(value: Any) -> str:
    """Canonical identifier for a category or tag.

    Mappings contribute their first non-empty ``id``/``slug``/``name``.
    """
    if isinstance(value, Mapping):
        for key in _IDENTIFIER_KEYS:
            ident = normalize_identifier(value.get(key))
            if ident:
                return ident
        return ""
    if _is_missing(value):
        return ""
    text = _normalise_unicode(str(value)).strip().lower()
    return re.sub(r"\s+", "-", text)


def normalize_tags(value: Any) -> FrozenSet[str]:
    """Turn any supported tag container into a set of identifiers."""
    if isinstance(value, (str, Mapping)):
        raw = value.split(",") if isinstance(value, str) else [value]
    elif isinstance(value, (list, tuple, set, frozenset, np.ndarray, pd.Series)):
        raw = list(value)
    else:
        # None / NaN / unsupported scalars
        return frozenset()
    tags = (normalize_identifier(t) for t in raw)
    return frozenset(t for t in tags if t)


def parse_timestamp(value: Any) -> datetime:
    """Parse a publication timestamp into an aware UTC datetime.

    Missing or unparseable values map to :data:`EPOCH`.
    """
    if _is_missing(value) or (isinstance(value, str) and not value.strip()):
        return EPOCH
    try:
        if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
            ts = pd.Timestamp(float(value), unit="s", tz="UTC")
        else:
            ts = pd.Timestamp(value)
            ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    except (ValueError, TypeError, OverflowError):
        return EPOCH
    if ts is pd.NaT:
        return EPOCH
    return ts.to_pydatetime()
