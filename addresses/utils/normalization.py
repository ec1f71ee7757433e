"""Value cleaning for imported address data."""

from typing import Any, Optional

import pandas as pd


def clean_field(value: Any) -> Optional[Any]:
    """Normalize one raw CSV value.

    Missing values (``None``, NaN, blank strings) become ``None``. Strings are
    stripped and runs of whitespace collapse to a single space; other values
    pass through unchanged.

    Examples:
        >>> clean_field('  12   Main  St ')
        '12 Main St'
        >>> clean_field(float('nan')) is None
        True
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return None if pd.isna(value) else value
    cleaned = " ".join(value.split())
    return cleaned or None
