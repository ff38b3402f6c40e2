"""
Number, percentage and p-value styling for summary-table cells.

Missing numbers render as "NA" and infinities as "Inf"/"-Inf" so that
`clean_table()` can recognise them in the rendered text.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
import pandas as pd

from config import CONFIG


def _is_missing(x: Any) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x)) or bool(pd.isna(x))


def style_number(x: Any, digits: int = 0) -> str:
    """
    Format a number with a fixed number of decimals.
    """
    if _is_missing(x):
        return "NA"
    x = float(x)
    if math.isinf(x):
        return "Inf" if x > 0 else "-Inf"
    return f"{x:.{digits}f}"


def style_percent(p: Any) -> str:
    """
    Format a proportion (0-1) as a percentage without the % sign.

    Values of 10% or more and exact zeros use no decimals; smaller values keep one.
    """
    if _is_missing(p):
        return "NA"
    pct = float(p) * 100
    if math.isinf(pct):
        return "Inf"
    if pct == 0 or pct >= 10:
        return f"{pct:.0f}"
    return f"{pct:.1f}"


def style_pvalue(p: Any, digits: int = 1) -> str | None:
    """
    Format a p-value for display.

    Parameters:
        p: The p-value; None/NaN returns None so the cell stays empty.
        digits: 1, 2 or 3 significant decimals for large p-values.

    Rules (digits=1): >0.9 -> ">0.9", >=0.2 one decimal, >=0.1 two decimals,
    >=0.001 three decimals, otherwise "<0.001". digits=2 caps at ">0.99" and uses two
    decimals from 0.1; digits=3 caps at ">0.999" and uses three decimals throughout.
    """
    if digits not in (1, 2, 3):
        raise ValueError(f"digits must be 1, 2 or 3, got {digits!r}")
    if _is_missing(p):
        return None
    p = float(p)
    if not np.isfinite(p) or p < 0 or p > 1:
        return None

    if p < 0.001:
        return "<0.001"

    if digits == 3:
        return ">0.999" if p > 0.999 else f"{p:.3f}"

    if digits == 2:
        if p > 0.99:
            return ">0.99"
        return f"{p:.2f}" if p >= 0.1 else f"{p:.3f}"

    if p > 0.9:
        return ">0.9"
    if p >= 0.2:
        return f"{p:.1f}"
    if p >= 0.1:
        return f"{p:.2f}"
    return f"{p:.3f}"


def pvalue_formatter(digits: int | None = None):
    """Return a one-argument p-value formatter bound to `digits` (default from CONFIG)."""
    if digits is None:
        digits = CONFIG.get("table.pvalue_digits", 3)

    def _fmt(p: Any) -> str | None:
        return style_pvalue(p, digits=digits)

    return _fmt


def guess_digits(values: pd.Series) -> int:
    """
    Pick decimals for a continuous summary from the spread of the data.

    CONFIG['table.continuous_digits'] wins when set. Otherwise an IQR of 10 or more
    gives 0 decimals, 1 to 10 gives 1, anything narrower gives 2.
    """
    configured = CONFIG.get("table.continuous_digits")
    if configured is not None:
        return int(configured)

    clean = pd.to_numeric(values, errors="coerce")
    clean = clean[np.isfinite(clean)]
    if len(clean) == 0:
        return 0
    iqr = clean.quantile(0.75) - clean.quantile(0.25)
    if iqr >= 10:
        return 0
    if iqr >= 1:
        return 1
    return 2
