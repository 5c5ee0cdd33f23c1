from __future__ import annotations

import numpy as np
import pandas as pd


def safe_divide_as_ratio(numerator: float, denominator: float) -> float:
    if denominator is None or pd.isna(denominator) or denominator <= 0:
        return 0.0
    return float(numerator) / float(denominator)


def safe_divide_as_percent(numerator: float, denominator: float) -> float:
    if denominator is None or pd.isna(denominator) or denominator <= 0:
        return 0.0
    return (float(numerator) / float(denominator)) * 100


def ratio_column(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise `safe_divide_as_ratio` over aligned Series."""
    num = pd.to_numeric(numerator, errors="coerce").fillna(0).to_numpy(dtype=float)
    den = pd.to_numeric(denominator, errors="coerce").fillna(0).to_numpy(dtype=float)
    out = np.zeros(len(num), dtype=float)
    np.divide(num, den, out=out, where=den > 0)
    return pd.Series(out, index=numerator.index)


def percent_column(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    return ratio_column(numerator, denominator) * 100


def roas(revenue: float, spend: float) -> float:
    return safe_divide_as_ratio(revenue, spend)
