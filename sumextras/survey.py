"""
Survey design wrapper.

A `SurveyDesign` pairs a data frame with a column of sampling weights. The
summary-table constructors read the inner frame from `.variables`, the same
place survey-design objects keep it elsewhere in the ecosystem.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from statsmodels.stats.weightstats import DescrStatsW

from logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class SurveyDesign:
    """
    Weighted survey data.

    Attributes:
        variables: The observed data, one row per sampled unit.
        weights: Name of the column in `variables` holding sampling weights,
            or None for equal weights.
    """

    variables: pd.DataFrame
    weights: str | None = None

    def __post_init__(self) -> None:
        if self.weights is not None and self.weights not in self.variables.columns:
            raise ValueError(f"Weight column '{self.weights}' not found in data")

    @property
    def columns(self) -> pd.Index:
        return self.variables.columns

    def weight_vector(self) -> pd.Series:
        """Weights aligned to `variables`; ones when the design is unweighted."""
        if self.weights is None:
            return pd.Series(1.0, index=self.variables.index)
        return self.variables[self.weights].astype(float)


def svydesign(data: pd.DataFrame, weights: str | None = None) -> SurveyDesign:
    """Build a `SurveyDesign` from a data frame and an optional weight column."""
    design = SurveyDesign(variables=data, weights=weights)
    logger.debug(f"Survey design: {len(data)} rows, weights={weights!r}")
    return design


def weighted_quantiles(
    values: pd.Series, weights: pd.Series, probs: list[float]
) -> np.ndarray:
    """
    Weighted quantiles of `values`, ignoring missing entries.

    Returns an array of NaN when nothing is left to summarize.
    """
    mask = values.notna() & weights.notna()
    if not mask.any():
        return np.full(len(probs), np.nan)
    stats = DescrStatsW(values[mask].astype(float).to_numpy(), weights=weights[mask].to_numpy())
    return np.asarray(stats.quantile(probs, return_pandas=False), dtype=float)
