"""
Summary statistics and hypothesis tests behind the summary table.

Cell summaries:
- continuous: median (Q1, Q3)
- categorical / dichotomous: n (p%)

Tests are looked up by name in `TESTS`, mirroring the names users already
know from R (`kruskal.test`, `chisq.test`, ...). Errors raised by scipy for
degenerate input are not caught here.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
import pandas as pd
from scipy import stats

from logger import get_logger
from sumextras.formatting import style_number, style_percent
from sumextras.survey import weighted_quantiles

logger = get_logger(__name__)

CONTINUOUS_TYPES = ("continuous", "continuous2")
CATEGORICAL_TYPES = ("categorical", "dichotomous")


# --- Cell summaries ---


def summarize_continuous(
    values: pd.Series, weights: pd.Series | None = None, digits: int = 0
) -> str:
    """
    Median and quartiles as "median (Q1, Q3)".

    An empty selection yields "NA (NA, NA)".
    """
    clean = pd.to_numeric(values, errors="coerce")
    probs = [0.25, 0.5, 0.75]
    if weights is None:
        clean = clean.dropna()
        q = clean.quantile(probs).to_numpy() if len(clean) else np.full(3, np.nan)
    else:
        q = weighted_quantiles(clean, weights, probs)
    return (
        f"{style_number(q[1], digits)} "
        f"({style_number(q[0], digits)}, {style_number(q[2], digits)})"
    )


def summarize_count(n: float, denominator: float) -> str:
    """
    Count and percentage as "n (p%)"; a zero denominator gives "0 (NA%)".
    """
    p = n / denominator if denominator else np.nan
    return f"{style_number(n, 0)} ({style_percent(p)}%)"


def count_levels(
    values: pd.Series, levels: list, weights: pd.Series | None = None
) -> tuple[pd.Series, float]:
    """
    (Weighted) counts of each level and the non-missing denominator.
    """
    mask = values.notna()
    if weights is None:
        counts = values[mask].value_counts()
        denominator = float(mask.sum())
    else:
        counts = weights[mask].groupby(values[mask], observed=True).sum()
        denominator = float(weights[mask].sum())
    return counts.reindex(levels, fill_value=0), denominator


def count_missing(values: pd.Series, weights: pd.Series | None = None) -> str:
    mask = values.isna()
    n = float(mask.sum()) if weights is None else float(weights[mask].sum())
    return style_number(n, 0)


# --- Hypothesis tests ---


def _numeric_groups(data: pd.DataFrame, variable: str, by: str) -> list[pd.Series]:
    grouped = data.groupby(by, sort=True, observed=True)[variable]
    groups = [pd.to_numeric(g, errors="coerce").dropna() for _, g in grouped]
    return [g for g in groups if len(g) > 0]


def _contingency(
    data: pd.DataFrame, variable: str, by: str, weights: pd.Series | None = None
) -> pd.DataFrame:
    """
    Cross-tabulate `variable` by `by`.

    Weighted tables are rescaled to the unweighted number of complete cases so
    the test statistic is not inflated by the size of the weights.
    """
    complete = data[variable].notna() & data[by].notna()
    if weights is None:
        return pd.crosstab(data.loc[complete, variable], data.loc[complete, by])

    table = pd.crosstab(
        data.loc[complete, variable],
        data.loc[complete, by],
        values=weights[complete],
        aggfunc="sum",
    ).fillna(0.0)
    total = table.to_numpy().sum()
    if total > 0:
        table = table * (complete.sum() / total)
    return table


def _two_groups(groups: list[pd.Series], test_name: str) -> tuple[pd.Series, pd.Series]:
    if len(groups) != 2:
        raise ValueError(f"{test_name} requires exactly two groups, got {len(groups)}")
    return groups[0], groups[1]


def kruskal_test(data, variable, by, weights=None) -> float:
    return float(stats.kruskal(*_numeric_groups(data, variable, by)).pvalue)


def wilcox_test(data, variable, by, weights=None) -> float:
    a, b = _two_groups(_numeric_groups(data, variable, by), "wilcox.test")
    return float(stats.mannwhitneyu(a, b, alternative="two-sided").pvalue)


def t_test(data, variable, by, weights=None) -> float:
    a, b = _two_groups(_numeric_groups(data, variable, by), "t.test")
    return float(stats.ttest_ind(a, b, equal_var=False).pvalue)


def aov_test(data, variable, by, weights=None) -> float:
    return float(stats.f_oneway(*_numeric_groups(data, variable, by)).pvalue)


def chisq_test(data, variable, by, weights=None, correction: bool = True) -> float:
    table = _contingency(data, variable, by, weights)
    _chi2, p, _dof, _expected = stats.chi2_contingency(table, correction=correction)
    return float(p)


def chisq_test_no_correct(data, variable, by, weights=None) -> float:
    return chisq_test(data, variable, by, weights, correction=False)


def fisher_test(data, variable, by, weights=None) -> float:
    table = _contingency(data, variable, by, weights)
    if table.shape != (2, 2):
        raise ValueError(f"fisher.test supports 2x2 tables only, got {table.shape}")
    if weights is not None:
        table = table.round().astype(int)
    _odds, p = stats.fisher_exact(table)
    return float(p)


PValueFunction = Callable[..., float]

TESTS: dict[str, tuple[PValueFunction, str]] = {
    "kruskal.test": (kruskal_test, "Kruskal-Wallis rank sum test"),
    "wilcox.test": (wilcox_test, "Wilcoxon rank sum test"),
    "t.test": (t_test, "Welch Two Sample t-test"),
    "aov": (aov_test, "One-way ANOVA"),
    "chisq.test": (chisq_test, "Pearson's Chi-squared test"),
    "chisq.test.no.correct": (chisq_test_no_correct, "Pearson's Chi-squared test"),
    "fisher.test": (fisher_test, "Fisher's exact test"),
}


def default_test(
    data: pd.DataFrame,
    variable: str,
    by: str,
    var_type: str,
    weights: pd.Series | None = None,
) -> str:
    """
    Choose a test name when the caller did not assign one.

    Continuous: Wilcoxon for two groups, Kruskal-Wallis otherwise.
    Categorical: chi-square, or Fisher's exact for a 2x2 table with an expected count below 5.
    """
    if var_type in CONTINUOUS_TYPES:
        n_groups = data.loc[data[variable].notna(), by].nunique()
        return "wilcox.test" if n_groups == 2 else "kruskal.test"

    table = _contingency(data, variable, by, weights)
    if table.shape == (2, 2):
        _chi2, _p, _dof, expected = stats.chi2_contingency(table)
        if expected.min() < 5:
            return "fisher.test"
    return "chisq.test"


def run_test(
    test_name: str,
    data: pd.DataFrame,
    variable: str,
    by: str,
    weights: pd.Series | None = None,
) -> tuple[float, str]:
    """
    Run a registered test and return (p_value, description).

    Raises:
        ValueError: If `test_name` is not registered.
    """
    try:
        func, description = TESTS[test_name]
    except KeyError:
        raise ValueError(
            f"Unknown test '{test_name}'. Available tests: {sorted(TESTS)}"
        ) from None

    p = func(data, variable, by, weights)
    logger.debug(f"{test_name} for '{variable}' by '{by}': p={p:.4g}")
    return p, description
