"""
🧪 Unit Tests for Summary Statistics and Tests
File: tests/unit/test_statistics.py

Tests sumextras/statistics.py:
- Cell summaries: median (Q1, Q3), n (p%), missing counts
- Test registry (Kruskal-Wallis, Wilcoxon, t-test, ANOVA, chi-square, Fisher)
- Default test choice

Run with: pytest tests/unit/test_statistics.py -v
"""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from sumextras.statistics import (
    TESTS,
    _contingency,
    count_levels,
    count_missing,
    default_test,
    run_test,
    summarize_continuous,
    summarize_count,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def groups_df():
    np.random.seed(7)
    n = 120
    return pd.DataFrame({
        "group": np.repeat(["a", "b", "c"], n // 3),
        "value": np.random.normal(10, 2, n),
        "flag": np.random.choice(["yes", "no"], n),
    })


class TestCellSummaries:

    def test_summarize_continuous(self):
        assert summarize_continuous(pd.Series([1, 2, 3, 4, 5])) == "3 (2, 4)"

    def test_summarize_continuous_digits(self):
        assert summarize_continuous(pd.Series([1.0, 2.0, 3.0, 4.0]), digits=2) == "2.50 (1.75, 3.25)"

    def test_summarize_continuous_ignores_missing(self):
        assert summarize_continuous(pd.Series([1, np.nan, 3])) == "2 (2, 2)"
        assert summarize_continuous(pd.Series([np.nan, 5.0])) == "5 (5, 5)"

    def test_summarize_continuous_empty(self):
        assert summarize_continuous(pd.Series([], dtype=float)) == "NA (NA, NA)"
        assert summarize_continuous(pd.Series([np.nan, np.nan])) == "NA (NA, NA)"

    def test_summarize_continuous_weighted(self):
        values = pd.Series([1.0, 2.0, 3.0])
        weights = pd.Series([1.0, 1.0, 10.0])
        assert summarize_continuous(values, weights).startswith("3 (")

    @pytest.mark.parametrize(
        "n,denominator,expected",
        [
            (5, 20, "5 (25%)"),
            (1, 200, "1 (0.5%)"),
            (0, 50, "0 (0%)"),
            (0, 0, "0 (NA%)"),
            (2.6, 10, "3 (26%)"),
        ],
    )
    def test_summarize_count(self, n, denominator, expected):
        assert summarize_count(n, denominator) == expected

    def test_count_levels(self):
        values = pd.Series(["a", "b", "a", None])
        counts, denominator = count_levels(values, ["a", "b", "c"])
        assert counts.tolist() == [2, 1, 0]
        assert denominator == 3

    def test_count_levels_weighted(self):
        values = pd.Series(["a", "b", "a", None])
        weights = pd.Series([1.0, 2.0, 3.0, 4.0])
        counts, denominator = count_levels(values, ["a", "b"], weights)
        assert counts.tolist() == [4.0, 2.0]
        assert denominator == 6.0

    def test_count_missing(self):
        values = pd.Series([1.0, np.nan, np.nan])
        assert count_missing(values) == "2"
        assert count_missing(values, pd.Series([1.0, 1.5, 2.0])) == "4"


class TestHypothesisTests:

    def test_registry_names(self):
        assert set(TESTS) == {
            "kruskal.test",
            "wilcox.test",
            "t.test",
            "aov",
            "chisq.test",
            "chisq.test.no.correct",
            "fisher.test",
        }

    def test_kruskal(self, groups_df):
        p, description = run_test("kruskal.test", groups_df, "value", "group")

        samples = [g["value"] for _, g in groups_df.groupby("group")]
        assert p == pytest.approx(stats.kruskal(*samples).pvalue)
        assert description == "Kruskal-Wallis rank sum test"

    def test_aov(self, groups_df):
        p, _ = run_test("aov", groups_df, "value", "group")
        samples = [g["value"] for _, g in groups_df.groupby("group")]
        assert p == pytest.approx(stats.f_oneway(*samples).pvalue)

    def test_wilcox_requires_two_groups(self, groups_df):
        with pytest.raises(ValueError, match="exactly two groups"):
            run_test("wilcox.test", groups_df, "value", "group")

    def test_wilcox_two_groups(self, groups_df):
        df = groups_df[groups_df["group"] != "c"]
        p, _ = run_test("wilcox.test", df, "value", "group")
        a, b = [g["value"] for _, g in df.groupby("group")]
        assert p == pytest.approx(stats.mannwhitneyu(a, b, alternative="two-sided").pvalue)

    def test_chisq(self, groups_df):
        p, description = run_test("chisq.test", groups_df, "flag", "group")
        expected = stats.chi2_contingency(pd.crosstab(groups_df["flag"], groups_df["group"]))[1]
        assert p == pytest.approx(expected)
        assert description == "Pearson's Chi-squared test"

    def test_chisq_correction(self):
        df = pd.DataFrame({
            "x": ["a"] * 30 + ["b"] * 30,
            "g": ["u"] * 20 + ["v"] * 10 + ["u"] * 10 + ["v"] * 20,
        })
        corrected, _ = run_test("chisq.test", df, "x", "g")
        uncorrected, _ = run_test("chisq.test.no.correct", df, "x", "g")
        assert corrected > uncorrected

    def test_fisher(self):
        df = pd.DataFrame({"x": ["a", "a", "a", "b", "b", "b"], "g": ["u", "u", "v", "v", "v", "v"]})
        p, _ = run_test("fisher.test", df, "x", "g")
        assert p == pytest.approx(stats.fisher_exact([[2, 1], [0, 3]])[1])

    def test_fisher_requires_2x2(self, groups_df):
        with pytest.raises(ValueError, match="2x2"):
            run_test("fisher.test", groups_df, "flag", "group")

    def test_unknown_test(self, groups_df):
        with pytest.raises(ValueError, match="Unknown test"):
            run_test("mood.test", groups_df, "value", "group")

    def test_single_group_error_propagates(self, groups_df):
        df = groups_df.assign(group="a")
        with pytest.raises((ValueError, IndexError)):
            run_test("kruskal.test", df, "value", "group")


class TestDefaultTest:

    def test_continuous(self, groups_df):
        assert default_test(groups_df, "value", "group", "continuous") == "kruskal.test"
        two = groups_df[groups_df["group"] != "c"]
        assert default_test(two, "value", "group", "continuous2") == "wilcox.test"

    def test_categorical(self, groups_df):
        assert default_test(groups_df, "flag", "group", "categorical") == "chisq.test"

    def test_sparse_2x2_uses_fisher(self):
        df = pd.DataFrame({"x": ["a", "a", "a", "b", "b", "b"], "g": ["u", "u", "v", "v", "v", "v"]})
        assert default_test(df, "x", "g", "dichotomous") == "fisher.test"


class TestWeightedContingency:

    def test_rescaled_to_complete_cases(self):
        df = pd.DataFrame({"x": ["a", "b", "a", None], "g": ["u", "u", "v", "v"]})
        weights = pd.Series([10.0, 20.0, 30.0, 40.0])

        table = _contingency(df, "x", "g", weights)

        assert table.to_numpy().sum() == pytest.approx(3)
        assert table.loc["a", "v"] / table.loc["a", "u"] == pytest.approx(3)
