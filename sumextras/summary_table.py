"""
Summary ("Table 1") tables.

`tbl_summary()` / `tbl_svysummary()` build a `SummaryTable`: a frozen value
holding the construction inputs, a `table_body` data frame with one row per
variable label, level or missing count, and the styling rules applied at
render time. Modifier functions never touch their argument; they return a
new table.

table_body columns:
    variable, var_type, var_label, row_type, label,
    stat_0 (overall) / stat_1..stat_k (one per `by` level),
    p_value, test_name (after add_p)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

import numpy as np
import pandas as pd

from config import CONFIG
from logger import get_logger
from sumextras.formatting import guess_digits, style_number, style_pvalue
from sumextras.html_table import HtmlTable, html_table
from sumextras.statistics import (
    CATEGORICAL_TYPES,
    CONTINUOUS_TYPES,
    count_levels,
    count_missing,
    default_test,
    run_test,
    summarize_continuous,
    summarize_count,
)
from sumextras.survey import SurveyDesign
from sumextras.themes import get_summary_theme

logger = get_logger(__name__)

MISSING_MODES = ("ifany", "no", "always")
VAR_TYPES = (*CONTINUOUS_TYPES, *CATEGORICAL_TYPES)
TEXT_FORMATS = {"bold": ("font-weight", "bold"), "italic": ("font-style", "italic")}
META_COLUMNS = ["variable", "var_type", "var_label", "row_type", "label"]

_STAT_COL = re.compile(r"^stat_\d+$")

RowPredicate = Callable[[pd.DataFrame], Any]
ColumnSelector = Callable[[pd.DataFrame], list]
Columns = str | Sequence[str] | ColumnSelector


class TableKind(str, Enum):
    STANDARD = "tbl_summary"
    SURVEY = "tbl_svysummary"


@dataclass(frozen=True, eq=False)
class TableInputs:
    """Arguments a summary table was built from."""

    data: pd.DataFrame | SurveyDesign
    by: str | None = None
    label: Mapping[str, str] | None = None
    include: Sequence[str] | None = None
    type: Mapping[str, str] | None = None
    missing: str = "ifany"
    missing_text: str | None = None

    def as_kwargs(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TextFormatRule:
    columns: tuple[str, ...]
    rows: RowPredicate | None
    text_format: str


@dataclass(frozen=True)
class MissingSymbolRule:
    columns: tuple[str, ...]
    rows: RowPredicate | None
    symbol: str


@dataclass(frozen=True, eq=False)
class TableStyling:
    header: Mapping[str, str] = field(default_factory=dict)
    text_format: tuple[TextFormatRule, ...] = ()
    fmt_missing: tuple[MissingSymbolRule, ...] = ()
    fmt_fun: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class SummaryTable:
    kind: TableKind
    inputs: TableInputs
    table_body: pd.DataFrame
    table_styling: TableStyling
    n: float

    def _repr_html_(self) -> str:
        return as_html_table(self).as_html()


# --- Selectors ---


def all_stat_cols(stat_0: bool = True) -> ColumnSelector:
    """Select statistic columns (`stat_0`, `stat_1`, ...)."""

    def _select(body: pd.DataFrame) -> list[str]:
        return [c for c in body.columns if _STAT_COL.match(c) and (stat_0 or c != "stat_0")]

    return _select


def _select_variables(var_types: Sequence[str]) -> ColumnSelector:
    def _select(body: pd.DataFrame) -> list[str]:
        rows = body[body["var_type"].isin(var_types) & (body["row_type"] != "variable_group")]
        return list(dict.fromkeys(rows["variable"]))

    return _select


def all_continuous(continuous2: bool = True) -> ColumnSelector:
    """Select continuous variables."""
    return _select_variables(CONTINUOUS_TYPES if continuous2 else ("continuous",))


def all_categorical(dichotomous: bool = True) -> ColumnSelector:
    """Select categorical variables."""
    return _select_variables(CATEGORICAL_TYPES if dichotomous else ("categorical",))


def _resolve_columns(columns: Columns, body: pd.DataFrame) -> tuple[str, ...]:
    if callable(columns):
        resolved = columns(body)
    elif isinstance(columns, str):
        resolved = [columns]
    else:
        resolved = list(columns)
    return tuple(resolved)


def _row_mask(rows: RowPredicate | None, body: pd.DataFrame) -> np.ndarray:
    if rows is None:
        return np.ones(len(body), dtype=bool)
    return np.asarray(rows(body), dtype=bool)


# --- Variable typing ---


def _numeric_sort_key(x: Any) -> tuple[int, float | str]:
    """Numeric-looking values first in numeric order, then the rest as text."""
    s = str(x)
    try:
        return (0, float(s))
    except ValueError:
        return (1, s)


def _levels(series: pd.Series) -> list:
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    return sorted(series.dropna().unique().tolist(), key=_numeric_sort_key)


def _is_boolean(series: pd.Series) -> bool:
    if pd.api.types.is_bool_dtype(series):
        return True
    if series.dtype != object:
        return False
    clean = series.dropna()
    return len(clean) > 0 and clean.map(lambda v: isinstance(v, (bool, np.bool_))).all()


def classify_variable(series: pd.Series) -> str:
    """
    Infer the summary type of a column.

    Booleans and 0/1 numerics are dichotomous; text and categoricals are
    categorical; numerics with fewer than `table.categorical_max_levels`
    distinct values are categorical; other numerics are continuous.
    """
    if _is_boolean(series):
        return "dichotomous"
    if isinstance(series.dtype, pd.CategoricalDtype) or not pd.api.types.is_numeric_dtype(series):
        return "categorical"

    clean = series.dropna()
    if len(clean) == 0:
        return "continuous"
    if set(clean.unique().tolist()) <= {0, 1}:
        return "dichotomous"
    if clean.nunique() < CONFIG.get("table.categorical_max_levels", 10):
        return "categorical"
    return "continuous"


def _dichotomous_value(series: pd.Series) -> Any:
    """The level whose count is reported for a dichotomous variable."""
    levels = _levels(series)
    for candidate in (1, "yes", "Yes", "YES"):
        for level in levels:
            if level == candidate:
                return level
    return levels[-1] if levels else 1


def _level_text(level: Any) -> str:
    # integer codes stored as floats (columns with NaN) display as "1", not "1.0"
    if isinstance(level, (float, np.floating)) and float(level).is_integer():
        return str(int(level))
    return str(level)


# --- Construction ---


@dataclass(frozen=True)
class _SummaryVariable:
    name: str
    var_type: str
    label: str


def _analysis_frame(kind: TableKind, inputs: TableInputs) -> tuple[pd.DataFrame, pd.Series | None]:
    """The data and weights a table summarizes, after dropping rows with a missing `by`."""
    if kind is TableKind.SURVEY:
        if not isinstance(inputs.data, SurveyDesign):
            raise TypeError("tbl_svysummary() expects a SurveyDesign; use svydesign()")
        frame, weights = inputs.data.variables, inputs.data.weight_vector()
    else:
        if isinstance(inputs.data, SurveyDesign):
            raise TypeError("Survey designs are summarized with tbl_svysummary()")
        if not isinstance(inputs.data, pd.DataFrame):
            raise TypeError(f"tbl_summary() expects a DataFrame, got {type(inputs.data).__name__}")
        frame, weights = inputs.data, None

    if inputs.by is not None:
        if inputs.by not in frame.columns:
            raise ValueError(f"Group column '{inputs.by}' not found in data")
        keep = frame[inputs.by].notna()
        dropped = int((~keep).sum())
        if dropped:
            logger.info(f"{dropped} row(s) with missing '{inputs.by}' removed")
        frame = frame[keep]
        weights = weights[keep] if weights is not None else None

    return frame, weights


def _resolve_variables(kind: TableKind, inputs: TableInputs, frame: pd.DataFrame) -> list[_SummaryVariable]:
    if inputs.missing not in MISSING_MODES:
        raise ValueError(f"missing must be one of {MISSING_MODES}, got {inputs.missing!r}")

    weights_col = inputs.data.weights if kind is TableKind.SURVEY else None
    if inputs.include is None:
        include = [c for c in frame.columns if c != weights_col]
    else:
        include = list(inputs.include)
        not_found = [c for c in include if c not in frame.columns]
        if not_found:
            raise ValueError(f"Columns not found in data: {not_found}")

    labels = dict(inputs.label or {})
    types = dict(inputs.type or {})
    bad_types = {v: t for v, t in types.items() if t not in VAR_TYPES}
    if bad_types:
        raise ValueError(f"Unknown variable type(s) {bad_types}; expected one of {VAR_TYPES}")

    return [
        _SummaryVariable(
            name=col,
            var_type=types.get(col) or classify_variable(frame[col]),
            label=str(labels.get(col, col)),
        )
        for col in dict.fromkeys(include)
        if col != inputs.by
    ]


def _variable_rows(
    var: _SummaryVariable,
    frame: pd.DataFrame,
    weights: pd.Series | None,
    stat_masks: Mapping[str, pd.Series],
    missing: str,
    missing_text: str,
) -> list[dict[str, Any]]:
    series = frame[var.name]
    base = {"variable": var.name, "var_type": var.var_type, "var_label": var.label}
    empty_stats = {col: None for col in stat_masks}

    def _weights(mask: pd.Series) -> pd.Series | None:
        return weights[mask] if weights is not None else None

    def _subset(mask: pd.Series) -> tuple[pd.Series, pd.Series | None]:
        return series[mask], _weights(mask)

    rows = []
    if var.var_type == "continuous":
        digits = guess_digits(series)
        stats = {col: summarize_continuous(*_subset(m), digits=digits) for col, m in stat_masks.items()}
        rows.append({**base, "row_type": "label", "label": var.label, **stats})

    elif var.var_type == "continuous2":
        digits = guess_digits(series)
        stats = {col: summarize_continuous(*_subset(m), digits=digits) for col, m in stat_masks.items()}
        rows.append({**base, "row_type": "label", "label": var.label, **empty_stats})
        rows.append({**base, "row_type": "level", "label": "Median (Q1, Q3)", **stats})

    elif var.var_type == "categorical":
        levels = _levels(series)
        counted = {col: count_levels(series[m], levels, _weights(m)) for col, m in stat_masks.items()}
        rows.append({**base, "row_type": "label", "label": var.label, **empty_stats})
        for level in levels:
            stats = {
                col: summarize_count(counts[level], denominator)
                for col, (counts, denominator) in counted.items()
            }
            rows.append({**base, "row_type": "level", "label": _level_text(level), **stats})

    else:  # dichotomous
        value = _dichotomous_value(series)
        stats = {}
        for col, m in stat_masks.items():
            counts, denominator = count_levels(series[m], [value], _weights(m))
            stats[col] = summarize_count(counts[value], denominator)
        rows.append({**base, "row_type": "label", "label": var.label, **stats})

    n_missing = int(series.isna().sum())
    if missing == "always" or (missing == "ifany" and n_missing > 0):
        stats = {col: count_missing(*_subset(m)) for col, m in stat_masks.items()}
        rows.append({**base, "row_type": "missing", "label": missing_text, **stats})

    return rows


def _count_rows(rows: pd.Series, weights: pd.Series | None) -> float:
    return float(rows.sum()) if weights is None else float(weights[rows].sum())


def _build_body(
    variables: Sequence[_SummaryVariable],
    frame: pd.DataFrame,
    weights: pd.Series | None,
    stat_masks: Mapping[str, pd.Series],
    missing: str,
    missing_text: str,
) -> pd.DataFrame:
    records = []
    for var in variables:
        records.extend(_variable_rows(var, frame, weights, stat_masks, missing, missing_text))
    body = pd.DataFrame.from_records(records, columns=META_COLUMNS + list(stat_masks))
    return body.astype({col: object for col in stat_masks})


def _construct(kind: TableKind, inputs: TableInputs) -> SummaryTable:
    with logger.track_time(kind.value):
        frame, weights = _analysis_frame(kind, inputs)
        variables = _resolve_variables(kind, inputs, frame)
        missing_text = inputs.missing_text or CONFIG.get("table.missing_text", "Unknown")

        all_rows = pd.Series(True, index=frame.index)
        n_total = _count_rows(all_rows, weights)
        header = {"label": CONFIG.get("table.label_header", "Characteristic")}

        if inputs.by is None:
            stat_masks = {"stat_0": all_rows}
            header["stat_0"] = f"N = {style_number(n_total, 0)}"
        else:
            stat_masks = {}
            by_values = frame[inputs.by]
            for i, level in enumerate(_levels(by_values), start=1):
                mask = by_values == level
                stat_masks[f"stat_{i}"] = mask
                header[f"stat_{i}"] = f"{_level_text(level)} (N = {style_number(_count_rows(mask, weights), 0)})"
            if not stat_masks:
                raise ValueError(f"No valid groups found in column '{inputs.by}'")

        body = _build_body(variables, frame, weights, stat_masks, inputs.missing, missing_text)

    logger.log_operation(
        kind.value, "completed", variables=len(variables), by=inputs.by, n=style_number(n_total, 0)
    )
    return SummaryTable(
        kind=kind,
        inputs=inputs,
        table_body=body,
        table_styling=TableStyling(header=header),
        n=n_total,
    )


def tbl_summary(
    data: pd.DataFrame,
    by: str | None = None,
    label: Mapping[str, str] | None = None,
    include: Sequence[str] | None = None,
    type: Mapping[str, str] | None = None,
    missing: str = "ifany",
    missing_text: str | None = None,
) -> SummaryTable:
    """
    Summarize the columns of a data frame, optionally split by a grouping column.

    Parameters:
        data: Source data.
        by: Grouping column; one statistic column per level. Rows with a missing
            `by` value are dropped.
        label: Variable -> display label.
        include: Columns to summarize (all by default, `by` always excluded).
        type: Variable -> one of continuous, continuous2, categorical, dichotomous.
        missing: "ifany" (default), "no" or "always" for the missing-count row.
        missing_text: Label of the missing-count row.

    Raises:
        ValueError: Unknown columns, types or missing mode.
    """
    inputs = TableInputs(
        data=data, by=by, label=label, include=include, type=type,
        missing=missing, missing_text=missing_text,
    )
    return _construct(TableKind.STANDARD, inputs)


def tbl_svysummary(
    data: SurveyDesign,
    by: str | None = None,
    label: Mapping[str, str] | None = None,
    include: Sequence[str] | None = None,
    type: Mapping[str, str] | None = None,
    missing: str = "ifany",
    missing_text: str | None = None,
) -> SummaryTable:
    """
    Survey-weighted variant of `tbl_summary()`.

    Counts are weighted and quartiles are weighted quantiles. The weight column
    is left out of the default `include`.
    """
    inputs = TableInputs(
        data=data, by=by, label=label, include=include, type=type,
        missing=missing, missing_text=missing_text,
    )
    return _construct(TableKind.SURVEY, inputs)


_CONSTRUCTORS: dict[TableKind, Callable[..., SummaryTable]] = {
    TableKind.STANDARD: tbl_summary,
    TableKind.SURVEY: tbl_svysummary,
}


def rebuild(tbl: SummaryTable, kind: TableKind | None = None, **changes: Any) -> SummaryTable:
    """
    Re-run the constructor of `tbl` with its stored inputs, replacing `changes`.

    Statistics are recomputed; styling applied to `tbl` is not carried over.
    """
    kind = kind or tbl.kind
    inputs = replace(tbl.inputs, **changes)
    return _CONSTRUCTORS[kind](**inputs.as_kwargs())


# --- Modifiers ---


def _with_styling(tbl: SummaryTable, **changes: Any) -> SummaryTable:
    return replace(tbl, table_styling=replace(tbl.table_styling, **changes))


def _summary_variables(body: pd.DataFrame) -> list[tuple[str, str]]:
    rows = body[body["row_type"] == "label"]
    return list(dict.fromkeys(zip(rows["variable"], rows["var_type"])))


def add_overall(tbl: SummaryTable, last: bool = False) -> SummaryTable:
    """
    Add an "Overall" statistic column (`stat_0`) computed over all groups.

    Tables without `by` (or that already have `stat_0`) are returned unaltered
    with a warning.
    """
    body = tbl.table_body
    if tbl.inputs.by is None:
        logger.warning("Table is not stratified; overall column cannot be added. Table returned unaltered.")
        return tbl
    if "stat_0" in body.columns:
        logger.warning("Table already has an overall column. Table returned unaltered.")
        return tbl

    frame, weights = _analysis_frame(tbl.kind, tbl.inputs)
    label_rows = body[body["row_type"] == "label"]
    variables = [
        _SummaryVariable(name=v, var_type=t, label=lbl)
        for v, t, lbl in dict.fromkeys(zip(label_rows["variable"], label_rows["var_type"], label_rows["var_label"]))
    ]
    missing_text = tbl.inputs.missing_text or CONFIG.get("table.missing_text", "Unknown")
    all_rows = pd.Series(True, index=frame.index)
    overall = _build_body(variables, frame, weights, {"stat_0": all_rows}, tbl.inputs.missing, missing_text)

    # level text is not unique (1 and "1" both print as "1"), so rows are
    # matched by their position within each variable and row type
    keys = ["variable", "row_type", "_position"]
    left = body.assign(_position=body.groupby(["variable", "row_type"], sort=False).cumcount())
    right = overall.assign(_position=overall.groupby(["variable", "row_type"], sort=False).cumcount())
    merged = left.merge(right[keys + ["stat_0"]], on=keys, how="left", sort=False)
    merged.index = body.index

    stat_cols = all_stat_cols(stat_0=False)(body)
    anchor = stat_cols[-1] if last else "label"
    columns = list(body.columns)
    columns.insert(columns.index(anchor) + 1, "stat_0")
    merged = merged[columns].astype({"stat_0": object})

    header = {
        **tbl.table_styling.header,
        "stat_0": f"{CONFIG.get('table.overall_label', 'Overall')} (N = {style_number(tbl.n, 0)})",
    }
    logger.log_operation("add_overall", "completed", last=last)
    return replace(_with_styling(tbl, header=header), table_body=merged)


def add_p(
    tbl: SummaryTable,
    test: Mapping[str | ColumnSelector, str] | None = None,
    pvalue_fun: Callable[[float], str | None] | None = None,
) -> SummaryTable:
    """
    Add a p-value column comparing the `by` groups.

    Parameters:
        test: Maps a variable name or selector (e.g. `all_continuous()`) to a test
            name from `sumextras.statistics.TESTS`; later entries win. Unassigned
            variables get `default_test()`.
        pvalue_fun: Formats p-values for display (default `style_pvalue`).

    Errors raised by the tests themselves propagate unchanged.
    """
    body = tbl.table_body
    if tbl.inputs.by is None:
        logger.warning("Table is not stratified; p-values cannot be added. Table returned unaltered.")
        return tbl
    if "p_value" in body.columns:
        logger.warning("Table already has p-values. Table returned unaltered.")
        return tbl

    assigned: dict[str, str] = {}
    for selector, test_name in (test or {}).items():
        for variable in _resolve_columns(selector, body):
            assigned[variable] = test_name

    frame, weights = _analysis_frame(tbl.kind, tbl.inputs)
    by = tbl.inputs.by
    p_values: dict[str, float] = {}
    test_names: dict[str, str] = {}
    for variable, var_type in _summary_variables(body):
        test_name = assigned.get(variable) or default_test(frame, variable, by, var_type, weights)
        p_values[variable], test_names[variable] = run_test(test_name, frame, variable, by, weights)

    body = body.copy()
    is_label = body["row_type"] == "label"
    body["p_value"] = np.where(is_label, body["variable"].map(p_values), np.nan).astype(float)
    body["test_name"] = body["variable"].map(test_names).where(is_label, None)

    header = {**tbl.table_styling.header, "p_value": CONFIG.get("table.pvalue_header", "p-value")}
    fmt_fun = {**tbl.table_styling.fmt_fun, "p_value": pvalue_fun or style_pvalue}
    logger.log_operation("add_p", "completed", tests=len(p_values))
    return replace(_with_styling(tbl, header=header, fmt_fun=fmt_fun), table_body=body)


def modify_table_styling(
    tbl: SummaryTable,
    columns: Columns,
    rows: RowPredicate | None = None,
    text_format: str | Sequence[str] | None = None,
) -> SummaryTable:
    """
    Register text formats ("bold", "italic") for cells selected by columns and a row predicate.

    The predicate receives `table_body` at render time and returns a boolean mask.
    """
    if text_format is None:
        return tbl
    formats = [text_format] if isinstance(text_format, str) else list(text_format)
    unknown = [f for f in formats if f not in TEXT_FORMATS]
    if unknown:
        raise ValueError(f"Unknown text format(s) {unknown}; expected one of {sorted(TEXT_FORMATS)}")

    cols = _resolve_columns(columns, tbl.table_body)
    rules = tuple(TextFormatRule(columns=cols, rows=rows, text_format=f) for f in formats)
    return _with_styling(tbl, text_format=tbl.table_styling.text_format + rules)


def _label_rows(body: pd.DataFrame) -> pd.Series:
    return body["row_type"] == "label"


def _level_rows(body: pd.DataFrame) -> pd.Series:
    return body["row_type"].isin(["level", "missing"])


def bold_labels(tbl: SummaryTable) -> SummaryTable:
    """Bold variable labels."""
    return modify_table_styling(tbl, columns="label", rows=_label_rows, text_format="bold")


def italicize_levels(tbl: SummaryTable) -> SummaryTable:
    """Italicize level and missing-count labels."""
    return modify_table_styling(tbl, columns="label", rows=_level_rows, text_format="italic")


def modify_header(tbl: SummaryTable, headers: Mapping[str, str] | None = None, **kwargs: str) -> SummaryTable:
    """
    Replace column header text, e.g. `modify_header(tbl, label="")`.

    Raises:
        KeyError: If a column is not in the table.
    """
    new = {**(headers or {}), **kwargs}
    missing = [c for c in new if c not in tbl.table_body.columns]
    if missing:
        raise KeyError(f"Columns not found in table: {missing}")
    return _with_styling(tbl, header={**tbl.table_styling.header, **new})


def modify_table_body(tbl: SummaryTable, fun: Callable[[pd.DataFrame], pd.DataFrame]) -> SummaryTable:
    """
    Replace `table_body` with `fun(copy_of_table_body)`.

    Raises:
        TypeError: If `fun` does not return a DataFrame.
    """
    body = fun(tbl.table_body.copy())
    if not isinstance(body, pd.DataFrame):
        raise TypeError(f"modify_table_body() function must return a DataFrame, got {type(body).__name__}")
    return replace(tbl, table_body=body)


def modify_missing_symbol(
    tbl: SummaryTable,
    symbol: str,
    columns: Columns,
    rows: RowPredicate | None = None,
) -> SummaryTable:
    """
    Display `symbol` in empty cells of the selected columns on rows where `rows` holds.

    Registering a rule identical to an existing one leaves the table unchanged.
    """
    rule = MissingSymbolRule(columns=_resolve_columns(columns, tbl.table_body), rows=rows, symbol=symbol)
    if rule in tbl.table_styling.fmt_missing:
        return tbl
    return _with_styling(tbl, fmt_missing=tbl.table_styling.fmt_missing + (rule,))


def add_variable_group_header(
    tbl: SummaryTable, header: str, variables: Sequence[str]
) -> SummaryTable:
    """
    Insert a `variable_group` row labelled `header` above the first of `variables`.

    Raises:
        ValueError: If none of `variables` is in the table.
    """
    body = tbl.table_body.reset_index(drop=True)
    positions = np.flatnonzero(body["variable"].isin(list(variables)).to_numpy())
    if len(positions) == 0:
        raise ValueError(f"None of {list(variables)} are in the table")

    row = {col: None for col in body.columns}
    row.update({"variable": header, "row_type": "variable_group", "label": header, "var_label": header})
    if "p_value" in row:
        row["p_value"] = np.nan
    first = positions[0]
    new_body = pd.concat(
        [body.iloc[:first], pd.DataFrame([row], columns=body.columns), body.iloc[first:]],
        ignore_index=True,
    )
    return replace(tbl, table_body=new_body)


# --- Rendering ---


def _is_empty(value: Any) -> bool:
    return value is None or (not isinstance(value, str) and bool(pd.isna(value)))


def display_columns(tbl: SummaryTable) -> list[str]:
    body = tbl.table_body
    columns = ["label"] + all_stat_cols()(body)
    if "p_value" in body.columns:
        columns.append("p_value")
    return columns


def as_data_frame(tbl: SummaryTable, col_labels: bool = True) -> pd.DataFrame:
    """
    Render the table body to display text.

    Empty cells show the symbol of the last matching missing-symbol rule, or "".
    With `col_labels`, columns are renamed to their header text.
    """
    body = tbl.table_body.reset_index(drop=True)
    styling = tbl.table_styling
    columns = display_columns(tbl)

    out = pd.DataFrame(index=body.index)
    for col in columns:
        fmt = styling.fmt_fun.get(col)
        values = body[col].astype(object)
        if fmt is not None:
            values = values.map(lambda v: None if _is_empty(v) else fmt(v))
        out[col] = values.map(lambda v: None if _is_empty(v) else str(v))

    for rule in styling.fmt_missing:
        mask = _row_mask(rule.rows, body)
        for col in rule.columns:
            if col in out.columns:
                empty = out[col].isna().to_numpy() & mask
                out.loc[empty, col] = rule.symbol

    out = out.fillna("")
    if col_labels:
        out = out.rename(columns={c: styling.header.get(c, c) for c in columns})
    return out


def as_html_table(tbl: SummaryTable) -> HtmlTable:
    """
    Convert to an `HtmlTable`, applying headers, text formats, level indentation
    and the active summary theme.
    """
    body = tbl.table_body.reset_index(drop=True)
    display = as_data_frame(tbl, col_labels=False)
    header = tbl.table_styling.header

    result = html_table(display).cols_label({c: header.get(c, c) for c in display.columns})

    indent = CONFIG.get("table.level_indent", "1.5em")
    result = result.tab_style(
        {"padding-left": indent}, columns="label", rows=_level_rows(body).to_numpy()
    )
    result = result.tab_row_class("row-group", rows=(body["row_type"] == "variable_group").to_numpy())

    for rule in tbl.table_styling.text_format:
        prop, value = TEXT_FORMATS[rule.text_format]
        cols = [c for c in rule.columns if c in display.columns]
        if cols:
            result = result.tab_style({prop: value}, columns=cols, rows=_row_mask(rule.rows, body))

    theme = get_summary_theme()
    if theme:
        result = result.tab_options(**theme.get("html_table_options", {}))
    return result
