"""
Dictionary-driven variable labels.

A dictionary maps variable names to human-readable descriptions:

    dictionary = pd.DataFrame({
        "Variable": ["age", "stage"],
        "Description": ["Age at enrollment", "T Stage"],
    })
    set_dictionary(dictionary)

    tbl = add_auto_labels(tbl_summary(df, by="trt"))

Labels passed to the table constructor always win over dictionary labels.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd

from config import CONFIG
from logger import get_logger
from sumextras.errors import MissingDictionaryError, UnsupportedTableKindError
from sumextras.summary_table import SummaryTable, TableKind, rebuild
from sumextras.survey import SurveyDesign

logger = get_logger(__name__)

DictionaryLike = Mapping[str, str] | pd.DataFrame | Iterable[tuple[str, str]]

_dictionary: dict[str, str] | None = None


def _normalize_dictionary(dictionary: DictionaryLike) -> dict[str, str]:
    """
    Convert a supported dictionary form to an ordered {variable: description} dict.

    Duplicate variables keep their first description.

    Raises:
        KeyError: If a data frame lacks the variable or description column.
    """
    if isinstance(dictionary, pd.DataFrame):
        var_col = CONFIG.get("labels.variable_column", "Variable")
        desc_col = CONFIG.get("labels.description_column", "Description")
        missing_cols = [c for c in (var_col, desc_col) if c not in dictionary.columns]
        if missing_cols:
            raise KeyError(f"Dictionary is missing column(s): {missing_cols}")
        pairs = zip(dictionary[var_col], dictionary[desc_col])
    elif isinstance(dictionary, Mapping):
        pairs = dictionary.items()
    else:
        pairs = dictionary

    result: dict[str, str] = {}
    duplicates = []
    for variable, description in pairs:
        variable = str(variable)
        if variable in result:
            duplicates.append(variable)
            continue
        result[variable] = str(description)

    if duplicates and CONFIG.get("labels.warn_on_duplicates", True):
        logger.warning(
            f"Dictionary has duplicate entries for {sorted(set(duplicates))}; keeping the first description"
        )
    return result


def set_dictionary(dictionary: DictionaryLike) -> None:
    """Register the dictionary used when a labeling call is given none."""
    global _dictionary
    _dictionary = _normalize_dictionary(dictionary)
    logger.debug(f"Dictionary registered with {len(_dictionary)} entries")


def get_dictionary() -> dict[str, str] | None:
    return dict(_dictionary) if _dictionary is not None else None


def clear_dictionary() -> None:
    global _dictionary
    _dictionary = None


def _resolve_dictionary(dictionary: DictionaryLike | None) -> dict[str, str]:
    if dictionary is not None:
        return _normalize_dictionary(dictionary)
    if _dictionary is not None:
        return dict(_dictionary)
    raise MissingDictionaryError(
        "No dictionary available. Pass `dictionary=` or register one with set_dictionary()."
    )


def _column_names(data: Any) -> list[str]:
    if isinstance(data, SurveyDesign):
        return list(data.columns)
    if isinstance(data, pd.DataFrame):
        return list(data.columns)
    return list(data)


def create_labels(data: Any, dictionary: DictionaryLike | None = None) -> list[tuple[str, str]]:
    """
    Look up descriptions for the columns of `data`.

    Parameters:
        data: A DataFrame, a SurveyDesign or an iterable of column names.
        dictionary: Variable descriptions; defaults to the registered dictionary.

    Returns:
        (variable, description) pairs in dictionary order, for variables that
        are both in the data and the dictionary.

    Raises:
        MissingDictionaryError: If no dictionary is given or registered.
    """
    entries = _resolve_dictionary(dictionary)
    columns = set(_column_names(data))
    return [(variable, description) for variable, description in entries.items() if variable in columns]


def _table_kind(tbl: Any) -> TableKind:
    """Classify `tbl` once, before any label work."""
    if not isinstance(tbl, SummaryTable):
        raise UnsupportedTableKindError(
            f"add_auto_labels() requires a tbl_summary or tbl_svysummary table, got {type(tbl).__name__}"
        )
    if tbl.kind is TableKind.SURVEY or isinstance(tbl.inputs.data, SurveyDesign):
        return TableKind.SURVEY
    if tbl.kind is TableKind.STANDARD:
        return TableKind.STANDARD
    raise UnsupportedTableKindError(f"Unsupported summary table kind: {tbl.kind!r}")


def add_auto_labels(tbl: SummaryTable, dictionary: DictionaryLike | None = None) -> SummaryTable:
    """
    Rebuild `tbl` with dictionary descriptions as variable labels.

    Labels already given to the constructor are kept verbatim; dictionary labels
    fill in the other included variables. The table is rebuilt from its stored
    inputs, so statistics are recomputed and earlier styling is dropped: apply
    styling after labeling.

    Raises:
        MissingDictionaryError: If no dictionary is given or registered.
        UnsupportedTableKindError: If `tbl` is not a summary table.
    """
    kind = _table_kind(tbl)
    inputs = tbl.inputs
    data = inputs.data.variables if kind is TableKind.SURVEY else inputs.data

    include = list(inputs.include) if inputs.include is not None else list(data.columns)
    manual = dict(inputs.label or {})

    auto = [
        (variable, description)
        for variable, description in create_labels(data, dictionary)
        if variable in include and variable not in manual
    ]
    merged = {**manual, **dict(auto)}

    logger.log_operation("add_auto_labels", "completed", kind=kind.value, manual=len(manual), auto=len(auto))
    return rebuild(tbl, kind=kind, label=merged)
