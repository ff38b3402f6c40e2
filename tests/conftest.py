"""
🧪 Pytest Configuration for sumextras Tests

Shared fixtures for the whole suite:
- A trial-like dataset (treatment arms, continuous, categorical and 0/1 columns)
- The variable dictionary used by the labeling tests
- Resets of process-wide state (theme, registered dictionary) between tests
"""

import os
import sys

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sumextras.labels import clear_dictionary  # noqa: E402
from sumextras.themes import get_summary_theme, set_summary_theme, reset_summary_theme  # noqa: E402


# ============================================================================
# 📊 Data Fixtures
# ============================================================================


@pytest.fixture
def trial():
    """Clinical-trial style data with two arms and some missing values."""
    rng = np.random.default_rng(42)
    n = 200

    df = pd.DataFrame({
        "trt": rng.choice(["Drug A", "Drug B"], n),
        "age": rng.normal(50, 12, n).round(),
        "marker": rng.gamma(2.0, 0.5, n).round(3),
        "stage": rng.choice(["T1", "T2", "T3", "T4"], n),
        "grade": rng.choice(["I", "II", "III"], n),
        "response": rng.choice([0, 1], n).astype(float),
        "death": rng.choice([0, 1], n),
    })
    df.loc[df.index[:11], "age"] = np.nan
    df.loc[df.index[20:27], "response"] = np.nan
    return df


@pytest.fixture
def dictionary():
    return pd.DataFrame({
        "Variable": ["age", "stage", "grade", "response", "marker"],
        "Description": [
            "Age at enrollment",
            "T Stage",
            "Tumor Grade",
            "Tumor Response",
            "Marker Level (ng/mL)",
        ],
    })


# ============================================================================
# 🔄 Global State
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Keep the registered dictionary and the active theme from leaking between tests."""
    theme = get_summary_theme()
    clear_dictionary()
    yield
    clear_dictionary()
    if theme is None:
        reset_summary_theme()
    else:
        set_summary_theme(theme)


# ============================================================================
# 🎨 Pytest Configuration & Markers
# ============================================================================


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
