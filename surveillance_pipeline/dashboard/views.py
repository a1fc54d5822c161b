"""View state and recompute functions behind the two dashboard pages.

Each page owns a `ViewStore`: the current parameters plus the data derived
from them. Changing a parameter goes through `ViewStore.update`, which
recomputes synchronously from the shared read-only table. The recompute
functions are pure, so the stores hold no history beyond the last result.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy.stats import pearsonr

from surveillance_pipeline.config.settings import (
    AGGREGATIONS,
    CHART_KINDS,
    CLIMATE_VARIABLE_LABELS,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA = "insufficient data"
OK = "ok"

CONFIDENCE_LEVEL = 0.95
FIT_GRID_POINTS = 50


# ----------------------------------------------------
# Shared helpers
# ----------------------------------------------------

def disease_options(table: pd.DataFrame) -> list:
    """Distinct title-cased disease names, sorted."""
    names = table["disease_name"].dropna().astype(str).str.title().unique()
    return sorted(names)


def week_bounds(cases: pd.DataFrame) -> Tuple[int, int]:
    weeks = cases["epidemiological_week"]
    if weeks.empty:
        return 1, 1
    return int(weeks.min()), int(weeks.max())


def clamp_week_range(week_range, bounds) -> Tuple[int, int]:
    lo, hi = sorted(int(w) for w in week_range)
    min_week, max_week = bounds
    lo = min(max(lo, min_week), max_week)
    hi = max(min(hi, max_week), min_week)
    return lo, hi


# ----------------------------------------------------
# View A: case evolution
# ----------------------------------------------------

@dataclass(frozen=True)
class CaseEvolutionParams:
    disease: str
    week_range: Tuple[int, int]
    chart_kind: str = "line"
    aggregation: str = "total"

    def __post_init__(self):
        if self.chart_kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {self.chart_kind!r}")
        if self.aggregation not in AGGREGATIONS:
            raise ValueError(f"Unknown aggregation: {self.aggregation!r}")


def recompute_case_evolution(cases: pd.DataFrame, params: CaseEvolutionParams) -> pd.DataFrame:
    """Weekly case totals (or their running sum) for one disease."""
    lo, hi = clamp_week_range(params.week_range, week_bounds(cases))

    subset = cases[
        (cases["disease_name"] == params.disease)
        & (cases["epidemiological_week"] >= lo)
        & (cases["epidemiological_week"] <= hi)
    ]

    weekly = (
        subset
        .groupby("epidemiological_week", as_index=False)["case_count"]
        .sum()
        .sort_values("epidemiological_week")
        .reset_index(drop=True)
    )

    if params.aggregation == "cumulative":
        weekly["case_count"] = weekly["case_count"].cumsum()

    return weekly


# ----------------------------------------------------
# View B: case vs climate correlation
# ----------------------------------------------------

@dataclass(frozen=True)
class CorrelationParams:
    disease: str
    climate_variable: str

    def __post_init__(self):
        if self.climate_variable not in CLIMATE_VARIABLE_LABELS:
            raise ValueError(f"Unknown climate variable: {self.climate_variable!r}")


@dataclass
class CorrelationResult:
    points: pd.DataFrame
    status: str = OK
    pearson_r: Optional[float] = None
    p_value: Optional[float] = None
    fit: Optional[pd.DataFrame] = None

    @property
    def sufficient(self) -> bool:
        return self.status == OK


def fit_regression(x: pd.Series, y: pd.Series) -> pd.DataFrame:
    """OLS line of y on x with its confidence band over the observed x range."""
    model = sm.OLS(y.to_numpy(dtype=float), sm.add_constant(x.to_numpy(dtype=float))).fit()

    grid = np.linspace(x.min(), x.max(), FIT_GRID_POINTS)
    prediction = model.get_prediction(sm.add_constant(grid, has_constant="add"))
    frame = prediction.summary_frame(alpha=1 - CONFIDENCE_LEVEL)

    return pd.DataFrame({
        "x": grid,
        "fitted": frame["mean"].to_numpy(),
        "lower": frame["mean_ci_lower"].to_numpy(),
        "upper": frame["mean_ci_upper"].to_numpy(),
    })


def recompute_correlation(merged: pd.DataFrame, params: CorrelationParams) -> CorrelationResult:
    """Paired (climate mean, case count) points with regression and Pearson r."""
    subset = merged[
        (merged["disease_name"] == params.disease)
        & (merged["variable_name"] == params.climate_variable)
    ]
    points = (
        subset
        .dropna(subset=["mean_value", "case_count"])
        [["year", "epidemiological_week", "mean_value", "case_count"]]
        .reset_index(drop=True)
    )

    # Both statistics need two points and some spread on each axis
    if len(points) < 2 or points["mean_value"].nunique() < 2 or points["case_count"].nunique() < 2:
        logger.info(
            "Not enough paired points for %s / %s: %d",
            params.disease, params.climate_variable, len(points),
        )
        return CorrelationResult(points=points, status=INSUFFICIENT_DATA)

    r, p = pearsonr(points["mean_value"], points["case_count"])

    return CorrelationResult(
        points=points,
        pearson_r=float(r),
        p_value=float(p),
        fit=fit_regression(points["mean_value"], points["case_count"]),
    )


# ----------------------------------------------------
# Store
# ----------------------------------------------------

@dataclass(eq=False)
class ViewStore:
    """Parameters of one view plus the data last derived from them."""

    table: pd.DataFrame
    recompute: Callable
    params: object
    data: object = field(init=False, default=None)

    def __post_init__(self):
        self.data = self.recompute(self.table, self.params)

    def update(self, **changes):
        new_params = replace(self.params, **changes)
        if new_params != self.params:
            self.params = new_params
            self.data = self.recompute(self.table, self.params)
        return self.data
