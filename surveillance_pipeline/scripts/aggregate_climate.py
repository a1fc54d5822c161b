import os
import logging
import pandas as pd

from surveillance_pipeline.config.settings import CLIMATE_COLUMNS
from surveillance_pipeline.scripts.epi_week import week_series

logger = logging.getLogger(__name__)


def load_climate(path) -> pd.DataFrame:
    """Read raw climate / air-quality observations.

    Location ids are kept as strings so leading zeros survive. A date that
    cannot be parsed makes week derivation impossible, so it aborts the load.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing climate file: {path}")

    raw = pd.read_csv(path, dtype={"ccpp_ubigeo": str, "variable": str})

    missing = [c for c in CLIMATE_COLUMNS if c not in raw.columns]
    if missing:
        raise KeyError(f"Climate file {path} lacks columns: {missing}")

    df = raw.rename(columns=CLIMATE_COLUMNS)[list(CLIMATE_COLUMNS.values())]

    try:
        df["date"] = pd.to_datetime(df["date"], errors="raise")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Unparseable date in climate file {path}: {e}") from e
    if df["date"].isna().any():
        raise ValueError(f"Empty date in climate file {path}")

    df["value"] = pd.to_numeric(df["value"], errors="coerce")

    logger.info("Loaded %d climate observations from %s", len(df), path)
    return df


def aggregate_climate(raw_observations: pd.DataFrame, location_id, year: int,
                      exclude_variables) -> pd.DataFrame:
    """Weekly mean per climate variable for one location and one year.

    Nulls are skipped when averaging; a group with no values at all keeps a
    NaN mean.
    """
    obs = raw_observations
    mask = (
        (obs["location_id"] == location_id)
        & (obs["date"].dt.year == year)
        & (~obs["variable_name"].isin(set(exclude_variables)))
    )
    filtered = obs.loc[mask].copy()

    filtered["year"] = filtered["date"].dt.year.astype(int)
    filtered["epidemiological_week"] = week_series(filtered["date"])

    weekly = (
        filtered
        .groupby(["year", "epidemiological_week", "variable_name"], as_index=False, dropna=False)
        .agg(mean_value=("value", "mean"))
    )

    logger.info(
        "Aggregated %d observations for %s/%d into %d weekly rows",
        len(filtered), location_id, year, len(weekly),
    )
    return weekly
