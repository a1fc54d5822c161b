import os
import logging
import pandas as pd

from surveillance_pipeline.config.settings import CASES_COLUMNS, CASES_YEAR_COLUMN
from surveillance_pipeline.scripts.epi_week import week_of

logger = logging.getLogger(__name__)


def load_cases(path, default_year: int) -> pd.DataFrame:
    """Read the weekly case file into CaseRecord columns.

    The year comes from the optional ANO column; files without one are
    stamped with `default_year`.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing cases file: {path}")

    raw = pd.read_csv(path)

    missing = [c for c in CASES_COLUMNS if c not in raw.columns]
    if missing:
        raise KeyError(f"Cases file {path} lacks columns: {missing}")

    df = raw.rename(columns=CASES_COLUMNS)
    if CASES_YEAR_COLUMN in raw.columns:
        df["year"] = raw[CASES_YEAR_COLUMN].astype(int)
    else:
        df["year"] = int(default_year)

    unnamed = df["disease_name"].isna()
    if unnamed.any():
        logger.warning("Dropping %d case rows without a disease name", int(unnamed.sum()))
        df = df[~unnamed].copy()

    df["disease_name"] = df["disease_name"].astype(str).str.strip().str.title()
    df["epidemiological_week"] = df["epidemiological_week"].astype(int)

    logger.info("Loaded %d case rows from %s", len(df), path)
    return df[["disease_name", "epidemiological_week", "year", "case_count"]]


def prepare_cases(raw_cases: pd.DataFrame, today) -> pd.DataFrame:
    """Keep weeks up to the current one and fill missing counts with 0."""
    current_week = week_of(today)

    cases = raw_cases[raw_cases["epidemiological_week"] <= current_week].copy()
    cases["case_count"] = cases["case_count"].fillna(0).astype(int)

    logger.info(
        "Cases up to week %d: kept %d of %d rows",
        current_week, len(cases), len(raw_cases),
    )
    return cases.reset_index(drop=True)
