import logging
import pandas as pd

from surveillance_pipeline.config.settings import ABSENT_VARIABLE

logger = logging.getLogger(__name__)

JOIN_KEYS = ["year", "epidemiological_week"]


def join_climate_cases(aggregates: pd.DataFrame, cases: pd.DataFrame) -> pd.DataFrame:
    """Left-join weekly climate means onto case records by year + week.

    Every aggregate row is kept; it is repeated once per case row sharing
    its week (one per disease).
    """
    merged = aggregates.merge(
        cases,
        on=JOIN_KEYS,
        how="left"
    )

    absent = merged["variable_name"].isna()
    if absent.any():
        logger.warning(
            "%d merged rows have no variable tag; marked as %s. "
            "Check the climate feed producer.",
            int(absent.sum()), ABSENT_VARIABLE,
        )
        merged.loc[absent, "variable_name"] = ABSENT_VARIABLE

    return merged


def unmatched_climate_rows(merged: pd.DataFrame) -> pd.DataFrame:
    """Climate weeks that found no case record."""
    return merged[merged["disease_name"].isna()]
