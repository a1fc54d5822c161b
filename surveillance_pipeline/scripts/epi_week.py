import pandas as pd


def week_of(day) -> int:
    """Epidemiological week of a calendar date.

    Days of the year are grouped into Sunday-first 7-day buckets and the
    result is shifted by one, so the days before the first Sunday of January
    fall in week 1 and the last days of December can reach week 54.
    """
    return int(pd.Timestamp(day).strftime("%U")) + 1


def week_series(dates: pd.Series) -> pd.Series:
    """Vectorised `week_of` over a datetime column."""
    return dates.dt.strftime("%U").astype(int) + 1
