import pandas as pd
import pytest


@pytest.fixture
def raw_cases():
    """Two diseases over the first weeks of 2024, one missing count."""
    return pd.DataFrame({
        "disease_name": ["Leishmaniasis", "Leishmaniasis", "Leishmaniasis",
                         "Leptospirosis", "Leptospirosis"],
        "epidemiological_week": [1, 2, 12, 1, 3],
        "year": [2024] * 5,
        "case_count": [5, None, 7, 2, 4],
    })


@pytest.fixture
def observations():
    """Raw climate rows for one station plus noise the filter must drop."""
    return pd.DataFrame({
        "location_id": ["1000000000"] * 6 + ["0100000000", "1000000000", "1000000000"],
        "date": pd.to_datetime([
            "2024-01-15", "2024-01-16", "2024-01-17",   # week 3
            "2024-01-15", "2024-01-16",                 # week 3
            "2024-03-05",                               # week 10
            "2024-01-15",                               # other location
            "2024-01-15",                               # disease tag
            "2023-01-17",                               # other year
        ]),
        "variable_name": ["rain", "rain", "rain", "temp_out", "temp_out",
                          "rain", "rain", "dengue", "rain"],
        "value": [2.0, None, 4.0, None, None, 3.0, 100.0, 50.0, 9.0],
    })
