"""End-to-end run of the loading, aggregation and join steps on CSV files."""

from datetime import date

import pytest

from surveillance_pipeline.scripts.build_dataset import build_unified_tables
from surveillance_pipeline.scripts.combine_cases_climate import unmatched_climate_rows


@pytest.fixture
def csv_files(tmp_path):
    cases = tmp_path / "cases.csv"
    cases.write_text(
        "NOMBRE,SE,N\n"
        "LEISHMANIASIS,3,4\n"
        "LEPTOSPIROSIS,3,\n"
        "LEISHMANIASIS,30,8\n"
    )
    climate = tmp_path / "climate.csv"
    climate.write_text(
        "ccpp_ubigeo,day,variable,value\n"
        "1000000000,2024-01-15,rain,2.0\n"
        "1000000000,2024-01-16,rain,\n"
        "1000000000,2024-01-17,rain,4.0\n"
        "1000000000,2024-03-05,rain,3.0\n"
        "1000000000,2024-01-15,leptospirosis,12\n"
        "0100000000,2024-01-15,rain,80.0\n"
    )
    return cases, climate


@pytest.mark.integration
class TestBuildUnifiedTables:

    def test_pipeline(self, csv_files):
        cases_file, climate_file = csv_files
        tables = build_unified_tables(cases_file, climate_file, today=date(2024, 3, 10),
                                      location_id="1000000000", year=2024)

        # week 30 is after the cut-off (week 11)
        assert sorted(tables.cases["epidemiological_week"]) == [3, 3]
        assert tables.cases["case_count"].tolist() == [4, 0]

        week3 = tables.merged[tables.merged["epidemiological_week"] == 3]
        assert sorted(week3["disease_name"]) == ["Leishmaniasis", "Leptospirosis"]
        assert week3["mean_value"].tolist() == [3.0, 3.0]
        assert "leptospirosis" not in set(tables.merged["variable_name"])

        orphans = unmatched_climate_rows(tables.merged)
        assert orphans["epidemiological_week"].tolist() == [10]

    def test_climate_year_follows_today(self, tmp_path):
        cases_file = tmp_path / "cases.csv"
        cases_file.write_text(
            "NOMBRE,SE,N\n"
            "LEISHMANIASIS,3,4\n"
            "LEISHMANIASIS,4,1\n"
            "LEISHMANIASIS,10,2\n"
        )
        climate_file = tmp_path / "climate.csv"
        climate_file.write_text(
            "ccpp_ubigeo,day,variable,value\n"
            "1000000000,2024-01-16,rain,2.0\n"
            "1000000000,2024-01-23,rain,1.0\n"
            "1000000000,2024-03-05,rain,3.0\n"
        )

        tables = build_unified_tables(cases_file, climate_file, today=date(2024, 3, 10))

        assert set(tables.merged["year"]) == {2024}
        assert len(tables.merged) == 3
        assert not tables.merged["disease_name"].isna().any()

    def test_explicit_year_overrides_today(self, csv_files):
        cases_file, climate_file = csv_files
        tables = build_unified_tables(cases_file, climate_file, today=date(2024, 3, 10), year=2023)
        assert tables.merged.empty
