"""Tests for case loading and the current-week cut-off."""

from datetime import date

import pandas as pd
import pytest

from surveillance_pipeline.scripts.prepare_cases import load_cases, prepare_cases


class TestPrepareCases:

    def test_missing_counts_become_zero(self):
        raw = pd.DataFrame({
            "disease_name": ["Leishmaniasis", "Leishmaniasis"],
            "epidemiological_week": [1, 2],
            "year": [2024, 2024],
            "case_count": [5, None],
        })
        cases = prepare_cases(raw, today=date(2024, 1, 10))  # week 2
        assert cases["case_count"].tolist() == [5, 0]
        assert cases["case_count"].dtype.kind == "i"

    def test_cut_off_at_current_week(self, raw_cases):
        cases = prepare_cases(raw_cases, today=date(2024, 1, 17))  # week 3
        assert sorted(cases["epidemiological_week"].unique()) == [1, 2, 3]
        assert 12 not in cases["epidemiological_week"].values

    def test_no_year_filter(self, raw_cases):
        older = raw_cases.assign(year=2019)
        cases = prepare_cases(pd.concat([raw_cases, older]), today=date(2024, 1, 17))
        assert set(cases["year"]) == {2019, 2024}

    def test_input_not_mutated(self, raw_cases):
        before = raw_cases.copy()
        prepare_cases(raw_cases, today=date(2024, 1, 17))
        pd.testing.assert_frame_equal(raw_cases, before)


class TestLoadCases:

    def test_maps_source_columns(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text("NOMBRE,SE,N\n leishmaniasis ,1,5\nLEPTOSPIROSIS,2,\n")

        cases = load_cases(path, default_year=2024)

        assert list(cases.columns) == ["disease_name", "epidemiological_week", "year", "case_count"]
        assert cases["disease_name"].tolist() == ["Leishmaniasis", "Leptospirosis"]
        assert cases["year"].tolist() == [2024, 2024]
        assert pd.isna(cases["case_count"].iloc[1])

    def test_year_column_wins(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text("NOMBRE,SE,N,ANO\nLeishmaniasis,1,5,2022\n")
        assert load_cases(path, default_year=2024)["year"].tolist() == [2022]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_cases(tmp_path / "nope.csv", default_year=2024)

    def test_missing_column(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text("NOMBRE,N\nLeishmaniasis,5\n")
        with pytest.raises(KeyError):
            load_cases(path, default_year=2024)

    def test_blank_disease_name_is_dropped(self, tmp_path):
        path = tmp_path / "cases.csv"
        path.write_text("NOMBRE,SE,N\nLeishmaniasis,1,5\n,1,3\n")
        cases = load_cases(path, default_year=2024)
        assert cases["disease_name"].tolist() == ["Leishmaniasis"]
        assert "Nan" not in set(cases["disease_name"])
