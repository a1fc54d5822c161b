import logging
from collections import namedtuple
from datetime import date

from surveillance_pipeline.config.settings import (
    CASES_FILE,
    CLIMATE_FILE,
    CLIMATE_YEAR,
    EXCLUDED_VARIABLES,
    LOCATION_ID,
    configure_logging,
)
from surveillance_pipeline.scripts.aggregate_climate import aggregate_climate, load_climate
from surveillance_pipeline.scripts.combine_cases_climate import (
    join_climate_cases,
    unmatched_climate_rows,
)
from surveillance_pipeline.scripts.epi_week import week_of
from surveillance_pipeline.scripts.prepare_cases import load_cases, prepare_cases

logger = logging.getLogger(__name__)

UnifiedTables = namedtuple("UnifiedTables", ["cases", "merged"])


def build_unified_tables(cases_file, climate_file, today,
                         location_id=LOCATION_ID, year=None):
    """Load both sources and align them on (year, epidemiological week).

    `today` drives the case cut-off week and, unless `year` is given, the
    climate year too. Nothing here reads the clock, so the same inputs always
    give the same tables.
    """
    if year is None:
        year = today.year

    raw_cases = load_cases(cases_file, default_year=today.year)
    cases = prepare_cases(raw_cases, today)

    observations = load_climate(climate_file)
    weekly = aggregate_climate(observations, location_id, year, EXCLUDED_VARIABLES)

    merged = join_climate_cases(weekly, cases)
    logger.info("Unified table: %d cases, %d merged rows", len(cases), len(merged))
    return UnifiedTables(cases=cases, merged=merged)


def main():
    configure_logging()
    today = date.today()

    print(f"Loading cases from {CASES_FILE} ...")
    print(f"Loading climate from {CLIMATE_FILE} ...")
    tables = build_unified_tables(CASES_FILE, CLIMATE_FILE, today, year=CLIMATE_YEAR)

    print(f"\nToday: {today}  (epidemiological week {week_of(today)})")
    print("Cases shape:", tables.cases.shape)
    print("Merged shape:", tables.merged.shape)

    print("\n=== Cases per disease (to date) ===")
    totals = tables.cases.groupby("disease_name")["case_count"].sum()
    for disease, total in totals.items():
        print(f"  {disease:<20} {int(total)}")

    orphans = unmatched_climate_rows(tables.merged)
    if orphans.empty:
        print("\n✅ Every climate week matched at least one case record.")
    else:
        print(f"\n⚠️ {len(orphans)} climate rows have no matching case record:")
        print(
            orphans[["year", "epidemiological_week", "variable_name", "mean_value"]]
            .to_string(index=False)
        )


if __name__ == "__main__":
    main()
