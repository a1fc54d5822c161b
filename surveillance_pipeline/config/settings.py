import os
import logging

# ---------------------- Paths ---------------------- #

PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROJECT_ROOT = os.path.dirname(PACKAGE_ROOT)

DATA_DIR = os.getenv("SURVEILLANCE_DATA_DIR", os.path.join(PROJECT_ROOT, "data_raw"))
CASES_FILE = os.getenv("SURVEILLANCE_CASES_FILE", os.path.join(DATA_DIR, "casos_semanales.csv"))
CLIMATE_FILE = os.getenv("SURVEILLANCE_CLIMATE_FILE", os.path.join(DATA_DIR, "clima_calidad_aire.csv"))

# ---------------------- Source columns ---------------------- #

CASES_COLUMNS = {
    "NOMBRE": "disease_name",
    "SE": "epidemiological_week",
    "N": "case_count",
}
CASES_YEAR_COLUMN = "ANO"

CLIMATE_COLUMNS = {
    "ccpp_ubigeo": "location_id",
    "day": "date",
    "variable": "variable_name",
    "value": "value",
}

# ---------------------- Fixed enumerations ---------------------- #

LOCATION_ID = os.getenv("SURVEILLANCE_LOCATION_ID", "1000000000")
# Unset means "the year of the date the pipeline runs for"
CLIMATE_YEAR = os.getenv("SURVEILLANCE_CLIMATE_YEAR")
if CLIMATE_YEAR:
    CLIMATE_YEAR = int(CLIMATE_YEAR)
else:
    CLIMATE_YEAR = None

# Disease counts that share the climate feed are not climate variables
EXCLUDED_VARIABLES = frozenset({"dengue", "leptospirosis", "malaria"})

CLIMATE_VARIABLE_LABELS = {
    "high_temp": "Temperatura máxima (°C)",
    "low_temp": "Temperatura mínima (°C)",
    "out_humm": "Humedad relativa exterior (%)",
    "p_10_0_um": "Material particulado PM10 (µg/m³)",
    "p_2_5_um": "Material particulado PM2.5 (µg/m³)",
    "rain": "Precipitación (mm)",
    "rain_rate": "Intensidad de lluvia (mm/h)",
    "temp_out": "Temperatura exterior (°C)",
    "wind_speed": "Velocidad del viento (m/s)",
}

# Stands in for a variable tag lost during the join
ABSENT_VARIABLE = "<absent>"

CHART_KINDS = ("line", "bar")
AGGREGATIONS = ("total", "cumulative")

# ---------------------- Logging ---------------------- #

LOG_LEVEL = os.getenv("SURVEILLANCE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(level=None):
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
