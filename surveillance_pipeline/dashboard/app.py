import os
import sys
from dataclasses import asdict
from datetime import date

import streamlit as st

# ---------------------- Paths ---------------------- #
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from surveillance_pipeline.config.settings import (
    AGGREGATIONS,
    CASES_FILE,
    CHART_KINDS,
    CLIMATE_FILE,
    CLIMATE_VARIABLE_LABELS,
    CLIMATE_YEAR,
    configure_logging,
)
from surveillance_pipeline.dashboard.charts import case_evolution_chart, correlation_chart
from surveillance_pipeline.dashboard.views import (
    CaseEvolutionParams,
    CorrelationParams,
    ViewStore,
    disease_options,
    recompute_case_evolution,
    recompute_correlation,
    week_bounds,
)
from surveillance_pipeline.scripts.build_dataset import build_unified_tables
from surveillance_pipeline.scripts.epi_week import week_of

configure_logging()

# ------------------ Streamlit UI Config ------------------ #
st.set_page_config(
    page_title="Vigilancia Leishmaniasis / Leptospirosis y Clima",
    page_icon="🦠",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
html, body, .stApp {
    background-color: #F5F7FB !important;
    color: #111111 !important;
}
section[data-testid="stSidebar"] {
    background-color: #FFFFFF !important;
    border-right: 1px solid #E0E0E0 !important;
}
.metric-card {
    padding: 20px;
    border-radius: 14px;
    background: #FFFFFF;
    box-shadow: 0 4px 14px rgba(0,0,0,0.07);
    border: 1px solid #E0E0E0;
}
h1, h2, h3, h4 {
    font-weight: 700 !important;
    color: #111111 !important;
}
</style>
""", unsafe_allow_html=True)


# ------------------- Load Data ------------------- #
@st.cache_resource(show_spinner="Cargando datos...")
def load_tables(cases_file, climate_file, today):
    return build_unified_tables(cases_file, climate_file, today, year=CLIMATE_YEAR)


def metric_card(title, value, caption):
    st.markdown(f"""
    <div class="metric-card">
        <h3>{title}</h3>
        <h2>{value}</h2>
        <p style="color:#555555;">{caption}</p>
    </div>
    """, unsafe_allow_html=True)


today = date.today()

try:
    tables = load_tables(CASES_FILE, CLIMATE_FILE, today)
except (FileNotFoundError, KeyError, ValueError) as e:
    st.error(f"No se pudieron cargar los datos: {e}")
    st.stop()

if tables.cases.empty:
    st.error("La tabla de casos está vacía hasta la semana actual. Revise el archivo de casos.")
    st.stop()


# ------------------- Shared view component ------------------- #
def render_view(key, table, recompute, params, render):
    """Keep one store per page and redraw its chart from the latest result."""
    store = st.session_state.get(key)
    if store is None or store.table is not table:
        store = ViewStore(table=table, recompute=recompute, params=params)
        st.session_state[key] = store
    else:
        store.update(**asdict(params))

    st.plotly_chart(render(store.data, store.params), use_container_width=True)
    return store


def download_subset(label, frame, file_name):
    st.download_button(label, frame.to_csv(index=False), file_name=file_name)


# ------------------- Page: case evolution ------------------- #
def case_evolution_page():
    st.markdown("## Evolución de casos por semana epidemiológica")
    cases = tables.cases

    disease = st.sidebar.selectbox("Enfermedad", disease_options(cases), key="evo_disease")
    min_week, max_week = week_bounds(cases)
    if min_week == max_week:
        # A slider needs two distinct bounds
        week_range = (min_week, min_week)
        st.sidebar.caption(f"Solo hay datos de la semana epidemiológica {min_week}.")
    else:
        week_range = st.sidebar.slider(
            "Semanas epidemiológicas",
            min_value=min_week,
            max_value=max_week,
            value=(min_week, max_week),
            key="evo_weeks",
        )
    chart_kind = st.sidebar.radio(
        "Tipo de gráfico", CHART_KINDS,
        format_func={"line": "Líneas", "bar": "Barras"}.get, key="evo_kind",
    )
    aggregation = st.sidebar.radio(
        "Agregación", AGGREGATIONS,
        format_func={"total": "Total semanal", "cumulative": "Acumulado"}.get, key="evo_agg",
    )

    params = CaseEvolutionParams(
        disease=disease,
        week_range=tuple(week_range),
        chart_kind=chart_kind,
        aggregation=aggregation,
    )
    store = render_view("case_evolution", cases, recompute_case_evolution, params, case_evolution_chart)
    weekly = store.data

    if weekly.empty:
        st.info("No hay casos registrados para esta enfermedad en las semanas seleccionadas.")
        return

    col1, col2 = st.columns(2)
    with col1:
        total = int(weekly["case_count"].iloc[-1]) if aggregation == "cumulative" \
            else int(weekly["case_count"].sum())
        metric_card("Casos en el rango", total, f"Semanas {week_range[0]} a {week_range[1]}")
    with col2:
        if aggregation == "total":
            peak = weekly.loc[weekly["case_count"].idxmax()]
            metric_card("Semana pico", int(peak["epidemiological_week"]),
                        f"{int(peak['case_count'])} casos")
        else:
            metric_card("Última semana", int(weekly["epidemiological_week"].iloc[-1]),
                        "Fin del acumulado")

    st.dataframe(weekly, hide_index=True, use_container_width=True)
    download_subset("Descargar CSV", weekly, file_name=f"casos_{disease.lower()}.csv")


# ------------------- Page: case vs climate ------------------- #
def correlation_page():
    st.markdown("## Casos vs variables climáticas")
    merged = tables.merged

    disease = st.sidebar.selectbox("Enfermedad", disease_options(tables.cases), key="cor_disease")
    variable = st.sidebar.selectbox(
        "Variable climática",
        list(CLIMATE_VARIABLE_LABELS),
        format_func=CLIMATE_VARIABLE_LABELS.get,
        key="cor_variable",
    )

    params = CorrelationParams(disease=disease, climate_variable=variable)
    store = render_view("correlation", merged, recompute_correlation, params, correlation_chart)
    result = store.data

    if not result.sufficient:
        st.warning(
            f"Datos insuficientes: {len(result.points)} semana(s) con valores válidos. "
            "Se necesitan al menos 2 puntos distintos para la regresión y la correlación."
        )
        return

    col1, col2 = st.columns(2)
    with col1:
        metric_card("Correlación de Pearson", f"{result.pearson_r:.3f}",
                    f"{len(result.points)} semanas pareadas")
    with col2:
        metric_card("Valor p", f"{result.p_value:.3g}", "Prueba bilateral, H0: r = 0")

    download_subset("Descargar CSV", result.points,
                    file_name=f"{disease.lower()}_{variable}.csv")


# ------------------- Layout ------------------- #
st.title("Vigilancia epidemiológica y clima")
st.write(f"Hoy: **{today}** (semana epidemiológica {week_of(today)})")
st.markdown("---")

PAGES = {
    "Evolución de casos": case_evolution_page,
    "Casos vs clima": correlation_page,
}

st.sidebar.header("Vista")
page = st.sidebar.radio("Página", list(PAGES), label_visibility="collapsed", key="page")
PAGES[page]()
