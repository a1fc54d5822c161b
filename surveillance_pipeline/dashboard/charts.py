import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from surveillance_pipeline.config.settings import CLIMATE_VARIABLE_LABELS

CASE_COLOR = "#E53935"
FIT_COLOR = "#1976D2"
BAND_COLOR = "rgba(25, 118, 210, 0.18)"

AXIS_STYLE = dict(
    showgrid=False,
    showline=True,
    mirror=True,
    linecolor="#333333",
    linewidth=1,
    zeroline=False,
)


def _style(fig, height=450):
    fig.update_xaxes(**AXIS_STYLE)
    fig.update_yaxes(**AXIS_STYLE)
    fig.update_layout(
        template="simple_white",
        margin=dict(l=60, r=20, t=50, b=50),
        height=height,
    )
    return fig


def case_evolution_chart(weekly: pd.DataFrame, params) -> go.Figure:
    """Line or bar chart of cases per epidemiological week."""
    y_title = "Casos acumulados" if params.aggregation == "cumulative" else "Casos"
    labels = {"epidemiological_week": "Semana epidemiológica", "case_count": y_title}

    if params.chart_kind == "bar":
        fig = px.bar(weekly, x="epidemiological_week", y="case_count", labels=labels,
                     color_discrete_sequence=[CASE_COLOR])
    else:
        fig = px.line(weekly, x="epidemiological_week", y="case_count", labels=labels,
                      markers=True, color_discrete_sequence=[CASE_COLOR])

    fig.update_layout(title=f"{params.disease}: evolución de casos")
    fig.update_xaxes(dtick=5, tick0=0)
    return _style(fig)


def correlation_chart(result, params) -> go.Figure:
    """Scatter of climate mean vs cases, with OLS line, band and Pearson r."""
    x_title = CLIMATE_VARIABLE_LABELS[params.climate_variable]
    points = result.points

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=points["mean_value"],
        y=points["case_count"],
        mode="markers",
        name="Semanas",
        marker=dict(color=CASE_COLOR, size=9, opacity=0.8),
        customdata=points[["year", "epidemiological_week"]].to_numpy(),
        hovertemplate="Año %{customdata[0]}, SE %{customdata[1]}<br>"
                      "x=%{x:.2f}<br>casos=%{y}<extra></extra>",
    ))

    if result.sufficient:
        fit = result.fit
        fig.add_trace(go.Scatter(
            x=pd.concat([fit["x"], fit["x"][::-1]]),
            y=pd.concat([fit["upper"], fit["lower"][::-1]]),
            fill="toself",
            fillcolor=BAND_COLOR,
            line=dict(width=0),
            hoverinfo="skip",
            name="IC 95%",
        ))
        fig.add_trace(go.Scatter(
            x=fit["x"],
            y=fit["fitted"],
            mode="lines",
            line=dict(color=FIT_COLOR, width=2),
            name="Regresión lineal",
        ))
        fig.add_annotation(
            xref="paper", yref="paper", x=0.02, y=0.98,
            xanchor="left", yanchor="top", showarrow=False,
            text=f"r = {result.pearson_r:.3f}, p = {result.p_value:.3g}",
            bgcolor="rgba(255,255,255,0.8)",
        )

    fig.update_layout(
        title=f"{params.disease} vs {x_title}",
        xaxis_title=x_title,
        yaxis_title="Casos",
    )
    return _style(fig)
