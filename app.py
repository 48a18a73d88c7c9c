import logging
import os

import altair as alt
import numpy as np
import plotly.graph_objects as go
import streamlit as st

import distance_engine as de  # <-- calculation engine
import form_inputs as fi

logging.basicConfig(
    level=os.getenv("GOLF_CALC_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ------------------------------------------------------------
# Page config
# ------------------------------------------------------------
st.set_page_config(
    page_title="Distance Calculator",
    page_icon="⛳",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# ------------------------------------------------------------
# Session state defaults
# ------------------------------------------------------------

NUMERIC_FIELDS = tuple(fi.NUMERIC_FALLBACKS)


def init_session_state():
    # numeric boxes hold raw text; the engine gets parsed ints
    for k, v in fi.DEFAULT_INPUTS.items():
        if k not in st.session_state:
            st.session_state[k] = str(v) if k in NUMERIC_FIELDS else v


init_session_state()


def _nudge_distance(delta):
    current = st.session_state.get("rangefinder_distance")
    st.session_state.rangefinder_distance = str(fi.step_distance(current, delta))


# ------------------------------------------------------------
# Styling (simple dark-ish theme tweaks)
# ------------------------------------------------------------

st.markdown(
    """
    <style>
    .stApp {
        background-color: #05070b;
    }
    h1, h2, h3, h4, h5, h6 {
        color: #f5f5f5;
    }
    .stMarkdown, .stText, .stCaption, label {
        color: #e6e6e6 !important;
    }
    div[data-baseweb="input"] input {
        background-color: #11151c !important;
        color: #f5f5f5 !important;
    }
    .result-big {
        font-size: 3.2rem;
        font-weight: 700;
        color: #2ecc71;
        line-height: 1.1;
    }
    .result-big .unit {
        font-size: 1.2rem;
        color: #aaaaaa;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

st.title("Distance Calculator")
st.caption("Professional-level precision")

# ------------------------------------------------------------
# True yardage
# ------------------------------------------------------------

st.markdown("**True Yardage**")
col_minus, col_yds, col_plus = st.columns([1, 4, 1])
with col_minus:
    st.button("−", on_click=_nudge_distance, args=(-1,), use_container_width=True)
with col_yds:
    st.text_input(
        "True Yardage",
        key="rangefinder_distance",
        label_visibility="collapsed",
        help="Rangefinder distance to the target (0-300 yards).",
    )
with col_plus:
    st.button("+", on_click=_nudge_distance, args=(1,), use_container_width=True)

# ------------------------------------------------------------
# Environmental factors
# ------------------------------------------------------------

st.subheader("⚙️ Environmental Factors")

st.radio(
    "Wind Direction",
    fi.WIND_DIRECTION_OPTIONS,
    key="wind_direction",
    horizontal=True,
    help="Headwind costs the full wind speed in yards; tailwind adds half.",
)
st.text_input("Wind Speed (mph)", key="wind_speed_mph")

col_t, col_e = st.columns(2)
with col_t:
    st.text_input("Temp (°F)", key="temperature_fahrenheit")
with col_e:
    st.text_input("Elevation (ft)", key="elevation_feet")

# ------------------------------------------------------------
# Lie & spin
# ------------------------------------------------------------

st.subheader("⛳ Lie & Spin")
st.radio("Lie Quality", fi.LIE_OPTIONS, key="lie_quality", horizontal=True)
st.radio("Surface Moisture", fi.MOISTURE_OPTIONS, key="surface_moisture", horizontal=True)

# ------------------------------------------------------------
# Runout
# ------------------------------------------------------------

st.subheader("📍 Runout")
st.radio("Turf Firmness", fi.FIRMNESS_OPTIONS, key="turf_firmness", horizontal=True)
st.radio("Landing Slope", fi.SLOPE_OPTIONS, key="landing_slope", horizontal=True)

# ------------------------------------------------------------
# Calculation (reruns on every widget change)
# ------------------------------------------------------------

inputs = fi.build_inputs({k: st.session_state.get(k) for k in fi.DEFAULT_INPUTS})
result = de.estimate(inputs)


def draw_carry_waterfall(result):
    """Carry stage by stage, then runout, ending at the adjusted distance."""
    prog = fi.carry_progression(result)
    measures = ["absolute"] + ["relative"] * (len(prog) - 1) + ["total"]
    fig = go.Figure(
        go.Waterfall(
            x=list(prog["Stage"]) + ["Total"],
            y=list(prog["Delta"]) + [0],
            measure=measures,
            text=[f"{v:.0f}" for v in prog["Yards"]] + [f"{result.adjusted_distance}"],
            textposition="outside",
            increasing={"marker": {"color": "#2ecc71"}},
            decreasing={"marker": {"color": "#e74c3c"}},
            totals={"marker": {"color": "#3498db"}},
        )
    )
    low = float(prog["Yards"].min())
    fig.update_layout(
        height=320,
        margin=dict(t=30, b=10, l=10, r=10),
        yaxis={"range": [max(0.0, low - 25), float(prog["Yards"].max()) + 15]},
        paper_bgcolor="#05070b",
        plot_bgcolor="#05070b",
        font={"color": "#f5f5f5"},
        showlegend=False,
    )
    st.plotly_chart(fig, use_container_width=True)


def draw_what_if(inputs):
    """Adjusted distance across temperature or elevation, current value marked."""
    field_label = st.radio(
        "What if...",
        ["Temperature", "Elevation"],
        horizontal=True,
    )
    if field_label == "Temperature":
        field, values, title = "temperature_fahrenheit", np.arange(-50, 121, 5), "Temp (°F)"
    else:
        field, values, title = "elevation_feet", np.arange(-300, 15001, 300), "Elevation (ft)"

    df = fi.sweep(inputs, field, values)
    if df.empty:
        st.info("No valid estimates for this range.")
        return

    # plain column names for altair shorthand
    df = df.rename(
        columns={
            field: "value",
            "Adjusted (yds)": "adjusted",
            "Carry (yds)": "carry",
            "Runout (yds)": "runout",
        }
    )

    line = (
        alt.Chart(df)
        .mark_line(color="#3498db", strokeWidth=2)
        .encode(
            x=alt.X("value:Q", title=title),
            y=alt.Y("adjusted:Q", title="Adjusted distance (yds)", scale=alt.Scale(zero=False)),
            tooltip=["value:Q", "adjusted:Q", "carry:Q", "runout:Q"],
        )
    )
    marker_df = df.iloc[(df["value"] - inputs[field]).abs().argsort()[:1]]
    current = (
        alt.Chart(marker_df)
        .mark_point(size=90, color="#f1c40f", filled=True)
        .encode(x="value:Q", y="adjusted:Q")
    )

    chart = (
        alt.layer(line, current)
        .properties(height=260)
        .configure_view(stroke=None, fill="#05070b")
        .configure_axis(labelColor="#f5f5f5", titleColor="#f5f5f5")
    )
    st.altair_chart(chart, use_container_width=True)


# ------------------------------------------------------------
# Result display
# ------------------------------------------------------------

st.markdown("---")

if not result.valid:
    st.error(result.error)
else:
    st.markdown("**Adjusted Distance**")
    st.markdown(
        f'<div class="result-big">{result.adjusted_distance} <span class="unit">yds</span></div>',
        unsafe_allow_html=True,
    )

    c1, c2 = st.columns(2)
    c1.metric("Carry", f"{result.carry_distance} yds")
    c2.metric("Runout", f"{result.runout_distance} yds")

    rows = fi.display_rows(result)
    st.dataframe(
        rows[["Factor", "Adjustment"]],
        use_container_width=True,
        hide_index=True,
    )

    with st.expander("Carry Progression"):
        draw_carry_waterfall(result)

    with st.expander("What-If"):
        draw_what_if(inputs)

with st.expander("Verification Scenarios"):
    st.caption("Named reference shots; a scenario passes within ±5 yds of its expected distance.")
    if st.button("Run scenarios"):
        st.dataframe(fi.run_verification(), use_container_width=True, hide_index=True)
