import logging

import numpy as np
import pandas as pd

import distance_engine as de

logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Form defaults & options
# ------------------------------------------------------------

DEFAULT_INPUTS = {
    "rangefinder_distance": 150,
    "temperature_fahrenheit": 75,
    "elevation_feet": 0,
    "wind_speed_mph": 0,
    "wind_direction": "Calm / No Wind",
    "lie_quality": "Normal Fairway",
    "surface_moisture": "Dry",
    "turf_firmness": "Normal",
    "landing_slope": "Flat",
}

# Used when a numeric box can't be parsed (empty, letters, ...)
NUMERIC_FALLBACKS = {
    "rangefinder_distance": 0,
    "temperature_fahrenheit": 75,
    "elevation_feet": 0,
    "wind_speed_mph": 0,
}

WIND_DIRECTION_OPTIONS = [
    "Calm / No Wind",
    "Straight In (Headwind)",
    "Straight Out (Tailwind)",
    "Crosswind",
]
LIE_OPTIONS = [
    "Tee",
    "Perfect Fairway",
    "Normal Fairway",
    "First Cut",
    "Flyer Rough",
    "Heavy Rough",
]
MOISTURE_OPTIONS = ["Dry", "Damp", "Wet"]
FIRMNESS_OPTIONS = ["Soft", "Normal", "Firm", "Baked"]
SLOPE_OPTIONS = ["Uphill", "Flat", "Downhill"]

# Breakdown percentages are shown as yards using this multiplier
PERCENT_TO_YARDS_DISPLAY = 1.5

BREAKDOWN_COLUMNS = ["Factor", "Adjustment", "Yards"]


# ------------------------------------------------------------
# Parsing
# ------------------------------------------------------------

def parse_numeric(field, raw):
    """
    Integer value of a numeric form box, or the field's fallback.

    Mirrors an integer parse of the leading number: '12.7' -> 12, '' -> fallback.
    """
    fallback = NUMERIC_FALLBACKS[field]
    if raw is None or isinstance(raw, bool):
        return fallback
    if isinstance(raw, (int, np.integer)):
        return int(raw)
    try:
        value = float(str(raw).strip())
    except ValueError:
        return fallback
    if not np.isfinite(value):
        return fallback
    return int(value)


def build_inputs(raw_values=None):
    """Merge raw widget values over the defaults and parse the numeric fields."""
    inputs = dict(DEFAULT_INPUTS)
    inputs.update(raw_values or {})
    for field in NUMERIC_FALLBACKS:
        inputs[field] = parse_numeric(field, inputs.get(field))
    return inputs


def step_distance(current, delta):
    """+/- buttons next to the yardage box. Never goes below zero."""
    return max(0, parse_numeric("rangefinder_distance", current) + delta)


# ------------------------------------------------------------
# Display helpers
# ------------------------------------------------------------

def _signed(yards):
    return f"+{yards}" if yards > 0 else f"{yards}"


def percent_to_display_yards(percent):
    return de.round_half_away(percent * PERCENT_TO_YARDS_DISPLAY)


def display_rows(result):
    """Rows for the result panel (Factor, Adjustment text, Yards)."""
    if result is None or not result.valid or result.breakdown is None:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)

    b = result.breakdown
    temp_yds = percent_to_display_yards(b.temp_adjustment_percent)
    elev_yds = percent_to_display_yards(b.elevation_adjustment_percent)
    lie_yds = percent_to_display_yards(b.lie_adjustment_percent)

    rows = [
        ("Temperature", f"{_signed(temp_yds)} yds", temp_yds),
        ("Elevation", f"{_signed(elev_yds)} yds", elev_yds),
        ("Wind", f"{_signed(b.wind_adjustment_yards)} yds", b.wind_adjustment_yards),
        ("Lie & Spin", f"{_signed(lie_yds)} yds", lie_yds),
        ("Runout", f"+{result.runout_distance} yds", result.runout_distance),
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def carry_progression(result):
    """
    Running distance after each stage for the waterfall chart.

    The last stage adds runout on top of the final carry, so its Yards is the
    adjusted distance. Delta is the change from the previous stage (the first
    row's Delta is the rangefinder distance itself).
    """
    if result is None or not result.valid:
        return pd.DataFrame(columns=["Stage", "Yards", "Delta"])

    b = result.breakdown
    stages = [
        ("Rangefinder", b.baseline),
        ("Temperature", b.after_temperature),
        ("Elevation", b.after_elevation),
        ("Wind", b.after_wind),
        ("Lie & Spin", b.after_lie),
        ("Runout", result.adjusted_distance),
    ]
    df = pd.DataFrame(stages, columns=["Stage", "Yards"])
    df["Delta"] = df["Yards"].diff().fillna(df["Yards"])
    return df


def sweep(inputs, field, values):
    """
    Adjusted distance across a range of one numeric field, others fixed.

    Values that fail validation are left out of the frame.
    """
    if field not in NUMERIC_FALLBACKS:
        raise ValueError(f"Cannot sweep non-numeric field: {field}")

    rows = []
    for value in np.asarray(values):
        trial = dict(inputs)
        trial[field] = int(value)
        res = de.estimate(trial)
        if not res.valid:
            continue
        rows.append(
            {
                field: int(value),
                "Adjusted (yds)": res.adjusted_distance,
                "Carry (yds)": res.carry_distance,
                "Runout (yds)": res.runout_distance,
            }
        )
    return pd.DataFrame(rows, columns=[field, "Adjusted (yds)", "Carry (yds)", "Runout (yds)"])


# ------------------------------------------------------------
# Verification scenarios
# ------------------------------------------------------------

def _scenario(**overrides):
    base = {
        "rangefinder_distance": 150,
        "temperature_fahrenheit": 75,
        "elevation_feet": 0,
        "wind_speed_mph": 0,
        "wind_direction": "None",
        "lie_quality": "Normal Fairway",
        "surface_moisture": "Normal",
        "turf_firmness": "Normal",
        "landing_slope": "Flat",
    }
    base.update(overrides)
    return base


# name, inputs, expected approximate adjusted distance
VERIFICATION_SCENARIOS = [
    ("Baseline - No Adjustments", _scenario(), 162),
    ("Cold Weather (-20°F)", _scenario(temperature_fahrenheit=55), 158),
    ("Hot Weather (+20°F)", _scenario(temperature_fahrenheit=95), 166),
    ("High Elevation (Denver - 5,280 ft)", _scenario(elevation_feet=5280), 171),
    ("Headwind (10 mph)",
     _scenario(wind_speed_mph=10, wind_direction="Straight In (Headwind)"), 152),
    ("Tailwind (10 mph)",
     _scenario(wind_speed_mph=10, wind_direction="Straight Out (Tailwind)"), 167),
    ("Flyer Lie (Rough with Less Spin)", _scenario(lie_quality="Flyer Rough"), 173),
    ("Heavy Rough (More Spin)", _scenario(lie_quality="Heavy Rough"), 140),
    ("Firm Ground (More Runout)", _scenario(turf_firmness="Firm"), 164),
    ("Downhill Slope (More Runout)", _scenario(landing_slope="Downhill"), 164),
    ("Worst Case - Cold, Headwind, Heavy Rough",
     _scenario(
         temperature_fahrenheit=55,
         wind_speed_mph=10,
         wind_direction="Straight In (Headwind)",
         lie_quality="Heavy Rough",
         surface_moisture="Wet",
         turf_firmness="Soft",
         landing_slope="Uphill",
     ), 118),
    ("Best Case - Hot, High Elevation, Tailwind, Flyer",
     _scenario(
         temperature_fahrenheit=95,
         elevation_feet=5000,
         wind_speed_mph=10,
         wind_direction="Straight Out (Tailwind)",
         lie_quality="Flyer Rough",
         surface_moisture="Dry",
         turf_firmness="Baked",
         landing_slope="Downhill",
     ), 201),
]


def run_verification(tolerance=5, scenarios=None):
    """
    Run the named scenarios through the engine.

    A scenario passes when the adjusted distance is within `tolerance`
    yards of its expected value.
    """
    scenarios = VERIFICATION_SCENARIOS if scenarios is None else scenarios

    rows = []
    for name, inputs, expected in scenarios:
        res = de.estimate(inputs)
        actual = res.adjusted_distance
        diff = None if actual is None else abs(actual - expected)
        rows.append(
            {
                "Scenario": name,
                "Expected (yds)": expected,
                "Actual (yds)": actual,
                "Difference": diff,
                "Passed": diff is not None and diff <= tolerance,
            }
        )

    df = pd.DataFrame(rows)
    failed = df.loc[~df["Passed"], "Scenario"].tolist()
    logger.info(
        "Verification: %d/%d scenarios within ±%s yds",
        len(df) - len(failed),
        len(df),
        tolerance,
    )
    for name in failed:
        logger.warning("Verification scenario failed: %s", name)
    return df
