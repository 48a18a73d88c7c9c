import logging
import math
import numbers
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

logger = logging.getLogger(__name__)

# ============================================================
# Constants & Baselines
# ============================================================

BASELINE_TEMP_F = 75.0            # no temperature adjustment at 75°F
TEMP_STEP_F = 10.0
TEMP_COEFFICIENT = 0.0075         # fraction of distance per 10°F
ELEVATION_COEFFICIENT = 0.000012  # fraction of distance per foot (~6% at 5,000 ft)
TAILWIND_FACTOR = 0.5             # tailwind helps half as much as headwind hurts
BASE_RUNOUT_YARDS = 12.0          # average iron, sea level, normal conditions

REQUIRED_FIELDS = (
    "rangefinder_distance",
    "temperature_fahrenheit",
    "elevation_feet",
    "wind_speed_mph",
    "wind_direction",
    "lie_quality",
    "surface_moisture",
    "turf_firmness",
    "landing_slope",
)

# field, low, high, label, out-of-range message
NUMERIC_DOMAINS = (
    ("rangefinder_distance", 0, 300, "Rangefinder distance",
     "Rangefinder distance must be 0-300 yards"),
    ("temperature_fahrenheit", -50, 120, "Temperature",
     "Temperature must be -50 to 120°F"),
    ("elevation_feet", -300, 15000, "Elevation",
     "Elevation must be -300 to 15,000 feet"),
    ("wind_speed_mph", 0, 100, "Wind speed",
     "Wind speed must be 0-100 mph"),
)


class LieFactors(NamedTuple):
    carry_factor: float
    spin_factor: float


def _key(label):
    """Normalize a categorical label: 'Flyer Rough', 'flyer_rough' -> 'flyerrough'."""
    return "".join(ch for ch in str(label or "").lower() if ch.isalnum())


# Lie quality -> carry / spin. Less spin = more roll.
LIE_FACTORS = MappingProxyType({
    "tee":            LieFactors(1.00, 1.00),
    "perfectfairway": LieFactors(1.00, 1.00),
    "normalfairway":  LieFactors(1.00, 1.00),
    "firstcut":       LieFactors(0.97, 1.05),
    "flyerrough":     LieFactors(1.05, 0.70),
    "heavyrough":     LieFactors(0.85, 1.20),
})
DEFAULT_LIE = "normalfairway"

MOISTURE_FACTORS = MappingProxyType({
    "dry":  1.00,
    "damp": 0.97,
    "wet":  0.94,
})

FIRMNESS_FACTORS = MappingProxyType({
    "soft":   0.80,   # less roll
    "normal": 1.00,
    "firm":   1.15,
    "baked":  1.30,   # much more roll
})

SLOPE_FACTORS = MappingProxyType({
    "uphill":   0.85,
    "flat":     1.00,
    "downhill": 1.20,
})

HEADWIND = "headwind"
TAILWIND = "tailwind"
CROSSWIND = "crosswind"
CALM = "calm"

WIND_DIRECTIONS = MappingProxyType({
    "headwind": HEADWIND,
    "straightinheadwind": HEADWIND,
    "into": HEADWIND,
    "tailwind": TAILWIND,
    "straightouttailwind": TAILWIND,
    "down": TAILWIND,
    "downwind": TAILWIND,
    "crosswind": CROSSWIND,
    "cross": CROSSWIND,
    "calm": CALM,
    "calmnowind": CALM,
    "none": CALM,
    "nowind": CALM,
})


# ============================================================
# Errors
# ============================================================

class DistanceError(Exception):
    """Base class for estimator failures."""


class ValidationError(DistanceError):
    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class CalculationError(DistanceError):
    pass


# ============================================================
# Records
# ============================================================

@dataclass(frozen=True)
class ShotInputs:
    rangefinder_distance: int
    temperature_fahrenheit: int
    elevation_feet: int
    wind_speed_mph: int
    wind_direction: str
    lie_quality: str
    surface_moisture: str
    turf_firmness: str
    landing_slope: str

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class Breakdown:
    baseline: int
    after_temperature: int
    after_elevation: int
    after_wind: int
    after_lie: int
    temp_adjustment_percent: float
    elevation_adjustment_percent: float
    wind_adjustment_yards: int
    lie_adjustment_percent: float
    runout_base_yards: float
    runout_yards: int
    moisture_factor: float
    firmness_factor: float
    slope_factor: float
    spin_factor: float


@dataclass(frozen=True)
class DistanceResult:
    adjusted_distance: Optional[int] = None
    carry_distance: Optional[int] = None
    runout_distance: Optional[int] = None
    breakdown: Optional[Breakdown] = None
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, message: str) -> "DistanceResult":
        return cls(error=message)

    def as_dict(self):
        return asdict(self)


# ============================================================
# Utility functions
# ============================================================

def round_half_away(value: float, digits: int = 0):
    """Round to nearest, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    scale = 10 ** digits
    rounded = math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale
    if digits == 0:
        return int(rounded)
    return rounded


def _is_blank(value):
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _lookup(table, label, kind, default=1.0):
    key = _key(label)
    if key in table:
        return table[key]
    logger.warning("Unrecognized %s %r; using neutral factor", kind, label)
    return default


# ============================================================
# Adjustment formulas
# ============================================================

def temperature_adjustment(temp_f: float) -> float:
    """
    Fractional carry change from air temperature.

    Cold air is denser: roughly 0.75% of distance per 10°F, zero at 75°F.
    """
    return (temp_f - BASELINE_TEMP_F) / TEMP_STEP_F * TEMP_COEFFICIENT


def elevation_adjustment(elevation_ft: float) -> float:
    """Fractional carry change from altitude (5,000 ft -> 0.06)."""
    return elevation_ft * ELEVATION_COEFFICIENT


def wind_adjustment(wind_speed_mph: float, wind_direction: str) -> float:
    """Into hurts the full wind speed in yards, downwind helps half. Cross is ignored."""
    direction = WIND_DIRECTIONS.get(_key(wind_direction))
    if direction is None:
        logger.warning("Unrecognized wind direction %r; no wind adjustment", wind_direction)
        return 0.0
    if direction == HEADWIND:
        return -float(wind_speed_mph)
    if direction == TAILWIND:
        return wind_speed_mph * TAILWIND_FACTOR
    return 0.0


def lie_factors(lie_quality: str) -> LieFactors:
    return _lookup(LIE_FACTORS, lie_quality, "lie", default=LIE_FACTORS[DEFAULT_LIE])


def runout_distance(surface_moisture, turf_firmness, landing_slope, spin_factor):
    """
    Roll after landing, starting from the fixed base runout.

    Returns (runout_yards, moisture, firmness, slope). Runout does not depend
    on carry; lie only reaches it through spin (more spin, less roll).
    """
    moisture = _lookup(MOISTURE_FACTORS, surface_moisture, "surface moisture")
    firmness = _lookup(FIRMNESS_FACTORS, turf_firmness, "turf firmness")
    slope = _lookup(SLOPE_FACTORS, landing_slope, "landing slope")

    runout = BASE_RUNOUT_YARDS
    runout *= moisture
    runout *= firmness
    runout *= slope
    runout *= 1.0 / spin_factor
    return runout, moisture, firmness, slope


# ============================================================
# Validation
# ============================================================

def validate_inputs(inputs: Mapping) -> None:
    """Raise ValidationError for the first missing or out-of-range field."""
    for field in REQUIRED_FIELDS:
        if _is_blank(inputs.get(field)):
            raise ValidationError(f"Missing required field: {field}", field=field)

    for field, low, high, label, message in NUMERIC_DOMAINS:
        value = inputs[field]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValidationError(f"{label} must be a number", field=field)
        # NaN fails both comparisons
        if not low <= value <= high:
            raise ValidationError(message, field=field)


# ============================================================
# Main calculation
# ============================================================

def _calculate(inputs: Mapping) -> DistanceResult:
    distance = inputs["rangefinder_distance"]

    # 1) Temperature (multiplicative)
    temp_adj = temperature_adjustment(inputs["temperature_fahrenheit"])
    carry = distance * (1 + temp_adj)
    after_temperature = carry

    # 2) Elevation, as a share of the ORIGINAL distance (not compounded)
    elev_adj = elevation_adjustment(inputs["elevation_feet"])
    carry += distance * elev_adj
    after_elevation = carry

    # 3) Wind (additive yards)
    wind_adj = wind_adjustment(inputs["wind_speed_mph"], inputs["wind_direction"])
    carry += wind_adj
    after_wind = carry

    # 4) Lie & spin (carry only)
    lie = lie_factors(inputs["lie_quality"])
    carry *= lie.carry_factor

    # 5) Runout
    runout, moisture, firmness, slope = runout_distance(
        inputs["surface_moisture"],
        inputs["turf_firmness"],
        inputs["landing_slope"],
        lie.spin_factor,
    )

    # 6) Total
    total = carry + runout
    if not math.isfinite(total):
        raise CalculationError(f"non-finite distance {total!r}")

    breakdown = Breakdown(
        baseline=distance,
        after_temperature=round_half_away(after_temperature),
        after_elevation=round_half_away(after_elevation),
        after_wind=round_half_away(after_wind),
        after_lie=round_half_away(carry),
        temp_adjustment_percent=round_half_away(temp_adj * 100, 1),
        elevation_adjustment_percent=round_half_away(elev_adj * 100, 1),
        wind_adjustment_yards=round_half_away(wind_adj),
        lie_adjustment_percent=round_half_away((lie.carry_factor - 1) * 100, 1),
        runout_base_yards=BASE_RUNOUT_YARDS,
        runout_yards=round_half_away(runout),
        moisture_factor=moisture,
        firmness_factor=firmness,
        slope_factor=slope,
        spin_factor=lie.spin_factor,
    )

    return DistanceResult(
        adjusted_distance=round_half_away(total),
        carry_distance=round_half_away(carry),
        runout_distance=round_half_away(runout),
        breakdown=breakdown,
    )


def estimate(inputs) -> DistanceResult:
    """
    Estimate adjusted distance (carry + runout) for one shot.

    Steps:
      0) Validate all nine fields (presence, then numeric ranges).
      1) Temperature, 2) elevation, 3) wind, 4) lie & spin on carry.
      5) Runout from moisture, firmness, slope and spin.
      6) Round and assemble the breakdown.

    Never raises for bad input or arithmetic faults: both come back as a
    DistanceResult with `error` set and no distance fields.
    """
    if isinstance(inputs, ShotInputs):
        inputs = inputs.as_dict()

    try:
        validate_inputs(inputs)
    except ValidationError as exc:
        logger.info("Rejected inputs (%s): %s", exc.field, exc)
        return DistanceResult.failed(str(exc))

    try:
        result = _calculate(inputs)
    except (ArithmeticError, ValueError, TypeError, CalculationError) as exc:
        logger.exception("Distance calculation failed")
        return DistanceResult.failed(f"Calculation error: {exc}")

    logger.debug(
        "Estimated %s yds -> %s (carry %s, runout %s)",
        inputs["rangefinder_distance"],
        result.adjusted_distance,
        result.carry_distance,
        result.runout_distance,
    )
    return result
