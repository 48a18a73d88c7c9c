import pytest

import distance_engine as de


def _inputs(**overrides):
    base = {
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
    base.update(overrides)
    return base


@pytest.mark.parametrize("distance", [0, 1, 75, 149, 150, 233, 300])
@pytest.mark.parametrize("direction", ["Calm / No Wind", "None", "Crosswind", "Headwind"])
def test_neutral_conditions_add_only_base_runout(distance, direction):
    # zero wind speed makes every direction neutral
    res = de.estimate(_inputs(rangefinder_distance=distance, wind_direction=direction))
    assert res.adjusted_distance == distance + 12


def test_non_decreasing_in_temperature():
    totals = [
        de.estimate(_inputs(temperature_fahrenheit=t)).adjusted_distance
        for t in range(-50, 121)
    ]
    assert all(a <= b for a, b in zip(totals, totals[1:]))
    assert totals[0] < totals[-1]


def test_non_decreasing_in_elevation():
    totals = [
        de.estimate(_inputs(elevation_feet=e)).adjusted_distance
        for e in range(-300, 15001, 50)
    ]
    assert all(a <= b for a, b in zip(totals, totals[1:]))
    assert totals[0] < totals[-1]


@pytest.mark.parametrize("speed", [0, 1, 7, 10, 25, 100])
def test_tailwind_helps_half_what_headwind_hurts(speed):
    head = de.wind_adjustment(speed, "Headwind")
    tail = de.wind_adjustment(speed, "Tailwind")

    assert head == -speed
    assert tail == -0.5 * head


def test_crosswind_and_unknown_direction_have_no_effect():
    assert de.wind_adjustment(20, "Crosswind") == 0.0
    assert de.wind_adjustment(20, "Gusting") == 0.0
    assert de.wind_adjustment(20, "Calm / No Wind") == 0.0


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Headwind", -12.0),
        ("Straight In (Headwind)", -12.0),
        ("into", -12.0),
        ("TAILWIND", 6.0),
        ("Straight Out (Tailwind)", 6.0),
        ("down", 6.0),
    ],
)
def test_wind_direction_aliases(label, expected):
    assert de.wind_adjustment(12, label) == expected


def test_estimate_is_idempotent():
    inputs = _inputs(
        temperature_fahrenheit=48,
        elevation_feet=2200,
        wind_speed_mph=13,
        wind_direction="Tailwind",
        lie_quality="First Cut",
        surface_moisture="Damp",
        turf_firmness="Firm",
        landing_slope="Uphill",
    )
    snapshot = dict(inputs)

    first = de.estimate(inputs)
    second = de.estimate(inputs)

    assert first == second
    assert inputs == snapshot


def test_result_is_immutable():
    res = de.estimate(_inputs())

    with pytest.raises(Exception):
        res.adjusted_distance = 999
    with pytest.raises(Exception):
        res.breakdown.baseline = 0


def test_typed_inputs_match_mapping_inputs():
    mapping = _inputs(temperature_fahrenheit=90, lie_quality="Flyer Rough")
    typed = de.ShotInputs(**mapping)

    assert de.estimate(typed) == de.estimate(mapping)


def test_elevation_is_not_compounded_with_temperature():
    hot_high = de.estimate(_inputs(temperature_fahrenheit=120, elevation_feet=15000))
    # 150 * 1.03375 + 150 * 0.18 = 182.06, not 150 * 1.03375 * 1.18 = 182.97
    assert hot_high.carry_distance == 182


def test_round_half_away_from_zero():
    assert de.round_half_away(2.5) == 3
    assert de.round_half_away(-2.5) == -3
    assert de.round_half_away(2.4) == 2
    assert de.round_half_away(-1.25, 1) == -1.3
    assert de.round_half_away(6.336, 1) == 6.3
    assert isinstance(de.round_half_away(10.0), int)
