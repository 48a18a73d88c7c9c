import distance_engine as de


def _inputs(**overrides):
    base = {
        "rangefinder_distance": 150,
        "temperature_fahrenheit": 75,
        "elevation_feet": 0,
        "wind_speed_mph": 0,
        "wind_direction": "None",
        "lie_quality": "Normal Fairway",
        "surface_moisture": "Dry",
        "turf_firmness": "Normal",
        "landing_slope": "Flat",
    }
    base.update(overrides)
    return base


def test_arithmetic_fault_becomes_calculation_error(monkeypatch):
    monkeypatch.setattr(
        de, "LIE_FACTORS", {"normalfairway": de.LieFactors(1.0, 0.0)}
    )

    res = de.estimate(_inputs())

    assert not res.valid
    assert res.error == "Calculation error: float division by zero"
    assert res.adjusted_distance is None
    assert res.breakdown is None


def test_non_finite_total_becomes_calculation_error(monkeypatch):
    monkeypatch.setattr(de, "BASE_RUNOUT_YARDS", float("inf"))

    res = de.estimate(_inputs())

    assert res.error.startswith("Calculation error: ")
    assert "inf" in res.error
    assert res.carry_distance is None


def test_calculation_error_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(
        de, "LIE_FACTORS", {"normalfairway": de.LieFactors(1.0, 0.0)}
    )

    with caplog.at_level("ERROR", logger="distance_engine"):
        de.estimate(_inputs())

    assert "Distance calculation failed" in caplog.text


def test_error_results_serialize_without_distances():
    res = de.estimate(_inputs(rangefinder_distance=500))
    data = res.as_dict()

    assert data["error"] == "Rangefinder distance must be 0-300 yards"
    assert data["adjusted_distance"] is None
    assert data["breakdown"] is None


def test_valid_results_serialize_nested_breakdown():
    data = de.estimate(_inputs()).as_dict()

    assert data["error"] is None
    assert data["adjusted_distance"] == 162
    assert data["breakdown"]["baseline"] == 150
    assert data["breakdown"]["runout_yards"] == 12
