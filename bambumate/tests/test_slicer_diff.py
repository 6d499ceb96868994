from __future__ import annotations

import pytest

from bambumate.models.api import Recommendation
from bambumate.profiles import Profile
from bambumate.slicer import apply, format_value, profile_diff


def _rec(parameter: str, value: float, priority: int = 1) -> Recommendation:
    return Recommendation(
        defect="stringing",
        parameter=parameter,
        current_value=0.0,
        recommended_value=value,
        priority=priority,
        rationale="",
    )


@pytest.mark.parametrize(
    "parameter, value, expected",
    [
        ("nozzle_temperature", 224.6, "225"),
        ("fan_min_speed", 45.5, "46"),
        ("filament_retraction_length", 1.46, "1.5"),
        ("filament_flow_ratio", 1.06, "1.06"),
        ("pressure_advance", 0.02, "0.020"),
        ("filament_max_volumetric_speed", 16.8, "16.8"),
    ],
)
def test_format_value(parameter: str, value: float, expected: str) -> None:
    assert format_value(parameter, value) == expected


def test_apply_keeps_value_shapes() -> None:
    profile = Profile(
        {
            "name": "My PLA",
            "nozzle_temperature": ["215", "215"],
            "filament_flow_ratio": "0.98",
            "filament_notes": "keep me",
        }
    )
    updated = apply(
        [
            _rec("nozzle_temperature", 225.0),
            _rec("filament_flow_ratio", 1.06),
            _rec("pressure_advance", 0.02, priority=3),
        ],
        profile,
    )
    assert updated.get_raw("nozzle_temperature") == ["225", "225"]
    assert updated.get_raw("filament_flow_ratio") == "1.06"
    assert updated.get_raw("pressure_advance") == ["0.020", "0.020"]
    assert updated.get_raw("filament_notes") == "keep me"
    assert profile.get_raw("nozzle_temperature") == ["215", "215"]


def test_apply_uses_first_recommendation_per_parameter() -> None:
    profile = Profile({"nozzle_temperature": ["215", "215"]})
    updated = apply([_rec("nozzle_temperature", 225.0), _rec("nozzle_temperature", 208.0, priority=2)], profile)
    assert updated.nozzle_temperature == ["225", "225"]


def test_profile_diff_lists_changed_fields_only() -> None:
    base = Profile({"name": "My PLA", "nozzle_temperature": ["215", "215"], "fan_min_speed": ["35", "35"]})
    updated = apply([_rec("nozzle_temperature", 225.0), _rec("pressure_advance", 0.02)], base)
    assert profile_diff(base, updated) == {
        "nozzle_temperature": (["215", "215"], ["225", "225"]),
        "pressure_advance": (None, ["0.020", "0.020"]),
    }
    assert profile_diff(base, base.copy()) == {}
