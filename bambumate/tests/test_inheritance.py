from __future__ import annotations

import pytest

from bambumate.errors import CircularInheritance, DepthExceeded, ParentNotFound, ResolutionError
from bambumate.profiles import Profile, ProfileRegistry, is_fully_flattened, is_nil_value, resolve_inheritance


def _linked(count: int) -> list[Profile]:
    """``level0`` inherits ``level1`` ... up to a root with no parent."""
    profiles = []
    for index in range(count):
        data = {"name": f"level{index}", "nozzle_temperature": [str(200 + index)] * 2}
        if index + 1 < count:
            data["inherits"] = f"level{index + 1}"
        profiles.append(Profile(data))
    return profiles


def test_flattened_profile_is_returned_unchanged() -> None:
    profile = Profile(
        {
            "name": "My PLA",
            "inherits": "",
            "filament_id": "P123",
            "nozzle_temperature": ["215", "215"],
            "compatible_printers": ["Bambu Lab P1S 0.4 nozzle"],
            "version": "1.9.0.21",
        }
    )
    assert is_fully_flattened(profile)
    resolved = resolve_inheritance(profile, ProfileRegistry())
    assert resolved == profile
    assert list(resolved.keys()) == list(profile.keys())


def test_circular_inheritance_names_repeated_profile() -> None:
    registry = ProfileRegistry.from_profiles(
        [
            Profile({"name": "A", "inherits": "B"}),
            Profile({"name": "B", "inherits": "A"}),
        ]
    )
    with pytest.raises(CircularInheritance) as excinfo:
        resolve_inheritance(registry.get_by_name("A"), registry)
    assert excinfo.value.name == "A"
    assert "'A'" in str(excinfo.value)


def test_self_inheritance_is_circular() -> None:
    profile = Profile({"name": "Loop", "inherits": "Loop"})
    registry = ProfileRegistry.from_profiles([profile])
    with pytest.raises(CircularInheritance):
        resolve_inheritance(profile, registry)


def test_chain_of_eleven_profiles_exceeds_depth() -> None:
    profiles = _linked(11)
    registry = ProfileRegistry.from_profiles(profiles)
    with pytest.raises(DepthExceeded) as excinfo:
        resolve_inheritance(profiles[0], registry)
    assert excinfo.value.limit == 10
    assert "maximum depth of 10" in str(excinfo.value)


def test_chain_of_ten_profiles_resolves() -> None:
    profiles = _linked(10)
    registry = ProfileRegistry.from_profiles(profiles)
    resolved = resolve_inheritance(profiles[0], registry)
    assert resolved.get("nozzle_temperature") == ("200", "200")


def test_custom_depth_limit() -> None:
    profiles = _linked(3)
    registry = ProfileRegistry.from_profiles(profiles)
    with pytest.raises(DepthExceeded):
        resolve_inheritance(profiles[0], registry, max_depth=2)


def test_nil_leaf_keeps_ancestor_value() -> None:
    parent = Profile({"name": "Base", "nozzle_temperature": "190"})
    leaf = Profile({"name": "Leaf", "inherits": "Base", "nozzle_temperature": ["nil", "nil"]})
    resolved = resolve_inheritance(leaf, ProfileRegistry.from_profiles([parent]))
    assert resolved.get_raw("nozzle_temperature") == "190"


def test_nil_in_middle_ancestor_keeps_root_value(registry: ProfileRegistry) -> None:
    resolved = resolve_inheritance(registry.get_by_name("Generic PLA @base"), registry)
    # fdm_filament_pla sets retraction to nil; fdm_filament_common supplies 0.8.
    assert resolved.get_raw("filament_retraction_length") == ["0.8", "0.8"]
    assert resolved.get_raw("nozzle_temperature") == ["220", "220"]
    assert resolved.get_raw("fan_min_speed") == ["100", "100"]
    assert resolved.get_raw("filament_flow_ratio") == ["0.98", "0.98"]


def test_skip_listed_fields_are_not_inherited(registry: ProfileRegistry) -> None:
    leaf = Profile({"name": "My PLA", "inherits": "Generic PLA @base", "from": "User"})
    resolved = resolve_inheritance(leaf, registry)
    assert "filament_id" not in resolved
    assert "setting_id" not in resolved
    assert "description" not in resolved
    assert "compatible_printers" not in resolved
    assert "instantiation" not in resolved
    assert "type" not in resolved
    assert resolved.name == "My PLA"
    assert resolved.inherits == "Generic PLA @base"
    assert resolved.get_raw("from") == "User"


def test_leaf_identity_fields_are_kept(registry: ProfileRegistry) -> None:
    resolved = resolve_inheritance(registry.get_by_name("Generic PLA @base"), registry)
    assert resolved.filament_id == "GFL99"
    assert resolved.setting_id == "GFSL99"
    assert resolved.name == "Generic PLA @base"


def test_leaf_values_win_over_ancestors(registry: ProfileRegistry) -> None:
    leaf = Profile(
        {
            "name": "My PLA",
            "inherits": "Generic PLA @base",
            "nozzle_temperature": ["215", "215"],
            "filament_flow_ratio": ["0.95", "0.95"],
        }
    )
    resolved = resolve_inheritance(leaf, registry)
    assert resolved.nozzle_temperature == ["215", "215"]
    assert resolved.get_float("filament_flow_ratio") == pytest.approx(0.95)
    assert resolved.filament_type == "PLA"


def test_missing_parent_reports_referencing_profile(registry: ProfileRegistry) -> None:
    with pytest.raises(ParentNotFound) as excinfo:
        resolve_inheritance(registry.get_by_name("Orphan PLA"), registry)
    assert excinfo.value.name == "Discontinued PLA @base"
    assert excinfo.value.referenced_by == "Orphan PLA"
    assert isinstance(excinfo.value, ResolutionError)


def test_inputs_are_not_modified(registry: ProfileRegistry) -> None:
    leaf = Profile({"name": "My PLA", "inherits": "Generic PLA @base", "nozzle_temperature": ["nil", "nil"]})
    leaf_before = leaf.to_dict()
    parent_before = registry.get_by_name("fdm_filament_common").to_dict()

    resolved = resolve_inheritance(leaf, registry)
    resolved.get_raw("filament_type").append("PETG")

    assert leaf.to_dict() == leaf_before
    assert registry.get_by_name("fdm_filament_common").to_dict() == parent_before


@pytest.mark.parametrize(
    "value, expected",
    [
        ("nil", True),
        (["nil", "nil"], True),
        (["nil"], True),
        ([], False),
        (["nil", "220"], False),
        ("220", False),
        (None, False),
    ],
)
def test_is_nil_value(value, expected) -> None:
    assert is_nil_value(value) is expected
