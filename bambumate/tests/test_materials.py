from __future__ import annotations

import pytest

from bambumate.materials import (
    FilamentSpecs,
    MaterialFamily,
    MaterialType,
    base_profile_name,
    constraints_for_material,
    validate_specs,
)


@pytest.mark.parametrize(
    "text, family",
    [
        ("PLA", MaterialFamily.PLA),
        ("PolyLite PLA Pro", MaterialFamily.PLA),
        ("pla-cf", MaterialFamily.PLA),
        ("PETG HF", MaterialFamily.PETG),
        ("ASA Aero", MaterialFamily.ASA),
        ("HIPS", MaterialFamily.HIPS),
        ("PVA", MaterialFamily.PVA),
        ("PC-ABS", MaterialFamily.PC),
        ("Polycarbonate", MaterialFamily.PC),
        ("ABS", MaterialFamily.ABS),
        ("TPU 95A", MaterialFamily.TPU),
        ("TPE", MaterialFamily.TPU),
        ("PA6-CF", MaterialFamily.NYLON),
        ("Nylon", MaterialFamily.NYLON),
    ],
)
def test_classify(text: str, family: MaterialFamily) -> None:
    assert MaterialType.classify(text).family is family


def test_unrecognised_material_keeps_text() -> None:
    material = MaterialType.classify("Wood Fill")
    assert material.is_other
    assert material.label == "Wood Fill"
    assert str(material) == "Wood Fill"


def test_known_family_rejects_label() -> None:
    with pytest.raises(ValueError):
        MaterialType(MaterialFamily.PLA, "PLA+")


def test_of_and_str() -> None:
    assert str(MaterialType.of("Nylon")) == "Nylon"
    assert str(MaterialType.of(MaterialFamily.OTHER)) == "Other"
    assert MaterialType.of(MaterialFamily.PETG) == MaterialType.classify("petg")


def test_constraints_table() -> None:
    pla = constraints_for_material(MaterialType.of(MaterialFamily.PLA))
    assert (pla.nozzle_temp_min, pla.nozzle_temp_max) == (180, 235)
    assert (pla.bed_temp_min, pla.bed_temp_max) == (0, 70)
    pc = constraints_for_material(MaterialType.of(MaterialFamily.PC))
    assert pc.nozzle_temp_max == 320
    other = constraints_for_material(MaterialType.other("Wood Fill"))
    assert (other.nozzle_temp_min, other.nozzle_temp_max) == (150, 400)


def test_base_profile_names() -> None:
    assert base_profile_name(MaterialType.classify("PA12")) == "Generic PA"
    assert base_profile_name(MaterialType.classify("PETG")) == "Generic PETG"
    assert base_profile_name(MaterialType.other("Wood Fill")) == "Generic PLA"


def _specs(**overrides) -> FilamentSpecs:
    values = {
        "name": "Overture PLA Matte",
        "brand": "Overture",
        "material": "PLA",
        "nozzle_temp_min": 190,
        "nozzle_temp_max": 220,
        "bed_temp_min": 50,
        "bed_temp_max": 60,
        "retraction_distance_mm": 0.8,
        "retraction_speed_mm_s": 30,
        "fan_speed_percent": 100,
        "diameter_mm": 1.75,
    }
    values.update(overrides)
    return FilamentSpecs(**values)


def test_plausible_specs_have_no_warnings() -> None:
    assert validate_specs(_specs()) == []


def test_nozzle_out_of_range_is_reported() -> None:
    warnings = validate_specs(_specs(nozzle_temp_max=350))
    assert len(warnings) == 1
    assert warnings[0].field == "nozzle_temp_max"
    assert warnings[0].value == "350"
    assert warnings[0].message == "Nozzle temp max 350C out of range for PLA (180-235C)"


def test_other_spec_warnings() -> None:
    warnings = validate_specs(
        _specs(
            bed_temp_max=130,
            retraction_distance_mm=20.0,
            retraction_speed_mm_s=150,
            fan_speed_percent=120,
            diameter_mm=0.5,
        )
    )
    fields = [warning.field for warning in warnings]
    assert fields == [
        "bed_temp_max",
        "retraction_distance_mm",
        "retraction_speed_mm_s",
        "fan_speed_percent",
        "diameter_mm",
    ]
