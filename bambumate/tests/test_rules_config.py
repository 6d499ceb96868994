from __future__ import annotations

import pytest

from bambumate.errors import RulesConfigError
from bambumate.rules import Operation, check_rules, default_rules, load_rules, parse_rules

MINIMAL = """
[defects.stringing]
display_name = "Stringing"
description = "Strands between parts"

[[rules]]
defect = "stringing"

[[rules.adjustments]]
parameter = "filament_retraction_length"
operation = "increase"
amount = 1.0
priority = 1
"""


def test_default_rules_cover_seven_defects() -> None:
    rules = default_rules()
    assert set(rules.defects) == {
        "stringing",
        "warping",
        "layer_adhesion",
        "elephants_foot",
        "under_extrusion",
        "over_extrusion",
        "z_banding",
    }
    assert rules.defects["elephants_foot"].display_name == "Elephant's Foot"
    assert rules.conflicts


def test_default_rules_are_consistent() -> None:
    assert check_rules(default_rules()) == []


def test_minimal_rules_parse_with_defaults() -> None:
    rules = parse_rules(MINIMAL)
    adjustment = rules.rules[0].adjustments[0]
    assert adjustment.operation is Operation.INCREASE
    assert adjustment.unit == ""
    assert adjustment.rationale == ""
    assert rules.rules[0].severity_min is None
    assert rules.defects["stringing"].severity_range == (0.0, 1.0)
    assert rules.conflicts == ()


def test_unknown_keys_are_ignored() -> None:
    rules = parse_rules(MINIMAL + '\n[meta]\nauthor = "someone"\n')
    assert len(rules.rules) == 1


def test_invalid_toml_raises() -> None:
    with pytest.raises(RulesConfigError) as excinfo:
        parse_rules("[defects\n", source="broken.toml")
    assert "broken.toml" in str(excinfo.value)


@pytest.mark.parametrize(
    "old, new",
    [
        ('operation = "increase"', 'operation = "multiply"'),
        ("priority = 1", "priority = 0"),
        ('defect = "stringing"', 'severity_min = 2.0\ndefect = "stringing"'),
    ],
)
def test_schema_violations_raise(old: str, new: str) -> None:
    with pytest.raises(RulesConfigError):
        parse_rules(MINIMAL.replace(old, new))


def test_conflict_needs_parameters() -> None:
    text = MINIMAL + '\n[[conflicts]]\ndescription = "empty"\nparameters = []\n'
    with pytest.raises(RulesConfigError):
        parse_rules(text)


def test_check_rules_reports_problems() -> None:
    text = (
        MINIMAL.replace('[[rules]]\ndefect = "stringing"', '[[rules]]\ndefect = "blobs"')
        + '\n[[conflicts]]\nname = "cooling"\ndescription = "fans"\nparameters = ["fan_min_speed"]\n'
    )
    problems = check_rules(parse_rules(text))
    assert any("unknown defect 'blobs'" in problem for problem in problems)
    assert any("fan_min_speed" in problem for problem in problems)


def test_load_rules_from_file(tmp_path) -> None:
    path = tmp_path / "rules.toml"
    path.write_text(MINIMAL, encoding="utf-8")
    assert load_rules(path).defects["stringing"].display_name == "Stringing"


def test_load_rules_missing_file(tmp_path) -> None:
    with pytest.raises(RulesConfigError):
        load_rules(tmp_path / "absent.toml")
