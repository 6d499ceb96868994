"""Evaluate defects against a Bambu Studio filament profile and optionally apply the fixes."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bambumate.errors import ResolutionError
from bambumate.materials import MaterialType
from bambumate.models.api import DetectedDefect
from bambumate.profiles import (
    ProfileRegistry,
    backup_profile,
    detect_material_type,
    extract_profile_values,
    format_change,
    is_fully_flattened,
    parameter_display_info,
    read_profile,
    resolve_inheritance,
    write_profile_atomic,
)
from bambumate.rules import RuleEngine, default_rules, load_rules
from bambumate.slicer import apply, profile_diff


def _parse_defect(value: str) -> DetectedDefect:
    defect_type, _, rest = value.partition(":")
    severity, _, confidence = rest.partition(":")
    try:
        return DetectedDefect(
            defect_type=defect_type,
            severity=float(severity or 0.5),
            confidence=float(confidence or 1.0),
        )
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected defect[:severity[:confidence]], got {value!r}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("profile", type=Path, help="Filament profile JSON to tune")
    parser.add_argument(
        "--defect",
        dest="defects",
        action="append",
        type=_parse_defect,
        default=[],
        help="Observed defect as type[:severity[:confidence]], e.g. stringing:0.7 (repeatable)",
    )
    parser.add_argument(
        "--profiles-dir",
        type=Path,
        help="Directory of parent profiles used to resolve 'inherits'",
    )
    parser.add_argument("--material", help="Override the material detected from the profile")
    parser.add_argument("--rules", type=Path, help="Custom rules TOML (default: packaged rules)")
    parser.add_argument(
        "--write",
        action="store_true",
        help="Back up the profile and write the recommended values into it",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    profile = read_profile(args.profile)
    resolved = profile
    if not is_fully_flattened(profile):
        registry = ProfileRegistry.from_directory(args.profiles_dir) if args.profiles_dir else ProfileRegistry()
        try:
            resolved = resolve_inheritance(profile, registry)
        except ResolutionError as exc:
            raise SystemExit(str(exc)) from exc

    material = MaterialType.classify(args.material or detect_material_type(resolved))
    engine = RuleEngine(load_rules(args.rules) if args.rules else default_rules())
    result = engine.evaluate(args.defects, extract_profile_values(resolved), material)

    changes: List[dict] = []
    for rec in result.recommendations:
        label, unit = parameter_display_info(rec.parameter)
        changes.append(
            {
                "defect": rec.defect,
                "parameter": label,
                "change": format_change(rec.current_value, rec.recommended_value, unit),
                "priority": rec.priority,
                "clamped": rec.was_clamped,
                "rationale": rec.rationale,
            }
        )

    updated = apply(result.recommendations, profile)
    output = {
        "profile": profile.name,
        "material": str(material),
        "recommendations": changes,
        "conflicts": [conflict.model_dump() for conflict in result.conflicts],
        "diff": {key: {"before": before, "after": after} for key, (before, after) in profile_diff(profile, updated).items()},
    }

    if args.write and result.recommendations:
        output["backup"] = str(backup_profile(args.profile))
        write_profile_atomic(updated, args.profile)

    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
