"""Generate a Bambu Studio user preset from a filament specs JSON file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pydantic import ValidationError

from bambumate.errors import ResolutionError
from bambumate.materials import FilamentSpecs
from bambumate.profiles import ProfileRegistry, generate_profile, write_profile_with_metadata


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("specs", type=Path, help="JSON file with the filament specs")
    parser.add_argument(
        "--profiles-dir",
        type=Path,
        required=True,
        help="Directory of system profiles holding the Generic base presets",
    )
    parser.add_argument("--printer", help="Target printer preset name")
    parser.add_argument("--user-id", default="", help="Bambu account id recorded in the .info file")
    parser.add_argument("--output-dir", type=Path, help="Write the preset and its .info file here")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    try:
        specs = FilamentSpecs.model_validate_json(args.specs.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise SystemExit(f"Invalid specs file {args.specs}: {exc}") from exc

    registry = ProfileRegistry.from_directory(args.profiles_dir)
    try:
        generated = generate_profile(specs, registry, args.printer, user_id=args.user_id)
    except ResolutionError as exc:
        raise SystemExit(str(exc)) from exc

    output = {
        "name": generated.name,
        "filename": generated.filename,
        "fields": generated.profile.field_count,
        "warnings": [warning.message for warning in generated.warnings],
    }
    if args.output_dir:
        json_path = args.output_dir / generated.filename
        info_path = write_profile_with_metadata(generated.profile, json_path, generated.metadata)
        output["written"] = [str(json_path), str(info_path)]

    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
