"""Check a defect rules file for schema and consistency problems."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bambumate.errors import RulesConfigError
from bambumate.rules import check_rules, default_rules, load_rules


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "path",
        nargs="?",
        help="Rules TOML file (default: the packaged rules)",
    )
    args = parser.parse_args()

    try:
        config = load_rules(Path(args.path)) if args.path else default_rules()
    except RulesConfigError as exc:
        raise SystemExit(f"Invalid: {exc}") from exc

    problems = check_rules(config)
    for problem in problems:
        print("Invalid:", problem)
    print(
        "OK"
        if not problems
        else f"{len(problems)} problems in {len(config.rules)} rules"
    )
    if problems:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
