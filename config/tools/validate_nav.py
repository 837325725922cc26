# config/tools/validate_nav.py

import sys           # for exit codes
from pprint import pprint  # for structured printing

# make src discoverable if running as a script
from pathlib import Path
# __file__ is .../config/tools/validate_nav.py
# parents[2] is the project root; append ROOT/src
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT / "src"))

from env.loader import list_profiles, load_nav_profile  # import our loader


def main(argv: list) -> int:
    """Load every profile in nav.yaml, failing fast on the first bad one."""
    path = Path(argv[1]) if len(argv) > 1 else None
    try:
        names = list_profiles(path)
        profiles = [load_nav_profile(name, path) for name in names]
        active = load_nav_profile(path=path)
    except (FileNotFoundError, KeyError, ValueError) as e:
        print("Nav profile validation FAILED:", file=sys.stderr)
        print(repr(e), file=sys.stderr)
        return 1                             # non-zero exit: CI will mark as failed

    print("Nav profile validation OK.")
    print("\nActive profile:", active.name)
    for profile in profiles:
        print(f"\nProfile {profile.name}:")
        pprint(profile)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))  # run main() only when script is executed directly
