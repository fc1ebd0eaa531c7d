import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

VENV_DIR = ROOT / ".venv"
BIN_DIR = VENV_DIR / ("Scripts" if sys.platform.startswith("win") else "bin")
PY = BIN_DIR / ("python.exe" if sys.platform.startswith("win") else "python")


def run(cmd):
    subprocess.run(cmd, check=True, cwd=str(ROOT))


def write_demo_data() -> None:
    """Fill LIFELOG_DB_DIR with the test fixture databases (January 2024)."""
    from packages.config import DB_DIR
    from tests.fixtures.build_fixture_db import build_fixture_dbs

    existing = sorted(p.name for p in DB_DIR.glob("*.sqlite")) if DB_DIR.exists() else []
    if existing:
        print(f"Skipping demo data, {DB_DIR} already holds: {', '.join(existing)}")
        return
    for source, path in build_fixture_dbs(DB_DIR).items():
        print(f"  {source}: {path}")


def main():
    parser = argparse.ArgumentParser(description="Create .venv and install lifelog-dashboard with test extras.")
    parser.add_argument("--demo-data", action="store_true", help="Write fixture databases into an empty LIFELOG_DB_DIR.")
    args = parser.parse_args()

    if not VENV_DIR.exists():
        run([sys.executable, "-m", "venv", str(VENV_DIR)])

    if not PY.exists():
        raise SystemExit("Virtualenv python not found. Remove .venv and re-run setup.")

    run([str(PY), "-m", "pip", "install", "--upgrade", "pip"])
    run([str(PY), "-m", "pip", "install", "-e", ".[test]"])

    if args.demo_data:
        write_demo_data()

    print("Setup complete.")
    print("Next:")
    print(f"  source {VENV_DIR}/bin/activate")
    print("  python3 scripts/db_integrity_check.py")
    print("  python3 scripts/run_api.py")
    if args.demo_data:
        print("  python3 scripts/smoke_api.py --date 2024-01-15")


if __name__ == "__main__":
    main()
