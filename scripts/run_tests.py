import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Start a real uvicorn process on a fixed port.
E2E_MODULES = ("tests/test_e2e_http.py", "tests/test_e2e_metrics.py")


def venv_python() -> str:
    venv = ROOT / ".venv" / ("Scripts" if sys.platform.startswith("win") else "bin") / (
        "python.exe" if sys.platform.startswith("win") else "python"
    )
    return str(venv) if venv.exists() else sys.executable


def build_command(args: argparse.Namespace, pytest_args: list) -> list:
    cmd = [venv_python(), "-m", "pytest", "-q"]
    if args.no_e2e:
        for module in E2E_MODULES:
            cmd.extend(["--ignore", module])
    if args.keyword:
        cmd.extend(["-k", args.keyword])
    return cmd + pytest_args


def main():
    parser = argparse.ArgumentParser(description="Run the lifelog-dashboard test suite.")
    parser.add_argument("--no-e2e", action="store_true", help="Skip the tests that start a live uvicorn server.")
    parser.add_argument("-k", dest="keyword", help="Only run tests matching this pytest keyword expression.")
    args, pytest_args = parser.parse_known_args()
    result = subprocess.run(build_command(args, pytest_args), cwd=str(ROOT))
    raise SystemExit(result.returncode)


if __name__ == "__main__":
    main()
