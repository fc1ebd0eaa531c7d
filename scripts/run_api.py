import argparse
import subprocess
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.config import API_HOST, API_PORT, RUN_MODE
from packages.db import SOURCES, check_source


def venv_python():
    venv = ROOT / ".venv" / ("Scripts" if sys.platform.startswith("win") else "bin") / (
        "python.exe" if sys.platform.startswith("win") else "python"
    )
    return venv if venv.exists() else None


def report_sources() -> None:
    # Missing databases are served as {"db": "missing"}, so they only warn here.
    for source in SOURCES:
        for problem in check_source(source):
            print(f"warning: {problem}")


def main():
    parser = argparse.ArgumentParser(description="Serve the lifelog-dashboard API with uvicorn.")
    parser.add_argument("--host", default=API_HOST, help="Bind address; defaults to LIFELOG_API_HOST.")
    parser.add_argument("--port", type=int, default=API_PORT, help="Port; defaults to LIFELOG_API_PORT.")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload outside prod.")
    args = parser.parse_args()

    report_sources()
    py = venv_python() or sys.executable
    reload_flag = ["--reload"] if RUN_MODE != "prod" and not args.no_reload else []
    subprocess.run(
        [str(py), "-m", "uvicorn", "apps.api.main:app", *reload_flag, "--host", args.host, "--port", str(args.port)],
        check=True,
        cwd=str(ROOT),
    )


if __name__ == "__main__":
    main()
