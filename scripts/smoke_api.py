import argparse
import datetime as dt
import json
import os
import subprocess
import sys
import time
import urllib.error
import urllib.request


def get_json(base: str, path: str):
    try:
        with urllib.request.urlopen(f"{base}{path}", timeout=5) as resp:
            return resp.status, json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        return exc.code, {}


def wait_for_health(base: str, timeout: float = 15):
    deadline = time.time() + timeout
    last_err = None
    while time.time() < deadline:
        try:
            status, body = get_json(base, "/api/health")
            if status == 200:
                return body
        except Exception as exc:
            last_err = exc
            time.sleep(0.5)
    raise SystemExit(f"Smoke failed: {last_err}")


def check_views(base: str, day: str) -> None:
    _, timeline = get_json(base, f"/api/day/timeline?date={day}")
    if len(timeline.get("slots", [])) != 96:
        raise SystemExit(f"Smoke failed: timeline for {day} has {len(timeline.get('slots', []))} slots")
    for path in (f"/api/day?date={day}", f"/api/month?month={day[:7]}", f"/api/year?year={day[:4]}"):
        status, _ = get_json(base, path)
        if status != 200:
            raise SystemExit(f"Smoke failed: {path} returned {status}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Start the API and check health plus the day/month/year views.")
    parser.add_argument("--date", default=dt.date.today().isoformat(), help="Day to request (YYYY-MM-DD).")
    args = parser.parse_args()

    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    venv_py = os.path.join(root, ".venv", "bin", "python")
    py = venv_py if os.path.exists(venv_py) else sys.executable
    env = os.environ.copy()
    env.setdefault("LIFELOG_API_PORT", "8001")
    port = env["LIFELOG_API_PORT"]

    proc = subprocess.Popen(
        [py, "-m", "uvicorn", "apps.api.main:app", "--port", port],
        cwd=root,
        env=env,
    )

    try:
        base = f"http://127.0.0.1:{port}"
        health = wait_for_health(base)
        missing = [name for name, present in health.get("sources", {}).items() if not present]
        if missing:
            print(f"Sources missing: {', '.join(missing)}")
        check_views(base, args.date)
        print("Smoke OK")
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()


if __name__ == "__main__":
    main()
