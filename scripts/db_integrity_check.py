import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.db import SOURCES, check_source


def main():
    problems = []
    for source in SOURCES:
        problems.extend(check_source(source))
    if problems:
        for problem in problems:
            print(problem)
        raise SystemExit("Source check failed.")
    print("Source databases OK.")


if __name__ == "__main__":
    main()
