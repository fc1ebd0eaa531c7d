import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.error_reporting import init_error_reporting
from packages.logging_utils import setup_logging
from services.views.periods import InvalidPeriodError, parse_month

logger = logging.getLogger("lifelog.api")


def main() -> int:
    setup_logging()
    if not init_error_reporting("api", enable_fastapi=True):
        print("Error reporting is disabled (set LIFELOG_SENTRY_DSN and install sentry-sdk).")
        return 1

    import sentry_sdk

    # An ERROR record goes through the logging integration the API relies on.
    try:
        parse_month("2024-13")
    except InvalidPeriodError:
        logger.exception("sentry_test_event month=2024-13")
    sentry_sdk.flush(timeout=5)
    print("sent")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
