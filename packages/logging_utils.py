import logging
import os

from .request_context import request_id_var

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s request_id=%(request_id)s %(message)s"


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class SafeFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get() or "-"
        return super().format(record)


def setup_logging() -> None:
    level = os.getenv("LIFELOG_LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    # Every LogRecord carries request_id so third-party formatters never fail.
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get() or "-"
        return record

    logging.setLogRecordFactory(record_factory)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    root = logging.getLogger()
    root.addFilter(ContextFilter())

    formatter = SafeFormatter(LOG_FORMAT)
    for handler in root.handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())
