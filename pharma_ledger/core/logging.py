import logging
import sys

from pythonjsonlogger import jsonlogger

from pharma_ledger.core.config import Settings


class LedgerContextFilter(logging.Filter):
    """
    Stamps every record with the service name and a request_id field, so
    ledger lines emitted outside a request still share one JSON shape.
    """

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        if not hasattr(record, "request_id"):
            record.request_id = None
        return True


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(LedgerContextFilter(settings.app_name))
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service)s %(request_id)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger", "asctime": "ts"},
        )
    )
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(level)
    logging.getLogger("uvicorn.error").setLevel(level)
    # SQL echo only when explicitly debugging
    logging.getLogger("sqlalchemy.engine").setLevel(logging.DEBUG if level == logging.DEBUG else logging.WARNING)
