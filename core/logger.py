import logging
import sys
import json
from datetime import datetime, timezone
from core.config import settings

# attributes passed through `extra=` that end up in structured logs
CONTEXT_FIELDS = ("request_id", "user_id", "method", "path", "status_code", "duration_ms")


class JSONFormatter(logging.Formatter):
    #one JSON object per line, with whatever request context the caller attached
    def format(self, record: logging.LogRecord):
        log_data = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    #development console output, level names colored and the request id appended when present

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord):
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"

        formatted = super().format(record)
        record.levelname = levelname

        request_id = getattr(record, "request_id", None)
        if request_id:
            formatted = f"{formatted} [{request_id[:8]}]"
        return formatted


def setup_logging():
    #configures app logging
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.is_development:
        console_handler.setFormatter(ColoredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%H:%M:%S"))
    else:
        console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    if settings.is_production:
        file_handler = logging.FileHandler("app.log")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    # noisy libraries
    for name, level in (("uvicorn.access", logging.WARNING), ("sqlalchemy.engine", logging.WARNING),
                        ("aiosqlite", logging.WARNING), ("passlib", logging.ERROR)):
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: level={settings.log_level}, environment={settings.environment}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
