import logging
import sys
import json
import re
from typing import Any, Dict, Optional
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from marketplace.config.settings import config_settings
from marketplace.common.constants import request_id_ctx

ENV = getattr(config_settings, "ENV", "dev").lower()

# attributes every LogRecord carries ,anything else on the record came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# payout and payment references never leave the process in clear text
SENSITIVE_PATTERNS = (
    "password", "secret", "token", "authorization", "api_key",
    "bank_account", "ifsc", "upi_id",
)
_SENSITIVE_RE = [
    (re.compile(rf'("{p}"\s*:\s*")[^"]+(")', re.IGNORECASE), r'\1[REDACTED]\2') for p in SENSITIVE_PATTERNS
] + [
    (re.compile(rf'({p}\s*[=:\s]\s*)[\w\-\./]+', re.IGNORECASE), r'\1[REDACTED]') for p in SENSITIVE_PATTERNS
]

# extra fields shown only partially outside dev
MASKED_FIELDS = ("user_public_id", "buyer_email", "business_email", "business_phone")

_DEV_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s:%(funcName)s:%(lineno)d | %(message)s"


def sanitize_message_text(msg: str) -> str:
    """Redact `key=value` and `"key": "value"` pairs of sensitive keys (best-effort)."""
    for pattern, repl in _SENSITIVE_RE:
        msg = pattern.sub(repl, msg)
    return msg


def mask_value(val: str) -> str:
    if "@" in val:
        local, _, domain = val.partition("@")
        return f"{local[:2]}***@{domain}"
    if len(val) > 12:
        return val[:8] + "..." + val[-4:]
    return val[:4] + "..."


class JSONFormatter(logging.Formatter):
    """One json object per line ,request id and `extra` fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "event": sanitize_message_text(record.getMessage()),
            "function": record.funcName,
            "line": record.lineno,
            "env": ENV,
            "service": config_settings.SERVICE_NAME,
        }

        rid = request_id_ctx.get()
        if rid:
            payload["request_id"] = rid

        for key, val in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key in MASKED_FIELDS and val is not None:
                val = mask_value(str(val))
            payload[key] = val

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class SecurityFilter(logging.Filter):
    """Redacts the rendered message before it reaches a non-json handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = sanitize_message_text(record.getMessage())
        record.args = ()
        return True


def _level() -> int:
    if config_settings.LOG_LEVEL:
        return logging.getLevelName(config_settings.LOG_LEVEL.upper())
    return logging.INFO if ENV in ("prod", "staging") else logging.DEBUG


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if ENV == "dev":
        handler.setFormatter(logging.Formatter(_DEV_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        handler.setFormatter(JSONFormatter())
        handler.addFilter(SecurityFilter())
    return handler


# log calls only enqueue ,the listener thread does the formatting and the writes
_queue_listener: Optional[QueueListener] = None


def setup_logging():

    global _queue_listener

    stop_logging()

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    q: Queue = Queue(-1)
    root.setLevel(_level())
    root.addHandler(QueueHandler(q))

    _queue_listener = QueueListener(q, _console_handler(), respect_handler_level=True)
    _queue_listener.start()

    logging.getLogger("uvicorn.access").setLevel(logging.INFO if ENV == "dev" else logging.WARNING)
    # statements are logged by the storage error path ,not by the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("marketplace.app")


def stop_logging():
    global _queue_listener
    if _queue_listener is not None:
        _queue_listener.stop()
        _queue_listener = None


class ContextLogger:
    """Logger that stamps the current request id onto every record."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, msg: str, *args, **kwargs):
        extra = dict(kwargs.pop("extra", None) or {})
        rid = request_id_ctx.get()
        if rid:
            extra.setdefault("request_id", rid)
        kwargs["extra"] = extra
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str = "marketplace.app") -> ContextLogger:
    return ContextLogger(name)
