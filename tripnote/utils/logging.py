"""
Structured Logging

Every Tripnote log line is JSON with the same queryable fields:
module, action, plus the context of the call (model, attempt, latency_ms,
status_code, issues, days). Note text and provider bodies go through
truncate() first. Set LOG_FORMAT=pretty for readable local output.

USAGE
=====
from tripnote.utils.logging import log, get_logger, configure_logging

logger = get_logger()
log.info(logger, "llm.client", "request_start", "Calling LLM provider",
         model=model, url=url)

log.error(logger, "llm.client", "server_error", "LLM provider returned HTTP 502",
          status_code=502)

ACTION NAMING
=============
Consistent suffixes for queryable actions:
  *_start    : beginning of an operation
  *_done     : successful completion
  *_failed   : error/failure
  *_retry    : retrying after a recoverable failure
  *_repaired : a malformed model output was normalized

ACTIONS BY MODULE
=================
  llm.client   request_start, request_done, request_failed, config_failed,
               auth_failed, bad_request, rate_limited, server_error,
               protocol_error (response without a usable tool call)
  llm.repair   parse_failed, document_repaired
  llm.invoker  validation_failed, validation_retry, generate_done,
               generate_failed
  travel_plan  generate_start, generate_done
  plans        note_too_short, generate_failed
  api          app_ready
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """JSON formatter, with a pretty mode for local development."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        # Structured log (emitted via StructuredLogger)
        if getattr(record, "_structured", False):
            data = {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": record._module,
                "action": record._action,
                "msg": msg,
            }
            for key, value in record._extra.items():
                if value is not None:
                    data[key] = value

            if self.pretty:
                return self._pretty(data)
            return json.dumps(data, default=str, separators=(",", ":"))

        # Third-party log: wrap in JSON so collectors can still parse it
        if self.pretty:
            return msg
        return json.dumps(
            {
                "ts": _timestamp(),
                "level": record.levelname,
                "module": record.name,
                "action": "log",
                "msg": msg,
            },
            default=str,
            separators=(",", ":"),
        )

    def _pretty(self, data: dict) -> str:
        """Human-readable format for development."""
        ts = data["ts"][11:23]
        lvl = data["level"][0]
        mod = data["module"].upper()[:10].ljust(10)
        act = data["action"]
        msg = data["msg"]

        skip = {"ts", "level", "module", "action", "msg"}
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in skip)

        return f"{ts} {lvl} [{mod}] {act}: {msg}" + (f" | {ctx}" if ctx else "")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredLogger:
    """
    Centralized structured logging.

    All methods accept a stdlib logging.Logger, module name, action name,
    message, and arbitrary context fields.
    """

    def _log(
        self,
        logger: logging.Logger,
        level: int,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        extra = {
            "_structured": True,
            "_module": module,
            "_action": action,
            "_extra": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    def info(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        self._log(logger, logging.INFO, module, action, msg, **kwargs)

    def warning(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        self._log(logger, logging.WARNING, module, action, msg, **kwargs)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        self._log(
            logger, logging.ERROR, module, action, msg,
            error=error, error_type=error_type, **kwargs,
        )

    def debug(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        self._log(logger, logging.DEBUG, module, action, msg, **kwargs)


# Singleton instance: import this everywhere
log = StructuredLogger()

_default_logger = None


def get_logger() -> logging.Logger:
    """Get the shared application logger."""
    global _default_logger
    if _default_logger is None:
        _default_logger = logging.getLogger("tripnote")
    return _default_logger


def truncate(text: Optional[str], limit: int = 200) -> Optional[str]:
    """Shorten free text (notes, provider bodies) before it goes into a log line."""
    if text is None or len(text) <= limit:
        return text
    return text[:limit] + f"...(+{len(text) - limit} chars)"


def configure_logging() -> None:
    """Configure root logger with structured formatter. Call once at startup.

    Reads from environment:
      LOG_FORMAT: "json" (default) or "pretty" (for development)
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    # HTTP clients
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # Server
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
