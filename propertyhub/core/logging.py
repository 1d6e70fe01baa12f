"""Logging configuration for the listing service and client."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
  """Configure the root logger with a single stdout handler.

  ``format_type`` is ``"standard"`` or ``"json"``.
  """
  log_level = getattr(logging, level.upper(), logging.INFO)

  if format_type == "json":
    formatter: logging.Formatter = JsonFormatter()
  else:
    formatter = logging.Formatter(
      fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
      datefmt="%Y-%m-%d %H:%M:%S",
    )

  root_logger = logging.getLogger()
  root_logger.setLevel(log_level)
  for handler in root_logger.handlers[:]:
    root_logger.removeHandler(handler)

  console_handler = logging.StreamHandler(sys.stdout)
  console_handler.setLevel(log_level)
  console_handler.setFormatter(formatter)
  root_logger.addHandler(console_handler)

  logging.getLogger("propertyhub").setLevel(log_level)

  # httpx logs every request at INFO
  logging.getLogger("httpx").setLevel(logging.WARNING)
  logging.getLogger("httpcore").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
  def format(self, record: logging.LogRecord) -> str:
    log_data: dict[str, Any] = {
      "timestamp": datetime.now(timezone.utc).isoformat(),
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
    }
    if record.exc_info:
      log_data["exception"] = self.formatException(record.exc_info)
    if hasattr(record, "extra"):
      log_data.update(record.extra)
    return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
  return logging.getLogger(name)
