"""
Structured Logging Configuration

Console lines carry a UTC timestamp, level and logger name, followed by any
diagnosis context passed through `extra=` (engine, rule_id, score, ...):

    [2026-01-01T10:00:00+00:00] INFO     [felineneuro.core.clinical.engine]
        WaterfallEngine: selected | engine=waterfall, rule_id=IVDD, score=360

Gemini API keys are masked before anything is written.
"""
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Keys passed via `extra=` that are rendered after the message, in this order
CONTEXT_FIELDS = ("engine", "rule_id", "score", "confidence", "matches", "iterations")

_API_KEY_PATTERN = re.compile(r"AIza[0-9A-Za-z_\-]{20,}")

# Chatty client libraries used by the chat assistant
_QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "google_genai", "langchain_google_genai")


def mask_secrets(text: str) -> str:
    return _API_KEY_PATTERN.sub("AIza***", text)


class StructuredFormatter(logging.Formatter):
    """Single-line formatter with diagnosis context and secret masking."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    @staticmethod
    def context(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: getattr(record, key)
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        message = mask_secrets(record.getMessage())

        context = self.context(record)
        if context:
            message += " | " + ", ".join(f"{k}={v}" for k, v in context.items())

        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
        else:
            color = reset = ""

        line = f"{color}[{timestamp}] {record.levelname:8} [{record.name}] {message}{reset}"

        if record.exc_info:
            line += f"\n{mask_secrets(self.formatException(record.exc_info))}"

        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; written without colour codes
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter(use_color=False))
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)
