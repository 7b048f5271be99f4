"""
Centralized Logging Configuration

Provides logging for the ordering core with:
- Configurable log levels
- Automatic log rotation
- Masking of customer contact data and credentials
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config


class PiiMaskingFilter(logging.Filter):
    """
    Logging filter that masks customer data and secrets in log records.

    Cart and checkout logs may carry what the customer typed at checkout,
    which must not end up in plain text log files.

    Masks:
    - Phone numbers (Turkish and international formats)
    - Email addresses
    - Customer name / phone / notes fields
    - Tokens and passwords (Redis URLs, API credentials)
    """

    PATTERNS: list[tuple[Pattern, str]] = [
        # Tokens
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-:]{20,})(["\']?)', re.IGNORECASE), r'\1[REDACTED_TOKEN]\3'),
        (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),

        # Passwords (also redis://:secret@host)
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^\s"\']+)(["\']?)', re.IGNORECASE), r'\1[REDACTED_PASSWORD]\3'),
        (re.compile(r'(redis://[^:/@\s]*:)([^@\s]+)(@)', re.IGNORECASE), r'\1[REDACTED_PASSWORD]\3'),

        # Customer fields logged as key=value or JSON
        (re.compile(r'(customer[_-]?(?:name|notes)["\']?\s*[:=]\s*["\']?)([^"\',\n]+)(["\']?)', re.IGNORECASE), r'\1[REDACTED_CUSTOMER]\3'),

        # Email addresses (PII)
        (re.compile(r'\b([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b'), '[REDACTED_EMAIL]'),

        # Phone numbers: +90 532 123 45 67, 0532 123 4567, +1 555 123 4567
        # Must start with + or 0, so order numbers (ORD-20260315-0001) stay readable
        (re.compile(r'(?<![\w-])(?:\+\d{1,3}[\s.-]?|0)\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{2}[\s.-]?\d{2}\b'), '[REDACTED_PHONE]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter log record to mask sensitive data.

        Args:
            record: LogRecord to filter

        Returns:
            True (always - we modify but don't block records)
        """
        if record.msg:
            record.msg = self.mask(str(record.msg))

        if record.args:
            masked_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    arg = self.mask(arg)
                masked_args.append(arg)
            record.args = tuple(masked_args)

        return True

    @classmethod
    def mask(cls, text: str) -> str:
        for pattern, replacement in cls.PATTERNS:
            text = pattern.sub(replacement, text)
        return text


def setup_logging():
    """
    Initialize centralized logging configuration.

    Call this function once at application startup (bootstrap.py does).

    Configuration:
    - Log level from config.LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)
    - Automatic rotation every midnight
    - Keeps logs for config.LOG_RETENTION_DAYS days
    - Masks customer data if config.LOG_MASK_SECRETS is True
    - Writes to logs/emenu.log
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    log_level_str = getattr(config, "LOG_LEVEL", "INFO")
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    retention_days = getattr(config, "LOG_RETENTION_DAYS", 5)

    # Default to True, customer contact data goes through cart logs
    mask_secrets = getattr(config, "LOG_MASK_SECRETS", True)

    formatter = logging.Formatter(
        fmt='%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_dir / "emenu.log",
        when="midnight",
        interval=1,
        backupCount=retention_days,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    if mask_secrets:
        file_handler.addFilter(PiiMaskingFilter())
        console_handler.addFilter(PiiMaskingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("=" * 80)
    logging.info(f"Logging initialized: Level={log_level_str}, Retention={retention_days} days, Masking={'ENABLED' if mask_secrets else 'DISABLED'}")
    logging.info("=" * 80)
