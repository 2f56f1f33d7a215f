"""Logging utilities with secret redaction.

Provides:
- Redaction of AWS credentials and serialized key material
- Structured logging helpers that append ``key=value`` context
"""

import logging
import re
from typing import Any

# Patterns for secret redaction
AWS_KEY_PATTERNS = [
    (re.compile(r"AKIA[0-9A-Z]{16}"), "AKIA***REDACTED***"),  # Long-term access key ids
    (re.compile(r"ASIA[0-9A-Z]{16}"), "ASIA***REDACTED***"),  # Temporary (STS) access key ids
]

# Master key bodies inside serialized data-protection keys
KEY_VALUE_PATTERN = re.compile(r"(<value>)[^<]*(</value>)", re.IGNORECASE)

# Pattern for Authorization header values
AUTH_HEADER_PATTERN = re.compile(
    r"(Authorization[:\s]+)([^\s,;]+)",
    re.IGNORECASE,
)


def redact_secrets(text: str | None) -> str:
    """Redact secrets from text (AWS key ids, key material, auth headers).

    Args:
        text: Text that may contain secrets

    Returns:
        Text with secrets redacted
    """
    if text is None:
        return ""

    if not isinstance(text, str):
        text = str(text)

    for pattern, replacement in AWS_KEY_PATTERNS:
        text = pattern.sub(replacement, text)

    text = KEY_VALUE_PATTERN.sub(r"\1***REDACTED***\2", text)

    text = AUTH_HEADER_PATTERN.sub(r"\1***REDACTED***", text)

    return text


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **kwargs: Any,
) -> None:
    """Log a message with structured context (secret name, prefix, etc.).

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, logging.ERROR, etc.)
        message: Log message
        **kwargs: Additional structured fields to include
    """
    parts = [message]

    for key, value in kwargs.items():
        safe_value = redact_secrets(str(value))
        parts.append(f"{key}={safe_value}")

    logger.log(level, " | ".join(parts))


def log_info(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log an info message with structured context."""
    log_with_context(logger, logging.INFO, message, **kwargs)


def log_warning(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log a warning message with structured context."""
    log_with_context(logger, logging.WARNING, message, **kwargs)


def log_error(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log an error message with structured context."""
    log_with_context(logger, logging.ERROR, message, **kwargs)


def log_debug(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log a debug message with structured context."""
    log_with_context(logger, logging.DEBUG, message, **kwargs)
