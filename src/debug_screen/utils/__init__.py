"""Utility functions and helpers.

- logging: Structured logging with secret sanitization
- security: Secret redaction for logs and environment listings
"""

from debug_screen.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    configure_logging,
    unbind_context,
)
from debug_screen.utils.security import (
    RedactionError,
    SecretRedactor,
    SecurityError,
    mask_env_value,
)

__all__ = [
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
    "bind_context",
    "configure_logging",
    "mask_env_value",
    "unbind_context",
]
