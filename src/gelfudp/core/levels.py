"""Map stdlib logging levels onto GELF (syslog) severities."""

from __future__ import annotations

import logging

TRACE_LEVEL_NUM = 5

# syslog severities used by the GELF "level" field
EMERGENCY = 0
ALERT = 1
CRITICAL = 2
ERROR = 3
WARNING = 4
NOTICE = 5
INFORMATIONAL = 6
DEBUG = 7

_THRESHOLDS = (
    (logging.CRITICAL, CRITICAL),
    (logging.ERROR, ERROR),
    (logging.WARNING, WARNING),
    (logging.INFO, INFORMATIONAL),
)


def to_syslog_level(levelno: int) -> int:
    """Return the syslog severity for a stdlib ``levelno``.

    Levels between the stdlib constants round down to the nearer lower one,
    so a custom level 25 is reported as informational and TRACE as debug.
    """

    for threshold, severity in _THRESHOLDS:
        if levelno >= threshold:
            return severity
    return DEBUG


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values."""

    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "TRACE":
        return TRACE_LEVEL_NUM
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    if isinstance(resolved, int):
        return resolved
    return logging.INFO
