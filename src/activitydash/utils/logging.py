"""
Structured logging helpers for the ActivityDash application.

Log lines are single JSON objects printed to stdout, which Lambda forwards
to CloudWatch Logs. Keys that may carry personal data are dropped before
printing.

Functions:
    log_event: Log a named event with arbitrary fields
    log_error: Log an error with its type and context
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SENSITIVE_KEYS = frozenset({"user_id", "body", "data", "notes", "lat", "lon", "authorization"})


def _scrub(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k.lower() not in SENSITIVE_KEYS}


def log_event(event: str, **fields: Any) -> None:
    """
    Print a structured log line.

    Args:
        event: Event name, e.g. "LOG_SAVED"
        **fields: Additional context; sensitive keys are removed
    """
    try:
        log_data = {
            "event": event,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **_scrub(fields),
        }
        print(json.dumps(log_data, default=str))
    except Exception as e:
        print(f"Error logging event {event}: {e}")


def log_error(
    error_type: str, error_message: str, context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Print a structured error line.

    Args:
        error_type: Short error category, e.g. "SAVE_LOG_ERROR"
        error_message: Detailed error message
        context: Additional context; sensitive keys are removed
    """
    fields: Dict[str, Any] = {"errorType": error_type, "errorMessage": error_message}
    if context:
        fields["context"] = _scrub(context)
    log_event("ERROR", **fields)
