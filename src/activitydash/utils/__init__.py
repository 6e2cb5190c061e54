"""
Utility functions and helpers for the ActivityDash application.

This module contains the structured logging helpers and the date/time
helpers shared across services and Lambda handlers.
"""

from .logging import log_error, log_event
from .time import Clock, system_clock

__all__ = ["Clock", "log_error", "log_event", "system_clock"]
