"""
Core domain models and pure functions for LuLu Monitor.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import Action, AlertSnapshot, ParsedAlert, OutboundMessageRef, AlertActionRecord
from .parser import parse_alert
from .context import AlertContext, MonitorState

__all__ = [
    "Action", "AlertSnapshot", "ParsedAlert", "OutboundMessageRef", "AlertActionRecord",
    "parse_alert", "AlertContext", "MonitorState",
]
