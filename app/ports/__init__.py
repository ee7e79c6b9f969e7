"""
Port interfaces for LuLu Monitor hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .alert_source import AlertSourcePort, ActionExecutorPort
from .messaging import AnalysisPort, MessagingPort

__all__ = ["AlertSourcePort", "ActionExecutorPort", "AnalysisPort", "MessagingPort"]
