"""
Orchestrators for LuLu Monitor.

This module contains the poll loop that coordinates the flow
between ports and adapters.
"""
from .monitor import AlertMonitor

__all__ = ["AlertMonitor"]
