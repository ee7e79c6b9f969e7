"""
Adapters for LuLu Monitor hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import ActionLog, write_fallback
from .lulu import OsaScriptRunner, LuLuAlertSource, LuLuActionExecutor
from .gateway.client import GatewayClient

__all__ = ["ActionLog", "write_fallback", "OsaScriptRunner", "LuLuAlertSource", "LuLuActionExecutor", "GatewayClient"]
