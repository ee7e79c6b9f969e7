"""
Storage adapters for LuLu Monitor hexagonal architecture.

The only persistent state is the append-only action log and the
fallback alert file.
"""

from .action_log import ActionLog, write_fallback

__all__ = ["ActionLog", "write_fallback"]
