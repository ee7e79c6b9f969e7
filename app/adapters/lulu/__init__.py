from .osascript import OsaScriptRunner
from .source import LuLuAlertSource
from .executor import LuLuActionExecutor

__all__ = ["OsaScriptRunner", "LuLuAlertSource", "LuLuActionExecutor"]
