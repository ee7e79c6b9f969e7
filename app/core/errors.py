"""
Error types for LuLu Monitor.

Only startup configuration errors are fatal; everything else is
converted to a soft failure at the component boundary.
"""

from typing import Optional


class LuLuMonitorError(Exception):
    """LuLu Monitor 기본 예외"""


class ConfigError(LuLuMonitorError):
    """시작 시 설정 오류 (복구 불가)"""


class GatewayError(LuLuMonitorError):
    """게이트웨이 호출 실패 (네트워크, 비정상 상태 코드, ok=false)"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
