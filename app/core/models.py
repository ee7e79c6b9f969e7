"""
Core domain models for LuLu Monitor.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# 지문(fingerprint) 길이 및 구분자
FINGERPRINT_LENGTH = 200
FINGERPRINT_SEPARATOR = "|"

# 콜백 토큰 도메인 (lulu:<action>)
CALLBACK_DOMAIN = "lulu"


class Action(str, Enum):
    """LuLu 경보 창에 적용할 수 있는 동작"""
    ALLOW = "allow"
    BLOCK = "block"
    ALLOW_ONCE = "allow-once"
    BLOCK_ONCE = "block-once"

    @property
    def is_allow(self) -> bool:
        return self in (Action.ALLOW, Action.ALLOW_ONCE)

    @property
    def is_once(self) -> bool:
        return self in (Action.ALLOW_ONCE, Action.BLOCK_ONCE)

    @property
    def callback_token(self) -> str:
        """인라인 버튼에 실리는 콜백 토큰"""
        return f"{CALLBACK_DOMAIN}:{self.value}"

    @classmethod
    def parse(cls, value: str) -> "Action":
        """
        문자열을 Action으로 변환합니다.

        Args:
            value: "allow" 또는 "lulu:allow" 형태의 문자열

        Returns:
            Action

        Raises:
            ValueError: 지원하지 않는 동작인 경우
        """
        raw = str(value).strip()
        prefix = f"{CALLBACK_DOMAIN}:"
        if raw.startswith(prefix):
            raw = raw[len(prefix):]
        return cls(raw)


class AlertSnapshot(BaseModel):
    """한 번의 폴링에서 추출한 경보 창 텍스트"""
    model_config = ConfigDict(frozen=True)

    texts: List[str]
    fingerprint: str
    observed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_texts(cls, texts: List[str]) -> Optional["AlertSnapshot"]:
        """빈 문자열을 제거하고 스냅샷을 만듭니다. 남는 텍스트가 없으면 None."""
        kept = [t for t in texts if t and t.strip()]
        if not kept:
            return None
        return cls(texts=kept, fingerprint=fingerprint_of(kept))


def fingerprint_of(texts: List[str]) -> str:
    """중복 감지용 지문. 암호학적 해시가 아닙니다."""
    return FINGERPRINT_SEPARATOR.join(texts)[:FINGERPRINT_LENGTH]


class ParsedAlert(BaseModel):
    """경보 창 텍스트에서 추출한 구조화된 필드"""
    model_config = ConfigDict(frozen=True)

    process_name: str = "unknown"
    pid: str = "unknown"
    path: str = "unknown"
    args: str = "none"
    ip_address: str = "unknown"
    port: str = "unknown"
    dns: str = "unknown"


class OutboundMessageRef(BaseModel):
    """수신자별로 발송된 메시지 참조"""
    recipient_id: str
    message_id: str
    content: Optional[str] = None

    @field_validator("recipient_id", "message_id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # Telegram ID는 JSON 숫자로 올 수 있음
        return str(v) if isinstance(v, int) else v


class AlertActionRecord(BaseModel):
    """동작 로그 한 줄 (append-only)"""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    alert: Optional[str] = None
    action: Action
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    success: bool
    message_ids: Dict[str, str] = Field(default_factory=dict)
