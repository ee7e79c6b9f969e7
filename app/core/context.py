"""
Active alert context for LuLu Monitor.

This module holds the single owned record of the alert currently in
flight: its fingerprint, a generation token that correlates late
completions with the alert that started them, and the outbound message
references that will be edited once an action is taken.

The context is owned by the asyncio event loop; the poll task and the
command server handlers both run on that loop, so no lock is needed.
"""

from enum import Enum
from typing import Dict, List, Optional
from .models import Action, OutboundMessageRef
from app.observability.logging_setup import get_logger

log = get_logger("lulu.context")


class MonitorState(str, Enum):
    """폴링 루프 상태"""
    IDLE = "idle"
    ALERT_ACTIVE = "alert_active"
    DISPATCHED = "dispatched"


class AlertContext:
    """현재 처리 중인 경보의 상태"""

    def __init__(self):
        self.state = MonitorState.IDLE
        self.fingerprint: Optional[str] = None
        self.generation = 0
        self.summary: Optional[str] = None
        self.resolved_action: Optional[Action] = None
        self._refs: Dict[str, OutboundMessageRef] = {}

    def is_new(self, fingerprint: str) -> bool:
        """보유 중인 지문과 다른 경보인지 확인합니다."""
        return fingerprint != self.fingerprint

    def begin(self, fingerprint: str, summary: Optional[str] = None) -> int:
        """
        새 경보 세대를 시작합니다.

        이전 경보의 메시지 참조는 모두 버립니다.

        Args:
            fingerprint: 새 경보의 지문
            summary: 동작 로그에 남길 경보 요약

        Returns:
            새 세대 토큰
        """
        self.generation += 1
        self.fingerprint = fingerprint
        self.summary = summary
        self.resolved_action = None
        self._refs = {}
        self.state = MonitorState.ALERT_ACTIVE
        log.debug(f"경보 세대 시작 generation:{self.generation}")
        return self.generation

    def mark_dispatched(self, token: int) -> None:
        if self.is_current(token):
            self.state = MonitorState.DISPATCHED

    def dismiss(self) -> None:
        """경보 창이 사라졌을 때 지문만 초기화합니다. 메시지 참조는 유지됩니다."""
        self.fingerprint = None
        self.state = MonitorState.IDLE

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def register(self, ref: OutboundMessageRef, token: Optional[int] = None) -> bool:
        """
        발송된 메시지 참조를 등록합니다.

        Args:
            ref: 메시지 참조
            token: 발송을 시작한 세대 토큰 (None이면 현재 세대)

        Returns:
            등록 여부 (이전 세대의 늦은 응답이면 False)
        """
        if token is not None and not self.is_current(token):
            log.info(f"이전 경보의 메시지 등록 무시 recipient:{ref.recipient_id} token:{token}")
            return False
        self._refs[ref.recipient_id] = ref
        return True

    def resolve(self, action: Action, token: Optional[int] = None) -> None:
        """경보에 적용된 동작을 기록합니다. 이전 세대 토큰이면 무시합니다."""
        if token is None or self.is_current(token):
            self.resolved_action = action

    def refs(self) -> List[OutboundMessageRef]:
        """현재 세대의 메시지 참조 복사본"""
        return list(self._refs.values())

    def message_ids(self) -> Dict[str, str]:
        return {rid: ref.message_id for rid, ref in self._refs.items()}

    def alert_text(self) -> Optional[str]:
        """동작 로그용 경보 설명 (발송된 원문 우선, 200자)"""
        for ref in self._refs.values():
            if ref.content:
                return ref.content[:200]
        return self.summary
