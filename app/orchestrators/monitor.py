"""
Alert monitor orchestrator for LuLu Monitor.

This module implements the poll loop: it detects the LuLu alert window,
suppresses duplicates by fingerprint, and triggers parsing and dispatch
exactly once per distinct alert.
"""

import asyncio
from typing import Optional
from app.core.context import AlertContext, MonitorState
from app.core.models import AlertSnapshot
from app.core.parser import parse_alert
from app.dispatch.analysis import AnalysisDispatcher, DispatchOutcome
from app.ports.alert_source import AlertSourcePort
from app.observability import metrics
from app.observability.logging_setup import get_logger

log = get_logger("lulu.monitor")

class AlertMonitor:
    """LuLu 경보 폴링 루프"""

    def __init__(self,
                 source: AlertSourcePort,
                 dispatcher: AnalysisDispatcher,
                 context: AlertContext,
                 *,
                 poll_interval: float = 1.0):
        """
        초기화합니다.

        Args:
            source: 경보 창 조회 포트
            dispatcher: 분석 디스패처
            context: 현재 경보 컨텍스트
            poll_interval: 폴링 주기 (초)
        """
        self.source = source
        self.dispatcher = dispatcher
        self.context = context
        self.poll_interval = poll_interval
        self.running = False

    async def start(self) -> None:
        """
        폴링 루프를 시작합니다.

        각 tick이 끝난 뒤 poll_interval 만큼 쉬므로 tick은 겹치지 않습니다.
        """
        self.running = True
        log.info("👀 LuLu 경보 감시 시작")
        while self.running:
            await self.tick()
            await asyncio.sleep(self.poll_interval)

    def stop(self) -> None:
        self.running = False

    async def tick(self) -> Optional[DispatchOutcome]:
        """
        한 번의 폴링을 수행합니다.

        Returns:
            새 경보를 제출했다면 그 결과, 아니면 None
        """
        try:
            return await self._tick()
        except Exception as e:
            # 다음 tick에서 다시 시도
            metrics.poll_errors.inc()
            log.opt(exception=e).debug(f"폴링 오류: {e}")
            return None

    async def _tick(self) -> Optional[DispatchOutcome]:
        if not await self.source.alert_present():
            if self.context.fingerprint is not None:
                log.debug("경보 창 닫힘")
                self.context.dismiss()
            return None

        texts = await self.source.extract_alert()
        snapshot = AlertSnapshot.from_texts(texts or [])
        if snapshot is None:
            return None

        if not self.context.is_new(snapshot.fingerprint):
            metrics.alerts_duplicate.inc()
            return None

        metrics.alerts_detected.inc()
        log.info("🚨 새 LuLu 경보 감지")
        log.info(f"   Texts: {', '.join(snapshot.texts[:3])}...")

        parsed = parse_alert(snapshot.texts)
        summary = f"{parsed.process_name} -> {parsed.dns if parsed.dns != 'unknown' else parsed.ip_address} {parsed.port}"
        token = self.context.begin(snapshot.fingerprint, summary)
        metrics.tracked_messages.set(0)

        outcome = await self.dispatcher.dispatch(parsed, snapshot.texts, token)
        # 전송에 실패해도 같은 경보를 다시 보내지 않음
        self.context.mark_dispatched(token)
        return outcome

    @property
    def state(self) -> MonitorState:
        return self.context.state
