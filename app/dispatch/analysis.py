"""
Analysis dispatcher for LuLu Monitor.

This module submits a parsed alert to the remote analysis agent and
waits, in the background, for the agent's analysis artifact. When the
artifact appears it is fanned out to every recipient, unless the alert
that started the dispatch has been superseded in the meantime.

Submission is never retried. A failed submission writes the formatted
alert to a fallback file for manual recovery.
"""

import asyncio
import time
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set
from app.adapters.storage.action_log import write_fallback
from app.core.context import AlertContext
from app.core.errors import GatewayError
from app.core.models import ParsedAlert
from app.core.templates import build_fallback_text, build_task
from app.notify.tracker import NotificationTracker
from app.ports.messaging import AnalysisPort
from app.settings import Settings
from app.observability import metrics
from app.observability.logging_setup import get_logger

log = get_logger("lulu.dispatch")

class DispatchOutcome(str, Enum):
    """제출 결과"""
    SUBMITTED = "submitted"
    FAILED = "failed"

class AnalysisDispatcher:
    """분석 에이전트 디스패처 (파일 핸드오프 방식)"""

    def __init__(self,
                 analysis: AnalysisPort,
                 tracker: NotificationTracker,
                 context: AlertContext,
                 settings: Settings):
        """
        초기화합니다.

        Args:
            analysis: 분석 에이전트 포트
            tracker: 알림 추적기
            context: 현재 경보 컨텍스트
            settings: 설정
        """
        self.analysis = analysis
        self.tracker = tracker
        self.context = context
        self.settings = settings
        self.artifact_path = Path(settings.dispatch.artifact_path).expanduser()
        self._pending: Set[asyncio.Task] = set()

    def _task_text(self, parsed: ParsedAlert) -> str:
        auto = self.settings.auto_execute
        return build_task(
            parsed,
            artifact_path=str(self.artifact_path),
            callback_url=self.settings.command_server.callback_url,
            language=self.settings.recipients.language,
            auto_execute_action=auto.action if auto.enabled else None,
        )

    async def dispatch(self, parsed: ParsedAlert, texts: List[str], token: int) -> DispatchOutcome:
        """
        경보를 분석 에이전트에 제출합니다.

        제출이 승인되면 분석 결과 대기를 백그라운드 태스크로 시작합니다.
        실패는 예외로 전파하지 않고 폴백 파일을 남깁니다.

        Args:
            parsed: 파싱된 경보
            texts: 경보 창 원문 텍스트
            token: 경보 세대 토큰

        Returns:
            제출 결과
        """
        # 이전 경보의 결과 파일이 새 경보에 섞이지 않도록 제거
        self._remove_artifact()
        try:
            await self.analysis.spawn_session(
                self._task_text(parsed),
                model=self.settings.gateway.model,
                run_timeout_sec=self.settings.gateway.run_timeout_sec,
            )
        except GatewayError as e:
            log.warning(f"⚠️ 게이트웨이 전송 실패: {e}")
            metrics.dispatch_total.labels(outcome=DispatchOutcome.FAILED.value).inc()
            write_fallback(self.settings.dispatch.fallback_path, build_fallback_text(parsed, texts))
            return DispatchOutcome.FAILED

        metrics.dispatch_total.labels(outcome=DispatchOutcome.SUBMITTED.value).inc()
        log.info("✅ 경보를 분석 에이전트에 전달함")
        task = asyncio.create_task(self.complete(token))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return DispatchOutcome.SUBMITTED

    async def wait_for_artifact(self, token: int) -> Optional[str]:
        """
        분석 결과 파일을 기다립니다.

        대기 중 새 경보가 시작되면 새 경보의 결과 파일을 가로채지 않도록 즉시 중단합니다.

        Returns:
            파일 내용 (타임아웃이나 세대 교체 시 None). 읽은 파일은 삭제됩니다.
        """
        timeout = self.settings.dispatch.artifact_timeout_sec
        interval = self.settings.dispatch.artifact_poll_sec
        started = time.monotonic()
        while self.context.is_current(token):
            text = self._take_artifact()
            if text is not None:
                metrics.artifact_wait_seconds.observe(time.monotonic() - started)
                return text
            if time.monotonic() - started >= timeout:
                return None
            await asyncio.sleep(interval)
        return None

    async def complete(self, token: int) -> int:
        """
        분석 결과를 기다린 뒤 모든 수신자에게 발송합니다.

        Args:
            token: 제출 시점의 경보 세대

        Returns:
            발송된 수신자 수 (타임아웃이나 오래된 세대면 0)
        """
        text = await self.wait_for_artifact(token)
        if text is None and not self.context.is_current(token):
            log.info(f"새 경보가 시작되어 이전 분석 대기 중단 token:{token}")
            return 0
        if text is None:
            log.warning(f"분석 결과 대기 시간 초과 ({self.settings.dispatch.artifact_timeout_sec}s)")
            return 0
        # 콜백(자동 실행)으로 이미 처리된 경보는 버튼 없이 알림만 발송
        with_buttons = self.context.resolved_action is None
        return await self.tracker.send_to_all(text, token, with_buttons=with_buttons)

    def _take_artifact(self) -> Optional[str]:
        try:
            text = self.artifact_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            log.debug(f"분석 결과 파일 읽기 실패: {e}")
            return None
        if not text:
            # 에이전트가 아직 쓰는 중
            return None
        self._remove_artifact()
        return text

    def _remove_artifact(self) -> None:
        try:
            self.artifact_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            log.debug(f"분석 결과 파일 삭제 실패: {e}")

    async def cancel_pending(self) -> None:
        """대기 중인 분석 결과 대기 태스크를 취소합니다."""
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
