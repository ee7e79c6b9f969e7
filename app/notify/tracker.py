"""
Notification tracker for LuLu Monitor.

This module fans an analysis out to every configured recipient,
records which message id each recipient received for the active
alert, and later edits those messages in place to show the action
that was taken and who took it.
"""

import asyncio
from typing import List, Optional
from app.core.context import AlertContext
from app.core.errors import GatewayError
from app.core.models import Action, OutboundMessageRef
from app.core.templates import build_buttons, edited_message, status_line
from app.ports.messaging import MessagingPort
from app.settings import Recipients
from app.observability import metrics
from app.observability.logging_setup import get_logger

log = get_logger("lulu.notify")

class NotificationTracker:
    """수신자별 알림 발송 및 수정"""

    def __init__(self, messaging: MessagingPort, context: AlertContext, recipients: Recipients):
        """
        초기화합니다.

        Args:
            messaging: 메시지 발송 포트
            context: 현재 경보 컨텍스트
            recipients: 수신자 설정
        """
        self.messaging = messaging
        self.context = context
        self.recipients = recipients

    async def _send_one(self, recipient_id: str, text: str, with_buttons: bool) -> Optional[str]:
        try:
            message_id = await self.messaging.send_message(
                recipient_id, text, buttons=build_buttons() if with_buttons else None
            )
        except GatewayError as e:
            log.warning(f"알림 발송 실패 recipient:{recipient_id} error:{e}")
            metrics.notifications_sent.labels(result="error").inc()
            return None
        metrics.notifications_sent.labels(result="ok").inc()
        return message_id

    async def send_to_all(self, text: str, token: Optional[int] = None, *, with_buttons: bool = True) -> int:
        """
        모든 수신자에게 메시지를 발송하고 메시지 ID를 기록합니다.

        수신자별 실패는 서로 독립적이며 치명적이지 않습니다.

        Args:
            text: 발송할 내용
            token: 발송을 시작한 경보 세대 (이전 세대면 ID를 기록하지 않음)
            with_buttons: 허용/차단 버튼 포함 여부

        Returns:
            발송에 성공한 수신자 수
        """
        ids = list(self.recipients.ids)
        results = await asyncio.gather(*(self._send_one(rid, text, with_buttons) for rid in ids))

        delivered = 0
        for recipient_id, message_id in zip(ids, results):
            if message_id is None:
                continue
            delivered += 1
            self.context.register(
                OutboundMessageRef(recipient_id=recipient_id, message_id=message_id, content=text),
                token,
            )
        metrics.tracked_messages.set(len(self.context.refs()))
        log.info(f"알림 발송 {delivered}/{len(ids)}")
        return delivered

    async def _edit_one(self, ref: OutboundMessageRef, suffix: str) -> bool:
        ok = await self.messaging.edit_message(
            ref.recipient_id, ref.message_id, edited_message(ref.content, suffix)
        )
        metrics.message_edits.labels(result="ok" if ok else "error").inc()
        return ok

    async def edit_all(self, action: Action, success: bool, actor_id: Optional[str],
                       refs: Optional[List[OutboundMessageRef]] = None) -> bool:
        """
        추적 중인 모든 메시지에 실행 결과를 덧붙여 수정합니다.

        각 메시지는 해당 수신자의 원문에 상태 줄을 붙여 수정되며,
        수정은 동시에 진행됩니다.

        Args:
            action: 실행된 동작
            success: 실행 성공 여부
            actor_id: 실행한 사용자 ID
            refs: 수정할 메시지 참조 (None이면 현재 세대 전체)

        Returns:
            하나 이상의 수정 성공 여부
        """
        targets = self.context.refs() if refs is None else refs
        if not targets:
            return False

        suffix = status_line(action, success, self.recipients.display_name(actor_id),
                             self.recipients.language)
        results = await asyncio.gather(*(self._edit_one(ref, suffix) for ref in targets))
        log.info(f"메시지 수정 {sum(results)}/{len(targets)} action:{action.value}")
        return any(results)
