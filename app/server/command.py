"""
Command server for LuLu Monitor.

This module implements the local control-plane endpoints: alert status,
direct action execution, message id registration for the agent, the
decision callback, the recent action history, and the health/metrics
endpoints.
"""

import asyncio
import time
from typing import Optional, Union
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel, field_validator
from app.adapters.storage.action_log import ActionLog
from app.core.context import AlertContext
from app.core.models import Action, AlertActionRecord, OutboundMessageRef
from app.notify.tracker import NotificationTracker
from app.ports.alert_source import ActionExecutorPort, AlertSourcePort
from app.settings import Settings
from app.observability import metrics
from app.observability.logging_setup import get_logger

log = get_logger("lulu.server")

INVALID_ACTION = 'Invalid action. Use "allow", "block", "allow-once", or "block-once"'

class ActionRequest(BaseModel):
    action: Action

class CallbackRequest(BaseModel):
    action: Action
    userId: Optional[str] = None

    @field_validator("userId", mode="before")
    @classmethod
    def _coerce_user(cls, v):
        return str(v) if isinstance(v, int) else v

class RegisterMessageRequest(BaseModel):
    targetId: Optional[Union[str, int]] = None
    messageId: Optional[Union[str, int]] = None
    content: Optional[str] = None

def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)

def create_app(settings: Settings,
               *,
               context: AlertContext,
               source: AlertSourcePort,
               executor: ActionExecutorPort,
               tracker: NotificationTracker,
               action_log: ActionLog) -> FastAPI:
    """명령 서버 FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="LuLu Monitor command server"
    )

    start_time = time.time()

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        """잘못된 요청 본문은 400으로 응답합니다."""
        errors = exc.errors()
        if any(err.get("loc", ())[-1:] == ("action",) for err in errors):
            return _error(400, INVALID_ACTION)
        first = errors[0] if errors else {}
        return _error(400, str(first.get("msg", "Invalid request body")))

    async def execute(action: Action, token: int) -> bool:
        success = await executor.execute(action)
        if success:
            # 지문은 유지. 창이 실제로 사라졌는지는 폴링 루프가 판단
            context.resolve(action, token)
        return success

    @app.get("/status")
    async def status():
        """현재 경보 상태"""
        return {
            "running": True,
            "hasAlert": await source.alert_present(),
            "lastAlertHash": context.fingerprint,
            "state": context.state.value,
            "lastMessageIds": context.message_ids(),
            "telegramIds": settings.recipients.ids,
            "telegramNames": settings.recipients.names,
        }

    @app.post("/action")
    async def action(body: ActionRequest):
        """동작을 직접 실행합니다 (에이전트 결정 우회)"""
        success = await execute(body.action, context.generation)
        return JSONResponse({"success": success, "action": body.action.value},
                            status_code=200 if success else 500)

    @app.post("/register-message")
    async def register_message(body: RegisterMessageRequest):
        """에이전트가 보낸 메시지 ID를 등록합니다"""
        if body.targetId in (None, "") or body.messageId in (None, ""):
            return _error(400, "targetId and messageId required")
        ref = OutboundMessageRef(recipient_id=str(body.targetId),
                                 message_id=str(body.messageId),
                                 content=body.content or None)
        context.register(ref)
        metrics.tracked_messages.set(len(context.refs()))
        log.debug(f"메시지 등록: {ref.recipient_id} -> {ref.message_id}")
        return {"ok": True}

    @app.post("/callback")
    async def callback(body: CallbackRequest):
        """버튼 콜백 또는 자동 실행 결정을 처리합니다"""
        # 실행 중 새 경보가 시작돼도 이 경보의 메시지만 수정하도록 미리 고정
        token = context.generation
        refs = context.refs()
        message_ids = context.message_ids()
        alert_text = context.alert_text()

        success = await execute(body.action, token)
        if context.is_current(token):
            # 클릭 중 발송을 마친 수신자도 수정 대상에 포함
            refs = context.refs()
            message_ids = context.message_ids()
        record = AlertActionRecord(
            alert=alert_text,
            action=body.action,
            user_id=body.userId,
            user_name=settings.recipients.display_name(body.userId),
            success=success,
            message_ids=message_ids,
        )
        # 파일 쓰기가 이벤트 루프를 막지 않도록 스레드에서 실행
        await asyncio.to_thread(action_log.append, record)

        edited = False
        if refs:
            edited = await tracker.edit_all(body.action, success, body.userId, refs)

        return JSONResponse({
            "success": success,
            "action": body.action.value,
            "userId": body.userId,
            "messageEdited": edited,
        }, status_code=200 if success else 500)

    @app.get("/logs")
    async def logs():
        """최근 동작 기록"""
        records = action_log.tail(settings.command_server.logs_tail)
        return [r.model_dump(mode="json") for r in records]

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return {
            "status": "ok",
            "service": settings.observability.service_name,
            "uptime_seconds": int(time.time() - start_time),
        }

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
