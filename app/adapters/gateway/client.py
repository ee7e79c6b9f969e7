"""
Gateway API client for LuLu Monitor.

This module provides a client for the agent gateway's tool invocation
endpoint, used both to spawn the analysis session and to send/edit
recipient messages.
"""

import aiohttp
import asyncio
import json
from typing import Any, Dict, List, Optional
from app.core.errors import GatewayError
from app.common.retry import retry_with_backoff
from app.observability.logging_setup import get_logger

log = get_logger("lulu.gateway")

TOOLS_ENDPOINT = "/tools/invoke"

class GatewayClient:
    """게이트웨이 도구 호출 클라이언트"""

    def __init__(self,
                 base_url: str,
                 token: Optional[str] = None,
                 timeout: float = 10,
                 *,
                 channel: str = "telegram",
                 edit_retries: int = 1):
        """
        초기화합니다.

        Args:
            base_url: 게이트웨이 기본 URL
            token: Bearer 토큰 (없으면 헤더 생략)
            timeout: 요청 타임아웃 (초)
            channel: 메시지 채널
            edit_retries: 메시지 수정 재시도 횟수
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.channel = channel
        self.edit_retries = edit_retries
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self.session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    async def invoke_tool(self, tool: str, args: Dict[str, Any]) -> Dict:
        """
        게이트웨이 도구를 호출합니다.

        Args:
            tool: 도구 이름
            args: 도구 인자

        Returns:
            응답 데이터 (200이지만 JSON이 아니면 빈 딕셔너리)

        Raises:
            GatewayError: 네트워크 오류, 타임아웃, 200 이외 상태, ok=false
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        url = f"{self.base_url}{TOOLS_ENDPOINT}"
        log.debug(f"게이트웨이 호출 tool:{tool} url:{url}")
        try:
            async with self.session.post(url, json={"tool": tool, "args": args}) as response:
                body = await response.text()
                status = response.status
        except asyncio.TimeoutError as e:
            raise GatewayError("Request timeout") from e
        except aiohttp.ClientError as e:
            raise GatewayError(f"Gateway request error: {e}") from e

        if status != 200:
            log.debug(f"게이트웨이 응답 status:{status} body:{body[:200]}")
            raise GatewayError(f"Gateway returned {status}", status=status)

        try:
            data = json.loads(body)
        except ValueError:
            log.debug(f"게이트웨이 응답 파싱 실패, 성공으로 간주: {body[:200]}")
            return {}

        if isinstance(data, dict) and data.get("ok") is False:
            error = data.get("error") or {}
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GatewayError(message or "Unknown error", status=status)
        return data if isinstance(data, dict) else {}

    async def spawn_session(self, task: str, *, model: str = "haiku", run_timeout_sec: int = 30) -> Dict:
        """분석용 하위 에이전트 세션을 생성합니다."""
        return await self.invoke_tool("sessions_spawn", {
            "task": task,
            "model": model,
            "runTimeoutSeconds": run_timeout_sec,
            "cleanup": "delete",
        })

    async def send_message(self, target: str, message: str, *,
                           buttons: Optional[List[List[Dict[str, str]]]] = None) -> Optional[str]:
        """
        메시지를 발송합니다.

        Returns:
            발송된 메시지 ID (응답에 없으면 None)
        """
        args: Dict[str, Any] = {
            "action": "send",
            "channel": self.channel,
            "target": target,
            "message": message,
        }
        if buttons:
            args["buttons"] = buttons
        data = await self.invoke_tool("message", args)
        return extract_message_id(data)

    async def edit_message(self, target: str, message_id: str, message: str) -> bool:
        """기존 메시지를 수정합니다. 실패 시 False."""
        args = {
            "action": "edit",
            "channel": self.channel,
            "target": target,
            "messageId": message_id,
            "message": message,
        }
        try:
            await retry_with_backoff(
                lambda: self.invoke_tool("message", args),
                max_retries=self.edit_retries,
                base_delay=0.5,
                max_delay=2.0,
                retry_on=(GatewayError,),
            )
        except GatewayError as e:
            log.debug(f"메시지 수정 실패 target:{target} error:{e}")
            return False
        log.debug(f"메시지 수정 완료 target:{target}")
        return True

def extract_message_id(data: Any) -> Optional[str]:
    """도구 응답에서 메시지 ID를 찾습니다."""
    if not isinstance(data, dict):
        return None
    for key in ("messageId", "message_id"):
        if data.get(key) is not None:
            return str(data[key])
    for key in ("result", "details"):
        found = extract_message_id(data.get(key))
        if found:
            return found
    return None
