"""
Message templates for LuLu Monitor.

This module builds the agent task text, the fallback alert text,
the inline action buttons, and the localized status line that is
appended to notifications once an action has been taken.
"""

from typing import Dict, List, Optional
from .models import Action, ParsedAlert

# 언어별 상태 문구
STATUS_TEXTS: Dict[str, Dict[str, str]] = {
    "zh-TW": {
        "allowed": "已允許",
        "blocked": "已封鎖",
        "once": " (本次)",
        "permanent": " (永久)",
        "failed": "操作失敗",
    },
    "ko-KR": {
        "allowed": "허용됨",
        "blocked": "차단됨",
        "once": " (이번만)",
        "permanent": " (영구)",
        "failed": "실행 실패",
    },
    "en-US": {
        "allowed": "Allowed",
        "blocked": "Blocked",
        "once": " (once)",
        "permanent": " (always)",
        "failed": "Action failed",
    },
}
DEFAULT_LANGUAGE = "zh-TW"

BUTTON_LABELS: Dict[Action, str] = {
    Action.ALLOW: "✅ Always Allow",
    Action.ALLOW_ONCE: "✅ Allow Once",
    Action.BLOCK: "❌ Always Block",
    Action.BLOCK_ONCE: "❌ Block Once",
}


def alert_block(parsed: ParsedAlert) -> str:
    """[LULU_ALERT] 블록을 생성합니다."""
    return "\n".join([
        "[LULU_ALERT]",
        f"process: {parsed.process_name}",
        f"pid: {parsed.pid}",
        f"path: {parsed.path}",
        f"args: {parsed.args}",
        f"ip: {parsed.ip_address}",
        f"port: {parsed.port}",
        f"dns: {parsed.dns}",
        "[/LULU_ALERT]",
    ])


def build_task(parsed: ParsedAlert,
               *,
               artifact_path: str,
               callback_url: str,
               language: str = DEFAULT_LANGUAGE,
               auto_execute_action: Optional[Action] = None) -> str:
    """
    분석 에이전트에게 전달할 작업 설명을 생성합니다.

    에이전트는 분석 결과를 artifact_path에 기록하고, 모니터가
    그 파일을 읽어 모든 수신자에게 버튼과 함께 발송합니다.

    Args:
        parsed: 파싱된 경보
        artifact_path: 분석 결과 파일 경로
        callback_url: 자동 실행 시 호출할 콜백 URL
        language: 분석 결과 언어
        auto_execute_action: 자동 실행 동작 (None이면 비활성화)

    Returns:
        작업 설명 문자열
    """
    lines = [
        alert_block(parsed),
        "",
        "Analyze this LuLu firewall alert:",
        "1. Identify the program and the connection target",
        "2. Rate the risk (🟢 low / 🟡 medium / 🔴 high)",
        "3. Recommend Allow or Block, permanently or just this once",
        f"Write the summary in {language}.",
    ]

    if auto_execute_action is not None:
        body = '{"action":"%s","userId":"auto"}' % auto_execute_action.value
        lines += [
            "",
            "⚡ Auto-execute mode is enabled:",
            "If you are highly confident (well-known safe program such as curl/brew/node/git",
            "or a system service connecting to a normal destination), apply the decision first:",
            f"exec: curl -X POST {callback_url} -H \"Content-Type: application/json\" -d '{body}'",
            "and say in the summary that it was allowed automatically and why.",
            "If you have any doubt, do not call it; the user will decide.",
        ]

    lines += [
        "",
        f"Write ONLY the final summary text to the file {artifact_path}.",
        "Do not send any message yourself. Reply NO_REPLY when done.",
    ]
    return "\n".join(lines)


def build_fallback_text(parsed: ParsedAlert, texts: List[str]) -> str:
    """게이트웨이 전송 실패 시 파일에 남길 원문 경보"""
    return "\n".join([alert_block(parsed), "", "raw:", *texts, ""])


def build_buttons() -> List[List[Dict[str, str]]]:
    """허용/차단 두 줄의 인라인 버튼"""
    rows = [
        (Action.ALLOW, Action.ALLOW_ONCE),
        (Action.BLOCK, Action.BLOCK_ONCE),
    ]
    return [
        [{"text": BUTTON_LABELS[a], "callback_data": a.callback_token} for a in row]
        for row in rows
    ]


def status_line(action: Action, success: bool, actor_name: str,
                language: str = DEFAULT_LANGUAGE) -> str:
    """
    동작 결과 상태 줄을 생성합니다.

    Returns:
        "\\n\\n<이모지> <상태> by <실행자>" 형태의 문자열
    """
    texts = STATUS_TEXTS.get(language, STATUS_TEXTS[DEFAULT_LANGUAGE])
    if success:
        emoji = "✅" if action.is_allow else "🚫"
        duration = texts["once"] if action.is_once else texts["permanent"]
        status = (texts["allowed"] if action.is_allow else texts["blocked"]) + duration
    else:
        emoji = "❌"
        status = texts["failed"]
    return f"\n\n{emoji} {status} by {actor_name}"


def edited_message(content: Optional[str], suffix: str) -> str:
    """원본 내용에 상태 줄을 붙입니다. 원본이 없으면 상태 줄만 사용합니다."""
    if content:
        return content + suffix
    return suffix.strip()
