"""
Alert field parser for LuLu Monitor.

This module contains the pure function that classifies the raw strings
of a LuLu alert window into structured fields. The UI text order is not
stable across alert types, so fields are recognized by pattern rather
than by position.
"""

import re
from typing import Dict, Iterable, Optional
from .models import ParsedAlert

# 라벨 및 UI 요소 (대소문자 무시 비교)
SKIP_LABELS = frozenset(label.lower() for label in (
    "Details & Options",
    "LuLu Alert",
    "Process:",
    "Connection:",
    "pid:",
    "args:",
    "path:",
    "port/protocol:",
    "ip address:",
    "(reverse) dns:",
    "Rule Scope:",
    "Rule Duration:",
    "Time stamp:",
    "none",
    "unknown",
))

IPV4_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")
PORT_RE = re.compile(r"^\d+\s*\((TCP|UDP)\)$", re.IGNORECASE)
PID_RE = re.compile(r"^\d{4,6}$")
PROCESS_RE = re.compile(r"^[a-zA-Z0-9_-]{1,29}$")


def is_label(text: str) -> bool:
    """라벨/잡음 문자열 여부"""
    return text.lower() in SKIP_LABELS or text.endswith(":")


def _classify(text: str, found: Dict[str, str]) -> Optional[str]:
    # 순서가 중요: 먼저 일치한 규칙이 이김
    if "ip_address" not in found and IPV4_RE.match(text):
        return "ip_address"
    if "port" not in found and PORT_RE.match(text):
        return "port"
    if "pid" not in found and PID_RE.match(text):
        return "pid"
    if "path" not in found and text.startswith("/"):
        return "path"
    if "args" not in found and (text.startswith("-") or "://" in text):
        return "args"
    if "dns" not in found and "." in text and not IPV4_RE.match(text):
        return "dns"
    if "process_name" not in found and PROCESS_RE.match(text):
        return "process_name"
    return None


def parse_alert(texts: Iterable[str]) -> ParsedAlert:
    """
    경보 창 텍스트를 구조화된 필드로 변환합니다.

    각 필드는 처음 일치한 값만 유지하고, 채워지지 않은 필드는
    "unknown" (args는 "none")으로 남습니다.

    Args:
        texts: 경보 창에서 추출한 원시 문자열 (순서 보장 없음)

    Returns:
        ParsedAlert
    """
    found: Dict[str, str] = {}
    for raw in texts:
        text = (raw or "").strip()
        if not text or is_label(text):
            continue
        field = _classify(text, found)
        if field:
            found[field] = text
    return ParsedAlert(**found)
