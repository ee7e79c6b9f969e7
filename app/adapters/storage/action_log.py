"""
Append-only action log for LuLu Monitor.

This module implements the JSON Lines action log (one record per line)
and the fallback alert file written when the gateway is unreachable.
"""

import json
from collections import deque
from pathlib import Path
from typing import List
from pydantic import ValidationError
from app.core.models import AlertActionRecord
from app.observability.logging_setup import get_logger

log = get_logger("lulu.actionlog")

class ActionLog:
    """JSONL 동작 로그 (추가 전용)"""
    
    def __init__(self, path: str):
        """
        초기화합니다.
        
        Args:
            path: 로그 파일 경로
        """
        self.path = Path(path)
    
    def append(self, record: AlertActionRecord) -> bool:
        """
        기록을 한 줄 추가합니다.
        
        Returns:
            기록 성공 여부 (실패해도 예외를 던지지 않음)
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(record.model_dump_json() + "\n")
            return True
        except OSError as e:
            log.warning(f"동작 로그 기록 실패: {e}")
            return False
    
    def tail(self, limit: int = 50) -> List[AlertActionRecord]:
        """최근 기록을 오래된 순서로 반환합니다. 파일이 없으면 빈 목록."""
        try:
            with self.path.open(encoding="utf-8") as f:
                lines = deque((ln for ln in f if ln.strip()), maxlen=limit)
        except FileNotFoundError:
            return []
        except OSError as e:
            log.warning(f"동작 로그 읽기 실패: {e}")
            return []
        
        records = []
        for line in lines:
            try:
                records.append(AlertActionRecord.model_validate_json(line))
            except ValidationError:
                log.debug(f"손상된 동작 로그 줄 건너뜀: {line[:80]}")
        return records

def write_fallback(path: str, text: str) -> bool:
    """게이트웨이 전송 실패 시 경보 원문을 파일에 남깁니다."""
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        log.error(f"❌ 폴백 파일 기록 실패: {e}")
        return False
    log.info(f"📝 폴백 파일에 경보 기록: {target}")
    return True
