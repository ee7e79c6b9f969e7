"""
LuLu alert window source.

This module reads the LuLu alert window through the check/extract
automation scripts.
"""

from typing import List, Optional
from app.adapters.lulu.osascript import OsaScriptRunner

CHECK_SCRIPT = "check-alert.scpt"
EXTRACT_SCRIPT = "extract-alert.scpt"

# extract 스크립트의 텍스트 구분자
TEXT_DELIMITER = "|||"

class LuLuAlertSource:
    """LuLu 경보 창 조회 어댑터"""
    
    def __init__(self, runner: OsaScriptRunner):
        self.runner = runner
    
    async def alert_present(self) -> bool:
        return await self.runner.run(CHECK_SCRIPT) == "true"
    
    async def extract_alert(self) -> Optional[List[str]]:
        result = await self.runner.run(EXTRACT_SCRIPT)
        if not result:
            return None
        return split_texts(result)

def split_texts(output: str) -> List[str]:
    """extract 스크립트 출력을 텍스트 목록으로 나눕니다."""
    return [t for t in output.split(TEXT_DELIMITER) if t.strip()]
