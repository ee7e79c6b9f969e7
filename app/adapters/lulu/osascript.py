"""
AppleScript runner for LuLu Monitor.

This module runs the UI automation scripts through osascript
with a hard timeout, so a hung automation never blocks the loop.
"""

import asyncio
from pathlib import Path
from typing import Optional
from app.observability.logging_setup import get_logger

log = get_logger("lulu.osascript")

class OsaScriptRunner:
    """osascript 실행기"""
    
    def __init__(self, scripts_dir: str, *, timeout: float = 10.0, binary: str = "osascript"):
        """
        초기화합니다.
        
        Args:
            scripts_dir: 스크립트 디렉터리
            timeout: 실행 타임아웃 (초)
            binary: osascript 실행 파일
        """
        self.scripts_dir = Path(scripts_dir)
        self.timeout = timeout
        self.binary = binary
    
    async def run(self, script_name: str) -> Optional[str]:
        """
        스크립트를 실행합니다.
        
        Args:
            script_name: 스크립트 파일 이름
            
        Returns:
            공백을 제거한 표준 출력, 실패/타임아웃 시 None
        """
        script_path = self.scripts_dir / script_name
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary, str(script_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.debug(f"스크립트 {script_name} 실행 불가: {e}")
            return None
        
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            log.debug(f"스크립트 {script_name} 타임아웃 ({self.timeout}s)")
            return None
        
        if proc.returncode != 0:
            log.debug(f"스크립트 {script_name} 오류 rc:{proc.returncode} stderr:{stderr.decode(errors='replace').strip()}")
            return None
        return stdout.decode("utf-8", errors="replace").strip()
