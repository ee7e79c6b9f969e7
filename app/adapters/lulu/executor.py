"""
LuLu alert action executor.

This module clicks the alert window buttons through one
automation script per action.
"""

from typing import Dict
from app.adapters.lulu.osascript import OsaScriptRunner
from app.core.models import Action
from app.observability import metrics
from app.observability.logging_setup import get_logger

log = get_logger("lulu.executor")

ACTION_SCRIPTS: Dict[Action, str] = {
    Action.ALLOW: "click-allow.scpt",
    Action.BLOCK: "click-block.scpt",
    Action.ALLOW_ONCE: "click-allow-once.scpt",
    Action.BLOCK_ONCE: "click-block-once.scpt",
}

class LuLuActionExecutor:
    """LuLu 경보 창 클릭 어댑터"""
    
    def __init__(self, runner: OsaScriptRunner):
        self.runner = runner
    
    async def execute(self, action: Action) -> bool:
        """
        경보 창에 동작을 적용합니다.
        
        Args:
            action: 적용할 동작
            
        Returns:
            클릭 스크립트 성공 여부
        """
        log.info(f"실행: {action.value}")
        result = await self.runner.run(ACTION_SCRIPTS[action])
        success = result is not None
        metrics.actions_executed.labels(action=action.value, result="ok" if success else "error").inc()
        if success:
            log.info(f"✅ {action.value} 클릭 완료")
        else:
            log.warning(f"❌ {action.value} 클릭 실패")
        return success
