"""
Alert source and action executor port interfaces.

This module defines the protocols for reading the firewall alert
window and for applying an action to it.
"""

from typing import List, Optional, Protocol
from app.core.models import Action

class AlertSourcePort(Protocol):
    """경보 창 조회 포트 인터페이스"""
    
    async def alert_present(self) -> bool:
        """
        경보 창이 떠 있는지 확인합니다.
        
        Returns:
            경보 창 존재 여부 (자동화 실패 시 False)
        """
        ...
    
    async def extract_alert(self) -> Optional[List[str]]:
        """
        경보 창의 모든 텍스트를 추출합니다.
        
        Returns:
            텍스트 목록 (순서 보장 없음) 또는 None
        """
        ...

class ActionExecutorPort(Protocol):
    """경보 창 동작 실행 포트 인터페이스"""
    
    async def execute(self, action: Action) -> bool:
        """
        경보 창에 동작을 적용합니다.
        
        Args:
            action: 적용할 동작
            
        Returns:
            실행 성공 여부
        """
        ...
