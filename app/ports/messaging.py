"""
Analysis and messaging port interfaces.

This module defines the protocols for submitting an alert to the
remote analysis agent and for sending/editing recipient messages.
"""

from typing import Dict, List, Optional, Protocol

class AnalysisPort(Protocol):
    """원격 분석 에이전트 포트 인터페이스"""
    
    async def spawn_session(self, task: str, *, model: str, run_timeout_sec: int) -> Dict:
        """
        분석 작업을 제출합니다.
        
        Raises:
            GatewayError: 제출이 승인되지 않은 경우
        """
        ...

class MessagingPort(Protocol):
    """메시지 발송 포트 인터페이스"""
    
    async def send_message(self, target: str, message: str, *,
                           buttons: Optional[List[List[Dict[str, str]]]] = None) -> Optional[str]:
        """
        메시지를 발송하고 메시지 ID를 반환합니다.
        
        Raises:
            GatewayError: 발송 실패
        """
        ...
    
    async def edit_message(self, target: str, message_id: str, message: str) -> bool:
        """
        기존 메시지를 수정합니다.
        
        Returns:
            수정 성공 여부
        """
        ...
