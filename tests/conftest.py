"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처, 외부 협력자 대역을 제공합니다.
"""

from typing import Dict, List, Optional

import pytest

from app.core.context import AlertContext
from app.core.errors import GatewayError
from app.core.models import Action
from app.settings import Settings


class FakeAlertSource:
    """미리 정한 (존재 여부, 텍스트) 읽기를 순서대로 돌려주는 경보 창 대역"""

    def __init__(self, readings=None):
        self.readings = list(readings or [])
        self.current = (False, None)
        self.extract_calls = 0

    def show(self, texts: List[str]) -> None:
        self.current = (True, list(texts))

    def hide(self) -> None:
        self.current = (False, None)

    def _advance(self):
        if self.readings:
            self.current = self.readings.pop(0)

    async def alert_present(self) -> bool:
        self._advance()
        return self.current[0]

    async def extract_alert(self) -> Optional[List[str]]:
        self.extract_calls += 1
        return self.current[1]


class FakeExecutor:
    """클릭 호출을 기록하는 동작 실행 대역"""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls: List[Action] = []

    async def execute(self, action: Action) -> bool:
        self.calls.append(action)
        return self.result


class FakeGateway:
    """분석 제출과 메시지 발송/수정을 기록하는 게이트웨이 대역"""

    def __init__(self):
        self.spawned: List[str] = []
        self.sent: List[Dict] = []
        self.edits: List[Dict] = []
        self.spawn_error: Optional[GatewayError] = None
        self.failing_targets: set = set()
        self.edit_results: Dict[str, bool] = {}
        self._next_id = 100

    async def spawn_session(self, task: str, *, model: str, run_timeout_sec: int) -> Dict:
        if self.spawn_error:
            raise self.spawn_error
        self.spawned.append(task)
        return {"ok": True}

    async def send_message(self, target, message, *, buttons=None):
        if target in self.failing_targets:
            raise GatewayError("Gateway returned 502", status=502)
        self._next_id += 1
        self.sent.append({"target": target, "message": message, "buttons": buttons,
                          "message_id": str(self._next_id)})
        return str(self._next_id)

    async def edit_message(self, target, message_id, message) -> bool:
        self.edits.append({"target": target, "message_id": message_id, "message": message})
        return self.edit_results.get(target, True)


@pytest.fixture
def settings(tmp_path):
    """테스트용 설정 (임시 디렉터리 사용)"""
    s = Settings()
    s.recipients.ids = ["111", "222"]
    s.recipients.names = {"111": "Alice", "222": "Bob"}
    s.recipients.language = "en-US"
    s.dispatch.artifact_path = str(tmp_path / "analysis.txt")
    s.dispatch.fallback_path = str(tmp_path / "fallback" / "lulu-alert.txt")
    s.dispatch.artifact_timeout_sec = 1.0
    s.dispatch.artifact_poll_sec = 0.01
    s.storage.logs_dir = str(tmp_path / "logs")
    s.gateway.config_paths = [str(tmp_path / "missing.json")]
    return s


@pytest.fixture
def context():
    return AlertContext()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def alert_source():
    return FakeAlertSource()


@pytest.fixture
def lulu_texts():
    """LuLu 경보 창에서 추출한 전형적인 텍스트"""
    return ["LuLu Alert", "Process:", "curl", "pid:", "4821", "path:", "/usr/bin/curl", "443 (TCP)"]


# pytest 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "integration: 통합 테스트 마커"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 통합 테스트 마커 추가
        if "integration" in item.name or "end_to_end" in item.name:
            item.add_marker(pytest.mark.integration)
