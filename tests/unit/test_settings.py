"""
설정 로드 테스트

이 모듈은 계층형 설정 (기본값 → config.json → 환경변수)과
게이트웨이 설정 탐색을 테스트합니다.
"""

import json

import pytest

from app.core.errors import ConfigError
from app.core.models import Action
from app.settings import Settings, discover_gateway, load_settings


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestLoadSettings:
    """load_settings 테스트"""

    def test_defaults(self):
        s = Settings()
        assert s.recipients.language == "zh-TW"
        assert s.gateway.port == 18789
        assert s.command_server.port == 4441
        assert s.monitor.poll_interval_sec == 1.0
        assert s.auto_execute.enabled is False
        assert s.auto_execute.action is Action.ALLOW_ONCE

    def test_config_file(self, tmp_path):
        path = _write(tmp_path / "config.json", {
            "telegramIds": [111, "222"],
            "telegramNames": {"111": "Alice"},
            "autoExecute": True,
            "autoExecuteAction": "allow",
            "language": "en-US",
        })
        s = load_settings(path, env={})

        assert s.recipients.ids == ["111", "222"]
        assert s.recipients.names == {"111": "Alice"}
        assert s.auto_execute.enabled is True
        assert s.auto_execute.action is Action.ALLOW
        assert s.recipients.language == "en-US"

    def test_single_telegram_id(self, tmp_path):
        path = _write(tmp_path / "config.json", {"telegramId": 333})
        assert load_settings(path, env={}).recipients.ids == ["333"]

    def test_block_not_allowed_for_auto_execute(self, tmp_path):
        """자동 실행 동작은 allow/allow-once만 허용"""
        path = _write(tmp_path / "config.json", {"telegramId": "1", "autoExecuteAction": "block"})
        s = load_settings(path, env={})
        assert s.auto_execute.action is Action.ALLOW_ONCE

    def test_env_overrides_file(self, tmp_path):
        path = _write(tmp_path / "config.json", {"telegramIds": ["111"]})
        s = load_settings(path, env={
            "LULU_TELEGRAM_ID": "444, 555,",
            "LULU_COMMAND_PORT": "5000",
            "LOG_LEVEL": "debug",
            "LULU_LOG_FILE": "/tmp/lulu/monitor.log",
        })

        assert s.recipients.ids == ["444", "555"]
        assert s.command_server.port == 5000
        assert s.observability.log_level == "DEBUG"
        assert s.observability.log_file == "/tmp/lulu/monitor.log"

    def test_config_path_from_env(self, tmp_path):
        path = _write(tmp_path / "custom.json", {"telegramId": "777"})
        s = load_settings(env={"LULU_CONFIG": path})
        assert s.recipients.ids == ["777"]

    def test_missing_recipients(self, tmp_path):
        with pytest.raises(ConfigError, match="telegramIds is required"):
            load_settings(str(tmp_path / "missing.json"), env={})

    def test_corrupt_file_uses_defaults(self, tmp_path):
        """파싱할 수 없는 파일은 무시"""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        s = load_settings(str(path), env={"LULU_TELEGRAM_ID": "1"})
        assert s.recipients.ids == ["1"]

    def test_invalid_port_env(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(str(tmp_path / "missing.json"),
                          env={"LULU_TELEGRAM_ID": "1", "LULU_COMMAND_PORT": "abc"})

    def test_display_name(self):
        s = Settings()
        s.recipients.names = {"111": "Alice"}
        assert s.recipients.display_name("111") == "Alice"
        assert s.recipients.display_name("999") == "999"
        assert s.recipients.display_name(None) == "unknown"


class TestDiscoverGateway:
    """게이트웨이 설정 탐색 테스트"""

    def test_first_readable_file_wins(self, tmp_path):
        first = _write(tmp_path / "openclaw.json", {"port": 19000, "gateway": {"auth": {"token": "t1"}}})
        second = _write(tmp_path / "clawdbot.json", {"port": 19001, "gateway": {"auth": {"token": "t2"}}})
        s = Settings()
        s.gateway.config_paths = [str(tmp_path / "missing.json"), first, second]

        assert discover_gateway(s) is True
        assert s.gateway.port == 19000
        assert s.gateway.token == "t1"
        assert s.gateway.base_url == "http://127.0.0.1:19000"

    def test_no_file(self, tmp_path):
        s = Settings()
        s.gateway.config_paths = [str(tmp_path / "missing.json")]

        assert discover_gateway(s) is False
        assert s.gateway.port == 18789
        assert s.gateway.token is None

    def test_non_integer_port_ignored(self, tmp_path):
        path = _write(tmp_path / "openclaw.json", {"port": "19000"})
        s = Settings()
        s.gateway.config_paths = [path]

        assert discover_gateway(s) is True
        assert s.gateway.port == 18789

    @pytest.mark.parametrize("gateway", ["token", ["x"], {"auth": "token"}, {"auth": {"token": 5}}])
    def test_malformed_gateway_section(self, tmp_path, gateway):
        """gateway/auth가 객체가 아니면 토큰 없이 포트만 사용"""
        path = _write(tmp_path / "openclaw.json", {"port": 19000, "gateway": gateway})
        s = Settings()
        s.gateway.config_paths = [path]

        assert discover_gateway(s) is True
        assert s.gateway.port == 19000
        assert s.gateway.token is None
