# app/settings.py
from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional
from pydantic import BaseModel, Field
from app.core.errors import ConfigError
from app.core.models import Action
from app.observability.logging_setup import get_logger

log = get_logger("lulu.settings")

PROJECT_DIR = Path(__file__).resolve().parent.parent
HOME = Path.home()

# 자동 실행에 허용되는 동작 (차단은 사람이 결정)
AUTO_EXECUTE_ACTIONS = (Action.ALLOW, Action.ALLOW_ONCE)

class Recipients(BaseModel):
    ids: List[str] = Field(default_factory=list)
    names: Dict[str, str] = Field(default_factory=dict)
    channel: str = "telegram"
    language: str = "zh-TW"                   # zh-TW | ko-KR | en-US

    def display_name(self, recipient_id: Optional[str]) -> str:
        if not recipient_id:
            return "unknown"
        return self.names.get(recipient_id, recipient_id)

class AutoExecute(BaseModel):
    enabled: bool = False
    action: Action = Action.ALLOW_ONCE

class Gateway(BaseModel):
    host: str = "127.0.0.1"
    port: int = 18789
    token: Optional[str] = None
    timeout_sec: float = 10.0
    model: str = "haiku"
    run_timeout_sec: int = 30
    config_paths: List[str] = Field(default_factory=lambda: [
        str(HOME / ".openclaw" / "openclaw.json"),
        str(HOME / ".openclaw" / "clawdbot.json"),
        str(HOME / ".clawdbot" / "clawdbot.json"),
    ])

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

class Monitor(BaseModel):
    poll_interval_sec: float = 1.0
    script_timeout_sec: float = 10.0
    scripts_dir: str = str(PROJECT_DIR / "scripts")

class Dispatch(BaseModel):
    artifact_path: str = str(HOME / ".openclaw" / "lulu-analysis.txt")
    fallback_path: str = str(HOME / ".openclaw" / "lulu-alert.txt")
    artifact_timeout_sec: float = 30.0
    artifact_poll_sec: float = 0.5

class CommandServer(BaseModel):
    host: str = "127.0.0.1"
    port: int = 4441
    logs_tail: int = 50

    @property
    def callback_url(self) -> str:
        return f"http://{self.host}:{self.port}/callback"

class Storage(BaseModel):
    logs_dir: str = str(PROJECT_DIR / "logs")

    @property
    def action_log_path(self) -> str:
        return str(Path(self.logs_dir) / "actions.jsonl")

class Observability(BaseModel):
    metrics_enabled: bool = True
    service_name: str = "LuLu Monitor"
    build_version: str = "0.2.0"
    log_level: str = "INFO"
    log_file: Optional[str] = None           # launchd 없이 실행할 때의 회전 로그

class Settings(BaseModel):
    recipients: Recipients = Field(default_factory=Recipients)
    auto_execute: AutoExecute = Field(default_factory=AutoExecute)
    gateway: Gateway = Field(default_factory=Gateway)
    monitor: Monitor = Field(default_factory=Monitor)
    dispatch: Dispatch = Field(default_factory=Dispatch)
    command_server: CommandServer = Field(default_factory=CommandServer)
    storage: Storage = Field(default_factory=Storage)
    observability: Observability = Field(default_factory=Observability)

    @classmethod
    def load(cls, config_path: Optional[str] = None,
             env: Optional[Mapping[str, str]] = None) -> "Settings":
        return load_settings(config_path, env)

def _read_json(path: Path) -> Optional[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None

def apply_local_config(s: Settings, data: dict) -> None:
    """config.json 내용을 설정에 반영합니다."""
    if isinstance(data.get("autoExecute"), bool):
        s.auto_execute.enabled = data["autoExecute"]
        log.debug(f"자동 실행 모드: {'ENABLED' if s.auto_execute.enabled else 'disabled'}")

    raw_action = data.get("autoExecuteAction")
    if raw_action is not None:
        try:
            action = Action.parse(raw_action)
        except ValueError:
            action = None
        if action in AUTO_EXECUTE_ACTIONS:
            s.auto_execute.action = action
        else:
            log.warning(f"autoExecuteAction 무시됨 (allow 또는 allow-once만 허용): {raw_action}")

    # telegramIds (배열) 또는 telegramId (단일) 모두 지원
    if isinstance(data.get("telegramIds"), list):
        s.recipients.ids = [str(i) for i in data["telegramIds"]]
    elif data.get("telegramId"):
        s.recipients.ids = [str(data["telegramId"])]

    if isinstance(data.get("telegramNames"), dict):
        s.recipients.names = {str(k): str(v) for k, v in data["telegramNames"].items()}

    if data.get("language"):
        s.recipients.language = str(data["language"])

def apply_env(s: Settings, env: Mapping[str, str]) -> None:
    """환경변수 오버라이드"""
    if env.get("LULU_TELEGRAM_ID"):
        s.recipients.ids = [i.strip() for i in env["LULU_TELEGRAM_ID"].split(",") if i.strip()]
        log.debug(f"환경변수에서 수신자 로드: {s.recipients.ids}")
    if env.get("LULU_COMMAND_PORT"):
        s.command_server.port = int(env["LULU_COMMAND_PORT"])
    if env.get("LOG_LEVEL"):
        s.observability.log_level = env["LOG_LEVEL"].upper()
    if env.get("LULU_LOG_FILE"):
        s.observability.log_file = env["LULU_LOG_FILE"]

def load_settings(config_path: Optional[str] = None,
                  env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    계층형 설정을 로드합니다. (기본값 → config.json → 환경변수)

    Args:
        config_path: config.json 경로 (None이면 LULU_CONFIG 또는 프로젝트 루트)
        env: 환경변수 매핑 (None이면 os.environ)

    Returns:
        설정

    Raises:
        ConfigError: 수신자가 하나도 설정되지 않은 경우
    """
    env = os.environ if env is None else env
    s = Settings()

    path = Path(config_path or env.get("LULU_CONFIG") or PROJECT_DIR / "config.json")
    data = _read_json(path)
    if data is None:
        log.debug(f"로컬 설정 파일 없음, 기본값 사용: {path}")
    else:
        try:
            apply_local_config(s, data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"잘못된 설정 파일 {path}: {e}") from e

    try:
        apply_env(s, env)
    except ValueError as e:
        raise ConfigError(f"잘못된 환경변수: {e}") from e

    if not s.recipients.ids:
        raise ConfigError(
            "telegramIds is required. Set telegramId/telegramIds in config.json "
            "or LULU_TELEGRAM_ID env var."
        )
    log.debug(f"수신자: {s.recipients.ids}")
    return s

def discover_gateway(s: Settings) -> bool:
    """
    게이트웨이 설정 파일에서 포트와 토큰을 찾습니다. 처음 읽히는 파일을 사용합니다.

    Returns:
        설정 파일을 찾았는지 여부
    """
    for candidate in s.gateway.config_paths:
        data = _read_json(Path(candidate).expanduser())
        if data is None:
            continue
        if isinstance(data.get("port"), int):
            s.gateway.port = data["port"]
            log.debug(f"게이트웨이 포트 로드: {s.gateway.port}")
        gateway = data.get("gateway")
        auth = gateway.get("auth") if isinstance(gateway, dict) else None
        token = auth.get("token") if isinstance(auth, dict) else None
        if isinstance(token, str) and token:
            s.gateway.token = token
            log.debug(f"게이트웨이 토큰 로드: {candidate}")
        return True
    log.debug("게이트웨이 설정 파일을 찾을 수 없음")
    return False
