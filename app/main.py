# app/main.py
import argparse, asyncio, signal, sys
from typing import List, Optional
import uvicorn
from app.settings import Settings, load_settings, discover_gateway
from app.core.context import AlertContext
from app.core.errors import ConfigError
from app.core.models import Action
from app.adapters.lulu import OsaScriptRunner, LuLuAlertSource, LuLuActionExecutor
from app.adapters.gateway.client import GatewayClient
from app.adapters.storage.action_log import ActionLog
from app.dispatch.analysis import AnalysisDispatcher
from app.notify.tracker import NotificationTracker
from app.orchestrators.monitor import AlertMonitor
from app.server.command import create_app
from app.observability.logging_setup import setup_logging, get_logger

log = get_logger("lulu.main")

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lulu-monitor", description="LuLu firewall alert monitor")
    parser.add_argument("action", nargs="?", choices=[a.value for a in Action],
                        help="경보 창에 동작을 한 번 실행하고 종료")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")
    parser.add_argument("--config", default=None, help="config.json 경로")
    return parser.parse_args(argv)

def build_runner(s: Settings) -> OsaScriptRunner:
    return OsaScriptRunner(s.monitor.scripts_dir, timeout=s.monitor.script_timeout_sec)

async def run_action(action: Action, s: Settings) -> int:
    """CLI 단발 실행: 성공 0, 실패 1"""
    executor = LuLuActionExecutor(build_runner(s))
    return 0 if await executor.execute(action) else 1

async def serve_commands(app, s: Settings) -> None:
    server = uvicorn.Server(uvicorn.Config(
        app,
        host=s.command_server.host,
        port=s.command_server.port,
        log_level="warning",
        log_config=None,
    ))
    log.info(f"📡 명령 서버 시작 http://{s.command_server.host}:{s.command_server.port}")
    try:
        await server.serve()
    except SystemExit:
        # uvicorn은 바인드 실패 시 sys.exit 호출
        log.warning(f"⚠️ 포트 {s.command_server.port} 사용 중, 명령 서버 비활성화 (다른 인스턴스 실행 중?)")

async def run_monitor(s: Settings) -> None:
    discover_gateway(s)
    runner = build_runner(s)
    source = LuLuAlertSource(runner)
    executor = LuLuActionExecutor(runner)
    context = AlertContext()
    action_log = ActionLog(s.storage.action_log_path)

    async with GatewayClient(s.gateway.base_url, s.gateway.token, s.gateway.timeout_sec,
                             channel=s.recipients.channel) as gateway:
        tracker = NotificationTracker(gateway, context, s.recipients)
        dispatcher = AnalysisDispatcher(gateway, tracker, context, s)
        monitor = AlertMonitor(source, dispatcher, context, poll_interval=s.monitor.poll_interval_sec)
        app = create_app(s, context=context, source=source, executor=executor,
                         tracker=tracker, action_log=action_log)

        http_task = asyncio.create_task(serve_commands(app, s))
        monitor_task = asyncio.create_task(monitor.start())
        if s.auto_execute.enabled:
            log.info(f"⚡ 자동 실행 모드 활성화 ({s.auto_execute.action.value})")

        stop = asyncio.Future()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
            except NotImplementedError: pass

        await stop
        log.info("종료 중")
        monitor.stop()
        monitor_task.cancel()
        http_task.cancel()
        await asyncio.gather(monitor_task, http_task, return_exceptions=True)
        await dispatcher.cancel_pending()

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO")
    if args.action:
        # 단발 실행은 수신자 설정이 필요 없음
        return asyncio.run(run_action(Action(args.action), Settings()))

    log.info("🔍 LuLu Monitor 시작")
    try:
        s = load_settings(args.config)
    except ConfigError as e:
        log.error(f"ERROR: {e}")
        return 1
    if args.verbose:
        s.observability.log_level = "DEBUG"
    setup_logging(s.observability.log_level, log_file=s.observability.log_file)

    asyncio.run(run_monitor(s))
    return 0

if __name__ == "__main__":
    sys.exit(main())
