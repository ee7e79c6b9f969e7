from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
from loguru import logger

# 표준 logging을 쓰는 라이브러리 (uvicorn, asyncio)
STDLIB_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "asyncio")

class InterceptHandler(logging.Handler):
    """표준 logging 레코드를 loguru로 넘기는 핸들러"""
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).bind(name=record.name).log(level, record.getMessage())

def _hook_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.propagate = False
    # 요청마다 찍히는 접근 로그는 경고 이상만
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

# launchd가 stdout을 monitor.log로 리다이렉트하므로 한 줄 포맷 유지
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {extra[name]} - {message}"

def setup_logging(log_level: str = "INFO", *, colorize: bool = True, log_file: Optional[str] = None) -> None:
    """
    loguru를 초기화합니다.

    콘솔 sink 하나와 (log_file이 있으면) 회전 파일 sink를 등록하고
    uvicorn/asyncio의 표준 logging 출력을 loguru로 모읍니다.
    """
    logger.remove()
    logger.configure(extra={"name": "lulu"})
    level = log_level.upper()
    logger.add(
        sink=lambda m: print(m, end="", flush=True),
        format=CONSOLE_FORMAT,
        colorize=colorize,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    if log_file:
        Path(log_file).expanduser().parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(Path(log_file).expanduser()),
            format=FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
    _hook_stdlib_logging()

def get_logger(name: str = "lulu", **ctx):
    """모듈 이름(과 선택적 컨텍스트)을 바인딩한 logger"""
    return logger.bind(name=name, **ctx)

def with_context(**ctx):
    """블록 안의 모든 로그에 컨텍스트를 붙입니다."""
    return logger.contextualize(**ctx)
