#!/usr/bin/env python3
"""
LuLu Monitor 테스트 실행 스크립트

영역 이름을 받아 해당 테스트 디렉터리만 pytest로 실행합니다.

    python run_tests.py                 # 전체
    python run_tests.py --type core -v  # core 단위 테스트만
    python run_tests.py --type integration
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

# 영역 → (pytest 인자, 설명)
TEST_TARGETS = {
    "all": (["tests/"], "전체 테스트"),
    "unit": (["tests/unit/"], "단위 테스트"),
    "core": (["tests/unit/core/"], "파서/컨텍스트/템플릿"),
    "adapters": (["tests/unit/adapters/"], "osascript/게이트웨이/동작 로그 어댑터"),
    "dispatch": (["tests/unit/dispatch/"], "분석 디스패처"),
    "notify": (["tests/unit/notify/"], "알림 추적기"),
    "orchestrators": (["tests/unit/orchestrators/"], "경보 감시 루프"),
    "server": (["tests/unit/server/"], "명령 서버"),
    "common": (["tests/unit/common/"], "재시도 유틸리티"),
    "integration": (["-m", "integration", "tests/"], "종단 간 통합 테스트"),
}


def build_command(target: str, verbose: bool, coverage: bool) -> list:
    args, _ = TEST_TARGETS[target]
    cmd = [sys.executable, "-m", "pytest", *args]
    if verbose:
        cmd.append("-v")
    if coverage:
        cmd += ["--cov=app", "--cov-report=term-missing"]
    return cmd


def main() -> int:
    parser = argparse.ArgumentParser(description="LuLu Monitor 테스트 실행")
    parser.add_argument("--type", choices=list(TEST_TARGETS), default="all", help="실행할 테스트 영역")
    parser.add_argument("--coverage", action="store_true", help="커버리지 측정 (pytest-cov)")
    parser.add_argument("-v", "--verbose", action="store_true", help="상세 출력")
    args = parser.parse_args()

    cmd = build_command(args.type, args.verbose, args.coverage)
    print(f"▶ {TEST_TARGETS[args.type][1]}: {' '.join(cmd)}")

    # 출력은 그대로 흘려보내 pytest 진행 상황을 실시간으로 보여줌
    returncode = subprocess.call(cmd, cwd=ROOT)
    print("✅ 성공" if returncode == 0 else f"❌ 실패 (exit {returncode})")
    return returncode


if __name__ == "__main__":
    sys.exit(main())
