# ! 밸브 수리계산: 로깅 설정
# * 계산 모듈은 "hyvasim.<모듈명>" 자식 로거를 쓰고 이 설정을 상속합니다.

import logging
import sys
from typing import List, Optional

from constants import LOG_DATE_FORMAT, LOG_FORMAT, LOGGER_NAME


def _make_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    return handlers


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    ! "hyvasim" 로거 설정: 콘솔(stdout) + 선택적 파일(추가 모드)

    * 재호출하면 이전 핸들러를 닫고 교체 (중복 출력 없음)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in _make_handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("로깅 설정: level=%s, file=%s", logging.getLevelName(level), log_file or "-")
    return logger
