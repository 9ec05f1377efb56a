# 구조화 로깅 설정 (JSON 한 줄 로그)

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

# LogRecord 기본 속성 (extra로 넘긴 필드만 골라내기 위해 제외)
_RESERVED = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "exc_info", "exc_text",
        "thread", "threadName", "taskName", "message", "asctime",
    )
)


class JSONFormatter(logging.Formatter):
    """timestamp / level / logger / message + extra 필드를 JSON으로 출력."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED:
                continue
            if isinstance(value, (str, int, float, bool, type(None))):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(
    log_format: Optional[str] = None,
    log_level: Optional[str] = None,
    logger_name: Optional[str] = "tripcommit",
) -> logging.Logger:
    """
    앱 로거 설정. 기동 시 한 번 호출.

    - log_format: "json" 또는 "text" (기본값: LOG_FORMAT 환경 변수)
    - log_level: 기본값 LOG_LEVEL 환경 변수
    """
    log_format = log_format or LOG_FORMAT
    level_name = (log_level or LOG_LEVEL).upper()

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)

    return logger
