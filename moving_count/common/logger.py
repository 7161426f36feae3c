"""moving_count 로깅.

- 프로세스 전체가 하나의 큐/리스너를 공유합니다. 호출 측은 QueueHandler에
  레코드를 넣고 바로 반환하며, 콘솔/파일 출력은 리스너 스레드가 담당합니다.
- 로거는 컴포넌트("app", "store", "infra")와 바인딩된 필드(series 등)를
  모든 레코드의 extra로 붙입니다.

    logger = PipelineLogger.get_logger("series", "app")
    log = logger.bind(series="page_views")
    log.warning("Sample rejected", extra={"remaining": 10.0})
"""

from __future__ import annotations

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from moving_count.config.settings import logging_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(component)s] %(message)s"

_log_queue: queue.Queue = queue.Queue()
_listener: QueueListener | None = None


def _build_handlers() -> list[logging.Handler]:
    formatter = logging.Formatter(_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if logging_settings.to_file:
        log_dir = Path(logging_settings.dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_dir / "moving_count.log",
            when="midnight",
            backupCount=7,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def _ensure_listener() -> None:
    global _listener
    if _listener is None:
        _listener = QueueListener(_log_queue, *_build_handlers(), respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown_logging)


def shutdown_logging() -> None:
    """큐에 남은 레코드를 모두 내보내고 리스너를 정지합니다."""
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None


class PipelineLogger:
    """컴포넌트/바인딩 필드를 extra로 싣는 얇은 logging.Logger 래퍼."""

    __slots__ = ("component", "context", "logger")

    @classmethod
    def get_logger(cls, name: str, component: str) -> PipelineLogger:
        """`<name>.<component>` 이름의 로거 반환 (핸들러는 최초 1회만 연결)"""
        _ensure_listener()
        std_logger = logging.getLogger(f"{name}.{component}")
        if not any(isinstance(h, QueueHandler) for h in std_logger.handlers):
            std_logger.addHandler(QueueHandler(_log_queue))
            std_logger.setLevel(logging_settings.level.upper())
        return cls(std_logger, component)

    def __init__(
        self,
        logger: logging.Logger,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.logger = logger
        self.component = component
        self.context: dict[str, Any] = context or {}

    def bind(self, **fields: Any) -> PipelineLogger:
        """fields를 모든 레코드에 싣는 자식 로거 (원본은 변경하지 않음)"""
        return PipelineLogger(self.logger, self.component, {**self.context, **fields})

    def _log(self, level: int, msg: str, extra: dict[str, Any] | None) -> None:
        if not self.logger.isEnabledFor(level):
            return
        payload = {"component": self.component, **self.context}
        if extra:
            payload.update(extra)
        self.logger.log(level, msg, extra=payload)

    def debug(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        self._log(logging.DEBUG, msg, extra)

    def info(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        self._log(logging.INFO, msg, extra)

    def warning(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        self._log(logging.WARNING, msg, extra)

    def error(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        self._log(logging.ERROR, msg, extra)
