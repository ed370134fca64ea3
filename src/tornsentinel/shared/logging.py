"""
구조적 로깅 시스템 for Torn Sentinel.

이 모듈은 에러 발생 시 컨텍스트 정보를 포함하여 구조화된 로그를 기록하는
헬퍼 함수들을 제공합니다. API 키는 어떤 경우에도 로그에 기록되지 않습니다.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from tornsentinel.shared.constants import Logging, TornAPIConfig
from tornsentinel.shared.errors import ErrorContext, TornSentinelError

_KEY_QUERY_PATTERN = re.compile(rf"(?<!\w)({TornAPIConfig.KEY_PARAM}=)[^&\s]+")


def redact_credential(text: str) -> str:
    """
    문자열에 포함된 ``key=...`` 쿼리 파라미터를 가립니다.

    Args:
        text: URL 또는 로그 메시지

    Returns:
        자격 증명이 제거된 문자열
    """
    return _KEY_QUERY_PATTERN.sub(rf"\g<1>{Logging.REDACTED}", text)


class StructuredFormatter(logging.Formatter):
    """
    JSON 형태로 구조화된 로그를 출력하는 포맷터.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        로그 레코드를 JSON 형태로 포맷팅합니다.

        Args:
            record: 로깅 레코드

        Returns:
            JSON 형태로 포맷팅된 로그 문자열
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_credential(record.getMessage()),
        }

        # 추가 컨텍스트 정보가 있으면 포함
        for attr in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, attr):
                log_entry[attr] = getattr(record, attr)

        if record.exc_info:
            log_entry["exception"] = redact_credential(
                self.formatException(record.exc_info)
            )

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Rich Console을 생성합니다 (커스텀 테마 포함).
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "log.time": "dim cyan",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = Logging.DEFAULT_LOGGER_NAME,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    구조화된 로깅을 위한 로거를 설정합니다.

    Args:
        name: 로거 이름 (기본값: "tornsentinel")
        level: 로그 레벨 (기본값: "INFO")
        log_file: 로그 파일 경로 (선택사항, 항상 JSON 형식)
        use_rich_console: Rich 기반 콘솔 출력 사용 여부 (기본값: True)

    Returns:
        설정된 로거 인스턴스
    """
    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있으면 제거 (중복 방지)
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format=Logging.TIME_FORMAT,
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _context_to_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: TornSentinelError,
    operation: str | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
    *,
    level: int = logging.ERROR,
) -> None:
    """
    TornSentinelError 객체를 받아 구조화된 에러 로그를 기록합니다.

    Args:
        logger: 로거 인스턴스
        error: TornSentinelError 객체
        operation: 작업 이름 (선택사항)
        context: 추가 컨텍스트 정보 (선택사항)
        level: 로그 레벨 (기본값: ERROR)
    """
    # 에러의 기본 컨텍스트 정보 (safe_dict로 PII 마스킹)
    context_dict: dict[str, Any] = error.context.safe_dict()
    context_dict.update(_context_to_dict(context))

    logger.log(
        level,
        redact_credential(error.message),
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None and level >= logging.ERROR,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    성공적인 작업에 대한 정보 로그를 기록합니다.

    Args:
        logger: 로거 인스턴스
        operation: 작업 이름
        duration_ms: 소요 시간 (밀리초)
        result_info: 결과 정보 (선택사항)
        context: 컨텍스트 정보 (선택사항)
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    """
    작업 시작 시점 로그를 기록합니다.

    Args:
        logger: 로거 인스턴스
        operation: 작업 이름
        context: 컨텍스트 정보 (선택사항)
    """
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={
            "operation": operation,
            "context": context or {},
        },
    )


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    method: str = "GET",
    status_code: int | None = None,
    duration_ms: float | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """
    API 호출에 대한 로그를 기록합니다.

    엔드포인트에 API 키가 포함되어 있으면 기록 전에 가려집니다.

    Args:
        logger: 로거 인스턴스
        endpoint: API 엔드포인트
        method: HTTP 메서드 (기본값: "GET")
        status_code: HTTP 상태 코드 (선택사항)
        duration_ms: 소요 시간 (밀리초, 선택사항)
        context: 컨텍스트 정보 (선택사항)
    """
    safe_endpoint = redact_credential(endpoint)
    api_context: dict[str, Any] = {
        "endpoint": safe_endpoint,
        "method": method,
    }

    if status_code:
        api_context["status_code"] = status_code
    if duration_ms:
        api_context["duration_ms"] = duration_ms
    if context:
        api_context.update(context)

    level = logging.DEBUG
    message = f"API call to {safe_endpoint}"

    if status_code:
        if status_code >= 400:
            level = logging.WARNING
            message += f" failed with status {status_code}"
        else:
            message += f" succeeded with status {status_code}"

    logger.log(
        level,
        message,
        extra={
            "operation": "api_call",
            "context": api_context,
        },
    )


__all__ = [
    "StructuredFormatter",
    "log_api_call",
    "log_operation_error",
    "log_operation_start",
    "log_operation_success",
    "redact_credential",
    "setup_structured_logger",
]
