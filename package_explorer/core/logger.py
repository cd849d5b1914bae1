"""
Sistema de logging para AWS Lambda y ejecución local.

Este módulo proporciona un sistema de logging centralizado con:
- Configuración única por proceso (loggers cacheados)
- Logging estructurado para CloudWatch y análisis
- Decoradores para métricas automáticas de duración
- Contexto de request automático

El logging es un efecto lateral: ningún dato vuelve desde aquí
hacia los algoritmos de recorrido.

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

import logging
import time
import json
import functools
from typing import Dict, Any, Optional, Union, Callable
from datetime import datetime

from package_explorer.core.constants import (
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_SIMPLE_FORMAT,
    IS_LAMBDA,
    ENABLE_DEBUG_METRICS,
    ENABLE_DETAILED_LOGGING,
    MetricNames
)

# ========================================
# CONFIGURACIÓN GLOBAL DE LOGGING
# ========================================

# Cache de loggers configurados para evitar reconfiguración
_configured_loggers: Dict[str, logging.Logger] = {}

# Contexto global de request (se actualiza por request)
_request_context: Dict[str, Any] = {}

# Campos estándar de LogRecord que no se repiten como extra
_STANDARD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'stack_info', 'exc_info', 'exc_text',
    'message', 'asctime'
}


def get_logger(name: str = __name__) -> logging.Logger:
    """
    Obtiene o crea un logger configurado una única vez.

    Args:
        name: Nombre del logger (típicamente __name__ del módulo)

    Returns:
        logging.Logger: Logger configurado y listo para uso

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Message", extra={"url": "http://host/content/"})
    """
    if name in _configured_loggers:
        return _configured_loggers[name]

    logger = logging.getLogger(name)

    if logger.handlers:
        _configured_loggers[name] = logger
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    handler = logging.StreamHandler()
    if not IS_LAMBDA and ENABLE_DETAILED_LOGGING:
        handler.setLevel(logging.DEBUG)
    handler.setFormatter(_create_formatter())

    logger.addHandler(handler)
    logger.propagate = False  # Evitar logs duplicados

    _configured_loggers[name] = logger
    return logger


def _create_formatter() -> logging.Formatter:
    """Crea formatter apropiado según LOG_FORMAT"""
    if LOG_FORMAT == 'structured':
        return StructuredFormatter()
    return logging.Formatter(LOG_SIMPLE_FORMAT)


class StructuredFormatter(logging.Formatter):
    """
    Formatter para logging estructurado.

    Genera líneas con campos separados por pipes, incluyendo el
    contexto de request y los campos pasados vía ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"[{record.levelname}]",
            self._format_timestamp(record.created),
            f"function={record.funcName}",
            f"line={record.lineno}",
            f"module={record.name}"
        ]

        for key, value in _request_context.items():
            parts.append(f"{key}={value}")

        for key, value in self._extract_extra_fields(record).items():
            parts.append(f"{key}={value}")

        parts.append(f"message={record.getMessage()}")

        if record.exc_info:
            parts.append(f"exception={self.formatException(record.exc_info)}")

        return " | ".join(parts)

    def _format_timestamp(self, created: float) -> str:
        dt = datetime.fromtimestamp(created)
        if IS_LAMBDA:
            # CloudWatch agrega la fecha
            return dt.strftime("%H:%M:%S.%f")[:-3]
        return dt.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

    def _extract_extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        extra = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_FIELDS:
                continue
            if isinstance(value, (dict, list)):
                extra[key] = json.dumps(value, default=str)
            else:
                extra[key] = str(value)
        return extra


# ========================================
# CONTEXTO DE REQUEST
# ========================================

def set_request_context(**kwargs) -> None:
    """
    Establece contexto global para el request actual.

    Args:
        **kwargs: Campos de contexto (request_id, operation, etc.)
    """
    _request_context.update(kwargs)


def clear_request_context() -> None:
    """Limpia el contexto del request actual"""
    _request_context.clear()


# ========================================
# DECORADORES DE PERFORMANCE
# ========================================

def log_performance(func: Optional[Callable] = None, *,
                    operation_name: Optional[str] = None,
                    log_level: int = logging.INFO) -> Callable:
    """
    Decorator para logging automático de duración.

    Mide el tiempo de ejecución, registra inicio/fin y re-lanza
    cualquier excepción sin modificarla.

    Args:
        func: Función a decorar (automático en uso como @log_performance)
        operation_name: Nombre personalizado para la operación
        log_level: Nivel de log para las líneas PERF_*

    Example:
        >>> @log_performance(operation_name="get_tree")
        >>> def handle_get_tree(client, app_url):
        >>>     ...
    """
    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = get_logger(f.__module__)
            context = {
                "operation": operation_name or f.__name__,
                "caller_module": f.__module__
            }
            start_time = time.time()
            logger.log(log_level, "PERF_START", extra=context)

            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error("PERF_ERROR", extra={
                    **context,
                    "duration_seconds": round(time.time() - start_time, 3),
                    "status": "error",
                    "error_type": type(e).__name__,
                    "error_message": str(e)
                })
                raise

            duration = time.time() - start_time
            logger.log(log_level, "PERF_SUCCESS", extra={
                **context,
                "duration_seconds": round(duration, 3),
                "status": "success"
            })
            log_business_metric(MetricNames.REQUEST_DURATION, duration, "seconds")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)


# ========================================
# LOGGING ESPECIALIZADO
# ========================================

def log_remote_call(operation: str, url: str, **kwargs) -> None:
    """
    Logea llamadas HTTP al host remoto con contexto estructurado.

    Args:
        operation: Tipo de llamada (list, text, bytes, stream)
        url: URL solicitada
        **kwargs: Contexto adicional (status_code, size, etc.)
    """
    logger = get_logger("remote_calls")
    logger.debug("Remote call", extra={
        "event_type": "REMOTE_CALL",
        "remote_operation": operation,
        "url": url,
        **kwargs
    })


def log_security_event(event_type: str, details: str, severity: str = "WARNING",
                       **kwargs) -> None:
    """
    Logea eventos de seguridad para auditoría.

    Args:
        event_type: Tipo de evento (path_traversal, invalid_input, etc.)
        details: Detalles del evento
        severity: Severidad (INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Contexto adicional
    """
    logger = get_logger("security")
    level = getattr(logging, severity.upper(), logging.WARNING)
    logger.log(level, f"Security event: {event_type}", extra={
        "event_type": "SECURITY_EVENT",
        "security_event_type": event_type,
        "details": details,
        "severity": severity,
        **kwargs
    })


def log_business_metric(metric_name: str, value: Union[int, float],
                        unit: str = "count", **kwargs) -> None:
    """
    Logea métricas de negocio para dashboards y alertas.

    Example:
        >>> log_business_metric("archive_entries", 42, "count")
    """
    logger = get_logger("metrics")
    logger.info(f"Metric: {metric_name}={value}{unit}", extra={
        "event_type": "BUSINESS_METRIC",
        "metric_name": metric_name,
        "metric_value": value,
        "metric_unit": unit,
        **kwargs
    })


def log_request_lifecycle(phase: str, request_id: str, **kwargs) -> None:
    """
    Logea fases del ciclo de vida del request (START, PARSE_SUCCESS, ERROR...).
    """
    logger = get_logger("request_lifecycle")

    # Claves reservadas por LogRecord no pueden ir en extra
    safe_context = {
        (f"context_{k}" if k in _STANDARD_FIELDS else k): v
        for k, v in kwargs.items()
    }

    context = {
        "event_type": "REQUEST_LIFECYCLE",
        "lifecycle_phase": phase,
        "request_id": request_id,
        **safe_context
    }

    if phase.endswith("ERROR"):
        logger.error(f"Request {phase}: {request_id}", extra=context)
    else:
        logger.info(f"Request {phase}: {request_id}", extra=context)


def log_exception_with_context(e: Exception, context: Optional[Dict[str, Any]] = None,
                               logger_name: str = "exceptions") -> None:
    """
    Logea excepciones con contexto enriquecido.

    Si la excepción es del dominio (tiene ``to_dict``) se incluyen
    sus detalles.
    """
    logger = get_logger(logger_name)

    exc_context = {
        "event_type": "EXCEPTION",
        "exception_type": type(e).__name__,
        "exception_message": str(e),
        **(context or {})
    }
    if hasattr(e, 'to_dict'):
        exc_context.update({f"error_{k}": v for k, v in e.to_dict().items()})

    logger.error("Exception occurred", exc_info=e, extra=exc_context)


def debug_log_if_enabled(message: str, **kwargs) -> None:
    """Logea mensaje de debug solo si las métricas de debug están habilitadas."""
    if ENABLE_DEBUG_METRICS:
        get_logger("debug").debug(message, extra=kwargs)
