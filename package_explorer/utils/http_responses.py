"""
Sistema de respuestas HTTP estandarizadas para AWS Lambda.

Este módulo proporciona funciones para crear respuestas HTTP consistentes:
- Respuestas de éxito con datos JSON (árbol, contenido, componentes, resumen)
- Respuestas de referencia al ZIP del paquete subido a S3
- Respuestas de error categorizadas desde excepciones del dominio

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

import json
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone

from package_explorer.core.constants import (
    COMMON_HEADERS,
    JSON_HEADERS,
    ARCHIVE_HEADERS,
    MetricNames
)
from package_explorer.core.exceptions import PackageExplorerError
from package_explorer.core.logger import get_logger, log_business_metric
from package_explorer.models.tree_node import (
    TreeSummary,
    FileContent,
    ArchiveFilesystem,
    PackageOverview
)
from package_explorer.utils.serializers import (
    serialize_tree_summary,
    serialize_file_content,
    serialize_archive_filesystem,
    serialize_overview
)

logger = get_logger(__name__)

# ========================================
# RESPUESTAS DE ÉXITO
# ========================================

def create_success_response(
    data: Dict[str, Any],
    status_code: int = 200,
    extra_headers: Optional[Dict[str, str]] = None,
    compress: bool = True
) -> Dict[str, Any]:
    """
    Crea una respuesta de éxito estandarizada con datos JSON.

    Args:
        data: Datos a incluir en la respuesta
        status_code: Código de estado HTTP (default: 200)
        extra_headers: Headers adicionales (opcional)
        compress: Si comprimir la respuesta JSON (default: True)

    Returns:
        Dict[str, Any]: Respuesta HTTP completa (statusCode, headers, body)

    Example:
        >>> response = create_success_response({"totalFiles": 3})
    """
    headers = JSON_HEADERS.copy()
    if extra_headers:
        headers.update(extra_headers)

    response_data = {
        **data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": True
    }

    if compress:
        json_body = json.dumps(response_data, ensure_ascii=False, separators=(',', ':'))
    else:
        json_body = json.dumps(response_data, ensure_ascii=False, indent=2)

    response_size = len(json_body.encode('utf-8'))
    log_business_metric(MetricNames.RESPONSE_SIZE, response_size, "bytes")

    logger.debug("Success response created", extra={
        "status_code": status_code,
        "response_size": response_size,
        "data_keys": list(data.keys()),
        "compressed": compress
    })

    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json_body
    }


def create_tree_response(
    summary: TreeSummary,
    markdown: str,
    files: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Respuesta para GET_TREE: árbol sin contenido, contadores, listado
    Markdown y rutas planas de archivos.
    """
    response_data = {
        **serialize_tree_summary(summary),
        "markdown": markdown,
        "files": files or []
    }
    log_business_metric(MetricNames.TREES_BUILT, 1, "count")
    return create_success_response(response_data)


def create_file_content_response(file_content: FileContent) -> Dict[str, Any]:
    """Respuesta para GET_FILE: par {url, content}."""
    return create_success_response(serialize_file_content(file_content))


def create_components_response(filesystem: ArchiveFilesystem) -> Dict[str, Any]:
    """Respuesta para GET_COMPONENTS; root es null si el JAR no pudo leerse."""
    return create_success_response(serialize_archive_filesystem(filesystem))


def create_overview_response(overview: PackageOverview) -> Dict[str, Any]:
    return create_success_response(serialize_overview(overview))


def create_reference_response(
    bucket_name: str,
    s3_path: str,
    filename: Optional[str] = None,
    archive_stats: Optional[Dict[str, int]] = None
) -> Dict[str, Any]:
    """
    Crea respuesta con la referencia al ZIP del paquete subido a S3.

    Args:
        bucket_name: Nombre del bucket de S3
        s3_path: Clave del objeto en el bucket
        filename: Nombre sugerido del archivo (opcional)
        archive_stats: Contadores del ZIP (opcional)

    Returns:
        Dict[str, Any]: Respuesta HTTP con bucket y clave del objeto

    Raises:
        ValueError: Si bucket_name o s3_path están vacíos
    """
    if not bucket_name or not bucket_name.strip():
        raise ValueError("bucket_name no puede estar vacío")

    if not s3_path or not s3_path.strip():
        raise ValueError("s3_path no puede estar vacío")

    bucket_name = bucket_name.strip()
    s3_path = s3_path.strip().lstrip('/')

    headers = ARCHIVE_HEADERS.copy()
    display_filename = filename or s3_path.split('/')[-1]
    safe_filename = _sanitize_filename_for_header(display_filename)
    headers["Content-Disposition"] = f'attachment; filename="{safe_filename}"'

    response_body: Dict[str, Any] = {
        "bucket_name": bucket_name,
        "s3_path": s3_path
    }
    if archive_stats:
        response_body["archive"] = archive_stats

    logger.info("S3 reference response created", extra={
        "bucket_name": bucket_name,
        "s3_path": s3_path,
        "display_filename": display_filename
    })

    return {
        "statusCode": 200,
        "headers": headers,
        "body": json.dumps(response_body),
        "isBase64Encoded": False
    }


# ========================================
# RESPUESTAS DE ERROR
# ========================================

def create_error_response(
    status_code: int,
    error_message: str,
    error_type: str = "error",
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Crea una respuesta de error estandarizada.

    Example:
        >>> response = create_error_response(
        ...     400, "Campo requerido faltante", "validation_error",
        ...     error_code="MISSING_CONFIG", details={"field_name": "config"}
        ... )
    """
    headers = JSON_HEADERS.copy()

    safe_details = _sanitize_error_details(details) if details else None

    error_data = {
        "error": error_message,
        "error_type": error_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": False
    }

    if error_code:
        error_data["error_code"] = error_code
    if safe_details:
        error_data["details"] = safe_details

    json_body = json.dumps(error_data, ensure_ascii=False, separators=(',', ':'))

    log_business_metric(MetricNames.ERRORS_TOTAL, 1, "count", error_type=error_type)

    logger.warning("Error response created", extra={
        "status_code": status_code,
        "error_type": error_type,
        "error_code": error_code,
        "has_details": bool(details)
    })

    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json_body
    }


def create_exception_response(exception: Exception) -> Dict[str, Any]:
    """
    Crea respuesta desde una excepción del sistema.

    Las excepciones del dominio conservan su http_status, código y
    detalles; las estándar se mapean a 400/404/504 y el resto a 500 sin
    exponer el mensaje original.
    """
    if isinstance(exception, PackageExplorerError):
        return create_error_response(
            status_code=exception.http_status,
            error_message=exception.message,
            error_type=_error_type_name(exception),
            error_code=exception.error_code,
            details=exception.details
        )

    elif isinstance(exception, ValueError):
        return create_error_response(
            status_code=400,
            error_message=str(exception),
            error_type="validation_error"
        )

    elif isinstance(exception, FileNotFoundError):
        return create_error_response(
            status_code=404,
            error_message="Archivo o recurso no encontrado",
            error_type="not_found_error"
        )

    elif isinstance(exception, TimeoutError):
        return create_error_response(
            status_code=504,
            error_message="Operación expiró por timeout",
            error_type="timeout_error"
        )

    else:
        logger.error("Unhandled exception converted to response", exc_info=exception)
        return create_error_response(
            status_code=500,
            error_message="Error interno del servidor",
            error_type="internal_error"
        )


def create_cors_preflight_response() -> Dict[str, Any]:
    """Respuesta para requests CORS preflight (OPTIONS)."""
    headers = COMMON_HEADERS.copy()
    headers["Access-Control-Max-Age"] = "86400"

    return {
        "statusCode": 200,
        "headers": headers,
        "body": ""
    }


# ========================================
# FUNCIONES AUXILIARES
# ========================================

def _error_type_name(exception: Exception) -> str:
    """ValidationError -> validation_error, RemoteFetchError -> remotefetch_error."""
    return type(exception).__name__.lower().replace('error', '_error')


def _sanitize_filename_for_header(filename: str) -> str:
    """Sanitiza nombre de archivo para header HTTP"""
    safe_chars = []
    for char in filename:
        if char.isalnum() or char in '.-_ ':
            safe_chars.append(char)
        else:
            safe_chars.append('_')

    sanitized = ''.join(safe_chars).strip()

    if len(sanitized) > 100:
        sanitized = sanitized[:95] + sanitized[-5:]

    return sanitized or "download"


def _sanitize_error_details(details: Dict[str, Any]) -> Dict[str, Any]:
    """Deja sólo los campos de detalle seguros de exponer."""
    sanitized = {}

    safe_fields = {
        'field_name', 'received_type', 'missing_keys', 'operation',
        'attack_type', 'entries_written', 'remote_status_code', 'url', 'cause'
    }

    for key, value in details.items():
        if key in safe_fields:
            sanitized[key] = value
        elif key == 'received_value':
            text = str(value)
            sanitized[key] = text[:50] + "..." if len(text) > 50 else text

    return sanitized
