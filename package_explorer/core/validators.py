"""
Validación de entrada para requests del explorador de paquetes.

Este módulo proporciona validadores reutilizables para:
- Operación solicitada
- Configuración de acceso al config server
- Rutas de archivo relativas al contenido del paquete

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

import urllib.parse
from typing import Dict, Any, Optional, Tuple

from package_explorer.core.constants import (
    MAX_PATH_LENGTH,
    DANGEROUS_PATH_PATTERNS,
    SUPPORTED_URL_SCHEMES,
    Operations,
    ErrorCodes
)
from package_explorer.core.exceptions import (
    create_validation_error,
    create_config_error,
    create_security_error
)
from package_explorer.core.logger import get_logger, log_security_event

logger = get_logger(__name__)

# ========================================
# VALIDADORES DE ENTRADA PRINCIPAL
# ========================================

def validate_operation(operation: str) -> str:
    """
    Valida que la operación solicitada sea soportada.

    Args:
        operation: Operación a validar

    Returns:
        str: Operación normalizada a mayúsculas

    Raises:
        ValidationError: Si la operación es inválida

    Example:
        >>> validate_operation(" get_tree ")
        'GET_TREE'
    """
    if not operation or not isinstance(operation, str):
        raise create_validation_error(
            "El campo 'operation' es requerido y debe ser una cadena",
            field_name="operation",
            received_value=operation,
            error_code=ErrorCodes.MISSING_OPERATION
        )

    operation = operation.strip().upper()

    if operation not in Operations.ALL:
        available_ops = ", ".join(Operations.ALL)
        raise create_validation_error(
            f"Operación '{operation}' no soportada. Disponibles: {available_ops}",
            field_name="operation",
            received_value=operation,
            error_code=ErrorCodes.INVALID_OPERATION
        )

    logger.debug(f"Operation validated: {operation}")
    return operation


# ========================================
# VALIDADORES DE CONFIGURACIÓN
# ========================================

def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida la configuración de acceso al host remoto.

    Se requiere 'application_url' o 'config_host'. Las claves de
    tenant/application/environment/region/instance son opcionales.

    Args:
        config: Configuración a validar

    Returns:
        Dict[str, Any]: Configuración validada con espacios recortados

    Raises:
        ConfigurationError: Si la configuración es inválida

    Example:
        >>> validate_config({"config_host": "cfg.example.com"})
        {'config_host': 'cfg.example.com'}
    """
    if not isinstance(config, dict):
        raise create_config_error(
            "La configuración debe ser un diccionario",
            error_code=ErrorCodes.INVALID_CONFIG_TYPE
        )

    validated = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in config.items()
    }

    application_url = validated.get("application_url")
    config_host = validated.get("config_host")

    if not application_url and not config_host:
        logger.warning("Missing host configuration", extra={"received_keys": list(config.keys())})
        raise create_config_error(
            "Se requiere 'application_url' o 'config_host'",
            missing_keys=["application_url", "config_host"],
            error_code=ErrorCodes.MISSING_REQUIRED_KEYS
        )

    if application_url:
        _validate_url(application_url, "application_url")
    if config_host and "://" in config_host:
        _validate_url(config_host, "config_host")

    logger.debug("Config validated", extra={"config_keys": list(validated.keys())})
    return validated


def _validate_url(url: str, field_name: str) -> None:
    """Verifica esquema http(s) y host presente."""
    if not url.startswith(SUPPORTED_URL_SCHEMES):
        raise create_config_error(
            f"'{field_name}' debe usar http:// o https://",
            error_code=ErrorCodes.INVALID_URL,
            details={"field_name": field_name, "received_value": url}
        )

    parsed = urllib.parse.urlparse(url)
    if not parsed.netloc:
        raise create_config_error(
            f"'{field_name}' no contiene un host válido",
            error_code=ErrorCodes.INVALID_URL,
            details={"field_name": field_name, "received_value": url}
        )


# ========================================
# VALIDADORES DE RUTAS
# ========================================

def validate_file_path(path: str) -> str:
    """
    Valida y normaliza una ruta relativa al contenido del paquete.

    Elimina barras iniciales, rechaza traversal y caracteres de control.

    Args:
        path: Ruta solicitada (ej: "schemas/music.sd")

    Returns:
        str: Ruta limpia sin barra inicial

    Raises:
        ValidationError: Si la ruta está vacía o es demasiado larga
        SecurityError: Si se detecta un patrón peligroso
    """
    if not path or not isinstance(path, str):
        raise create_validation_error(
            "El campo 'path' es requerido y debe ser una cadena",
            field_name="path",
            received_value=path,
            error_code=ErrorCodes.MISSING_PATH
        )

    if len(path) > MAX_PATH_LENGTH:
        raise create_validation_error(
            f"Ruta demasiado larga: {len(path)} caracteres (máximo: {MAX_PATH_LENGTH})",
            field_name="path",
            received_value=len(path),
            error_code=ErrorCodes.PATH_TOO_LONG
        )

    for pattern in DANGEROUS_PATH_PATTERNS:
        if pattern in path:
            log_security_event(
                "path_traversal",
                f"Dangerous pattern in requested path: {path!r}",
                "WARNING",
                detected_pattern=repr(pattern)
            )
            raise create_security_error(
                "Ruta de archivo inválida",
                attack_type="path_traversal",
                detected_pattern=pattern,
                error_code=ErrorCodes.PATH_TRAVERSAL
            )

    if any(ord(char) < 32 for char in path):
        raise create_security_error(
            "La ruta contiene caracteres de control",
            attack_type="control_characters",
            error_code=ErrorCodes.INVALID_PATH
        )

    clean_path = path.strip().lstrip("/")
    if not clean_path:
        raise create_validation_error(
            "La ruta queda vacía tras la normalización",
            field_name="path",
            received_value=path,
            error_code=ErrorCodes.INVALID_PATH
        )

    return clean_path


# ========================================
# VALIDADORES COMPUESTOS
# ========================================

def validate_request_data(data: Dict[str, Any]) -> Tuple[str, Dict[str, Any], Optional[str]]:
    """
    Valida todos los datos de un request de manera integral.

    Args:
        data: Datos del request a validar

    Returns:
        Tuple[str, Dict, Optional[str]]: (operation, config, path)

    Raises:
        ValidationError: Si algún dato es inválido
        ConfigurationError: Si la configuración es inválida

    Example:
        >>> data = {
        ...     "operation": "GET_FILE",
        ...     "config": {"config_host": "cfg.example.com"},
        ...     "path": "schemas/music.sd"
        ... }
        >>> operation, config, path = validate_request_data(data)
    """
    if not isinstance(data, dict):
        raise create_validation_error(
            "Los datos del request deben ser un diccionario",
            field_name="request_data",
            received_value=type(data).__name__,
            error_code=ErrorCodes.INVALID_JSON
        )

    operation = validate_operation(data.get("operation"))

    config_data = data.get("config")
    if not config_data:
        raise create_validation_error(
            "El campo 'config' es requerido",
            field_name="config",
            received_value=config_data,
            error_code=ErrorCodes.MISSING_CONFIG
        )
    config = validate_config(config_data)

    path = None
    if operation in Operations.REQUIRES_PATH:
        path = validate_file_path(data.get("path"))

    logger.info("Request validation completed successfully", extra={
        "operation": operation,
        "has_path": bool(path),
        "config_keys": list(config.keys())
    })

    return operation, config, path
