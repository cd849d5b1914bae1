"""
Sistema de parseo de requests para AWS Lambda y testing local.

Este módulo maneja el parseo y validación de eventos desde múltiples fuentes:
- AWS Lambda (API Gateway, invocación directa)
- Testing local (archivos JSON, argumentos de línea de comandos)

Cada parser devuelve la operación, un cliente remoto listo para usar,
el resolvedor de URLs de la aplicación y la ruta (sólo para GET_FILE).

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from package_explorer.core.exceptions import ValidationError, create_validation_error
from package_explorer.core.constants import ErrorCodes
from package_explorer.core.logger import get_logger, set_request_context, log_request_lifecycle
from package_explorer.core.validators import validate_request_data
from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.managers.vespa_http_client import RequestsRemoteClient

logger = get_logger(__name__)

ParsedRequest = Tuple[str, IRemoteClient, ApplicationUrlResolver, Optional[str]]

USAGE_EXAMPLE = (
    "    python main.py --operation GET_TREE --config '{\"config_host\": \"cfg.example.com\"}'\n"
    "    python main.py --operation GET_FILE --config '{...}' --path schemas/music.sd"
)

# ========================================
# PARSERS PARA AWS LAMBDA
# ========================================

def parse_lambda_event(event: Dict[str, Any], context: Any) -> ParsedRequest:
    """
    Parsea y valida un evento completo de AWS Lambda.

    Args:
        event: Evento de AWS Lambda
        context: Contexto de AWS Lambda

    Returns:
        Tuple: (operation, client, resolver, path)

    Raises:
        ValidationError: Si el evento es inválido
        ConfigurationError: Si la configuración del host es inválida

    Example:
        >>> operation, client, resolver, path = parse_lambda_event(event, context)
        >>> if operation == "GET_TREE":
        >>>     summary = build_tree(client, resolver.content_url())
    """
    request_id = getattr(context, 'aws_request_id', 'unknown')

    set_request_context(
        request_id=request_id,
        environment="lambda",
        source="api_gateway"
    )

    log_request_lifecycle("PARSE_START", request_id, event_keys=list(event.keys()) if isinstance(event, dict) else [])

    try:
        body = _extract_event_body(event)
        parsed = _build_request(body)

        log_request_lifecycle("PARSE_SUCCESS", request_id, operation=parsed[0])
        return parsed

    except Exception as e:
        log_request_lifecycle("PARSE_ERROR", request_id,
                              error=str(e), error_type=type(e).__name__)
        raise


def _extract_event_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extrae el body del evento Lambda.

    Maneja:
    - API Gateway: {"body": "json_string"}
    - Invocación directa: {"body": {...}}
    - Testing: {...} (sin wrapper body)
    """
    if not isinstance(event, dict):
        raise create_validation_error(
            "El evento debe ser un diccionario",
            field_name="event",
            received_value=type(event).__name__
        )

    body = event.get("body")

    if body is None:
        if "operation" in event:
            logger.debug("Using event as body directly (direct invocation)")
            return event
        raise create_validation_error(
            "El evento debe contener un 'body' o campos de operación directos",
            field_name="body"
        )

    if isinstance(body, str):
        try:
            parsed_body = json.loads(body)
        except json.JSONDecodeError as e:
            raise create_validation_error(
                f"Body JSON inválido: {str(e)}",
                field_name="body",
                received_value=body[:100] + "..." if len(body) > 100 else body,
                error_code=ErrorCodes.INVALID_JSON
            )
        logger.debug("Parsed string body as JSON (API Gateway)")
        return parsed_body

    if isinstance(body, dict):
        logger.debug("Using dict body directly (direct invocation)")
        return body

    raise create_validation_error(
        "Formato de body no reconocido",
        field_name="body",
        received_value=type(body).__name__
    )


# ========================================
# PARSERS PARA TESTING LOCAL
# ========================================

def parse_local_event(event_file: Optional[str] = None, argv: Optional[List[str]] = None) -> ParsedRequest:
    """
    Parsea eventos para testing local desde archivo o argumentos.

    Args:
        event_file: Ruta al archivo de evento (opcional)
        argv: Argumentos de línea de comandos (default: sys.argv)

    Returns:
        Tuple: (operation, client, resolver, path)

    Example:
        >>> operation, client, resolver, path = parse_local_event("event.json")
    """
    argv = sys.argv if argv is None else argv
    request_id = f"local-{abs(hash(tuple(argv))) % 10000}"
    set_request_context(
        request_id=request_id,
        environment="local",
        source="file" if event_file else "args"
    )

    log_request_lifecycle("PARSE_START", request_id, event_file=event_file)

    try:
        if event_file:
            event_data = _load_event_from_file(event_file)
        else:
            event_data = _parse_command_line_args(argv)

        parsed = _build_request(event_data)

        log_request_lifecycle("PARSE_SUCCESS", request_id, operation=parsed[0])
        return parsed

    except Exception as e:
        log_request_lifecycle("PARSE_ERROR", request_id,
                              error=str(e), error_type=type(e).__name__)
        raise


def _load_event_from_file(file_path: str) -> Dict[str, Any]:
    """
    Carga evento desde archivo JSON.

    Raises:
        ValidationError: Si el archivo es inválido
        FileNotFoundError: Si el archivo no existe
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Archivo de evento no encontrado: {file_path}")

    if not path.is_file():
        raise ValidationError(f"La ruta no es un archivo: {file_path}")

    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise create_validation_error(
            f"Error parseando JSON en {file_path}: {str(e)}",
            field_name="event_file",
            received_value=file_path,
            error_code=ErrorCodes.INVALID_JSON
        )

    logger.debug(f"Loaded event from file: {file_path}")
    return data


def _parse_command_line_args(argv: List[str]) -> Dict[str, Any]:
    """
    Parsea argumentos de línea de comandos como evento.

    Formato esperado:
        python main.py --operation GET_TREE --config '{"config_host": "..."}' [--path ...]

    Raises:
        ValidationError: Si los argumentos son inválidos
    """
    if len(argv) < 2:
        raise create_validation_error(
            "No se pasaron argumentos suficientes.\n\n"
            "Formato esperado:\n" + USAGE_EXAMPLE,
            field_name="command_args"
        )

    if not argv[1].startswith('--'):
        return _load_event_from_file(argv[1])

    args: Dict[str, Any] = {}
    i = 1
    while i < len(argv):
        if argv[i].startswith('--'):
            key = argv[i][2:]
            if i + 1 < len(argv) and not argv[i + 1].startswith('--'):
                value = argv[i + 1]

                if key == 'config':
                    try:
                        value = json.loads(value)
                    except json.JSONDecodeError:
                        raise create_validation_error(
                            f"El valor de '--config' no es un JSON válido:\n    {value}",
                            field_name="config_arg",
                            error_code=ErrorCodes.INVALID_JSON
                        )

                args[key] = value
                i += 2
            else:
                raise create_validation_error(
                    f"Falta el valor para la opción '--{key}'\n\n"
                    "Uso correcto:\n" + USAGE_EXAMPLE,
                    field_name="command_args"
                )
        else:
            i += 1

    missing_keys = {"operation", "config"} - args.keys()
    if missing_keys:
        raise create_validation_error(
            f"Argumentos obligatorios faltantes: {', '.join(sorted(missing_keys))}\n\n"
            "Ejemplo válido:\n" + USAGE_EXAMPLE,
            field_name="command_args"
        )

    logger.debug(f"Parsed command line args: {list(args.keys())}")
    return args


# ========================================
# CONSTRUCCIÓN DEL REQUEST
# ========================================

def _build_request(event_data: Dict[str, Any]) -> ParsedRequest:
    operation, config, path = validate_request_data(event_data)

    set_request_context(operation=operation, has_path=bool(path))

    resolver = ApplicationUrlResolver(config)
    logger.info(f"Creating remote client for: {resolver.application_url()}")
    client = RequestsRemoteClient()

    return operation, client, resolver, path


def create_test_event(operation: str, config: Dict[str, Any],
                      path: Optional[str] = None) -> Dict[str, Any]:
    """
    Crea un evento de prueba.

    Example:
        >>> event = create_test_event("GET_TREE", {"config_host": "cfg.example.com"})
    """
    event_data = {
        "operation": operation,
        "config": config
    }
    if path:
        event_data["path"] = path
    return event_data
