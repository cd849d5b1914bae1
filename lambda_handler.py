"""
AWS Lambda Handler del explorador de paquetes de aplicación
===========================================================

Este módulo actúa como router principal para AWS Lambda. La lógica de
negocio vive en módulos especializados:

- Parsing y validación:       package_explorer.utils.request_parser
- Lógica de negocio:          package_explorer.handlers.*
- Recorridos remotos:         package_explorer.services.*
- Respuestas HTTP:            package_explorer.utils.http_responses
- Logging y métricas:         package_explorer.core.logger
- Manejo de errores:          package_explorer.core.exceptions

Ejemplo de evento (GET_FILE):
{
  "operation": "GET_FILE",
  "config": {
    "config_host": "cfg.example.com",
    "tenant": "default",
    "application": "default"
  },
  "path": "schemas/music.sd"
}

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

import unicodedata
from typing import Dict, Any

from package_explorer.core.constants import Operations
from package_explorer.core.logger import (
    get_logger,
    set_request_context,
    clear_request_context,
    log_exception_with_context
)
from package_explorer.utils.request_parser import parse_lambda_event
from package_explorer.utils.http_responses import create_exception_response, create_cors_preflight_response
from package_explorer.handlers.tree_handler import handle_get_tree
from package_explorer.handlers.file_handler import handle_get_file
from package_explorer.handlers.package_download_handler import handle_download_package
from package_explorer.handlers.components_handler import handle_get_components
from package_explorer.handlers.overview_handler import handle_get_overview

logger = get_logger(__name__)


def _normalize_event_encoding(event: Any) -> Any:
    """
    Normaliza a NFC los strings del evento (recursivo sobre diccionarios)
    para que rutas con tildes o eñes coincidan con las del listado remoto.
    """
    if not isinstance(event, dict):
        return event

    normalized_event = {}
    for key, value in event.items():
        if isinstance(value, str):
            normalized_value = unicodedata.normalize('NFC', value)
            if normalized_value != value:
                logger.debug(f"Normalized {key}: {value!r} -> {normalized_value!r}")
            normalized_event[key] = normalized_value
        elif isinstance(value, dict):
            normalized_event[key] = _normalize_event_encoding(value)
        else:
            normalized_event[key] = value

    return normalized_event


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Punto de entrada principal para AWS Lambda.

    Recibe un evento, valida los parámetros, crea el cliente remoto y
    delega la ejecución al handler de la operación.

    Args:
        event (Dict[str, Any]): Evento Lambda con operation, config y path
        context (Any): Objeto de contexto Lambda (contiene aws_request_id)

    Returns:
        Dict[str, Any]: Respuesta HTTP estándar (statusCode, headers, body)
    """
    request_id = getattr(context, 'aws_request_id', 'unknown')
    client = None

    try:
        set_request_context(request_id=request_id, environment="lambda")
        logger.info("🚀 Lambda execution started")

        if isinstance(event, dict) and event.get("httpMethod") == "OPTIONS":
            return create_cors_preflight_response()

        operation, client, resolver, path = parse_lambda_event(_normalize_event_encoding(event), context)

        logger.info("🔁 Routing operation", extra={
            "operation": operation,
            "requested_path": path
        })

        if operation == Operations.GET_TREE:
            return handle_get_tree(client, resolver)

        elif operation == Operations.GET_FILE:
            return handle_get_file(client, resolver, path)

        elif operation == Operations.DOWNLOAD_PACKAGE:
            return handle_download_package(client, resolver)

        elif operation == Operations.GET_COMPONENTS:
            return handle_get_components(client, resolver)

        elif operation == Operations.GET_OVERVIEW:
            return handle_get_overview(client, resolver)

        else:
            raise ValueError(f"Operación no reconocida: {operation}")

    except Exception as e:
        log_exception_with_context(e, {"request_id": request_id}, logger_name=__name__)
        return create_exception_response(e)

    finally:
        if client is not None:
            client.close()
        logger.info("✅ Lambda execution completed")
        clear_request_context()
