"""
Manejador para operaciones GET_FILE: contenido de un archivo bajo demanda.
"""

import json
from typing import Any, Dict

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.services.content_fetcher import fetch_content
from package_explorer.utils.http_responses import create_file_content_response, create_exception_response
from package_explorer.core.logger import get_logger, log_performance

logger = get_logger(__name__)

PREVIEW_CHARS = 500


@log_performance(operation_name="get_file")
def handle_get_file(client: IRemoteClient, resolver: ApplicationUrlResolver, path: str) -> Dict[str, Any]:
    """
    Devuelve {url, content} del archivo en path (ya validado por el parser).

    Binarios, archivos vacíos y errores de lectura llegan como placeholders
    dentro de una respuesta 200.
    """
    try:
        file_content = fetch_content(client, resolver.content_url(), path)
        return create_file_content_response(file_content)

    except Exception as e:
        logger.error("Error in file content retrieval", extra={
            "requested_path": path,
            "error": str(e),
            "error_type": type(e).__name__
        })
        return create_exception_response(e)


def handle_get_file_local(client: IRemoteClient, resolver: ApplicationUrlResolver, path: str) -> None:
    logger.info("=== INICIANDO GET_FILE (LOCAL) ===")
    response = handle_get_file(client, resolver, path)
    data = json.loads(response.get("body", "{}"))

    if response.get("statusCode") != 200:
        print(f"\n❌ Error: {data.get('error')}")
        return

    content = data.get("content", "")
    print("\n" + "=" * 60)
    print("📥 CONTENIDO DE ARCHIVO")
    print("=" * 60)
    print(f"📂 Ruta: {path}")
    print(f"🔗 URL: {data.get('url')}")
    print("\n" + "=" * 60)
    print(content[:PREVIEW_CHARS])
    if len(content) > PREVIEW_CHARS:
        print("... (contenido truncado)")

    print("\n✅ GET_FILE completado exitosamente")
