"""
Manejador para operaciones GET_COMPONENTS: sistema de archivos del JAR de
componentes Java desplegado con la aplicación.
"""

import json
from typing import Any, Dict

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.services.archive_filesystem import get_components_filesystem
from package_explorer.utils.http_responses import create_components_response, create_exception_response
from package_explorer.core.logger import get_logger, log_performance

logger = get_logger(__name__)


@log_performance(operation_name="get_components")
def handle_get_components(client: IRemoteClient, resolver: ApplicationUrlResolver) -> Dict[str, Any]:
    try:
        filesystem = get_components_filesystem(client, resolver.application_url())
        if filesystem.root is None:
            logger.warning("Components filesystem unavailable", extra={
                "component_archive_name": filesystem.component_archive_name
            })
        return create_components_response(filesystem)

    except Exception as e:
        logger.error("Error in components retrieval", extra={
            "error": str(e),
            "error_type": type(e).__name__
        })
        return create_exception_response(e)


def handle_get_components_local(client: IRemoteClient, resolver: ApplicationUrlResolver) -> None:
    logger.info("=== INICIANDO GET_COMPONENTS (LOCAL) ===")
    response = handle_get_components(client, resolver)
    data = json.loads(response.get("body", "{}"))

    if response.get("statusCode") != 200:
        print(f"\n❌ Error: {data.get('error')}")
        return

    print("\n" + "=" * 60)
    print("☕ COMPONENTES JAVA")
    print("=" * 60)
    print(f"📦 JAR: {data.get('componentArchiveName') or '(ninguno)'}")
    print(f"📄 Archivos: {data.get('totalFiles', 0)}")
    if data.get("root") is None:
        print("⚠️ No se pudo leer el JAR de componentes")

    print("\n✅ GET_COMPONENTS completado")
