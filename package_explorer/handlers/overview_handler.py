"""
Manejador para operaciones GET_OVERVIEW: generación, services.xml,
hosts.xml y modelos de la aplicación desplegada.
"""

import json
from typing import Any, Dict

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.services.package_overview import assemble_overview
from package_explorer.utils.http_responses import create_overview_response, create_exception_response
from package_explorer.core.logger import get_logger, log_performance

logger = get_logger(__name__)


@log_performance(operation_name="get_overview")
def handle_get_overview(client: IRemoteClient, resolver: ApplicationUrlResolver) -> Dict[str, Any]:
    try:
        overview = assemble_overview(client, resolver.application_url())
        return create_overview_response(overview)

    except Exception as e:
        logger.error("Error in overview assembly", extra={
            "error": str(e),
            "error_type": type(e).__name__
        })
        return create_exception_response(e)


def handle_get_overview_local(client: IRemoteClient, resolver: ApplicationUrlResolver) -> None:
    logger.info("=== INICIANDO GET_OVERVIEW (LOCAL) ===")
    response = handle_get_overview(client, resolver)
    data = json.loads(response.get("body", "{}"))

    if response.get("statusCode") != 200:
        print(f"\n❌ Error: {data.get('error')}")
        return

    print("\n" + "=" * 60)
    print("🧭 RESUMEN DEL PAQUETE")
    print("=" * 60)
    print(f"🔢 Generación: {data.get('generation') or '(desconocida)'}")
    print("\n--- services.xml ---")
    print(data.get("servicesContent") or "(vacío)")
    print("\n--- hosts.xml ---")
    print(data.get("hostsContent") or "(vacío)")
    print("\n--- modelos ---")
    print(data.get("modelsContent") or "(ninguno)")

    print("\n✅ GET_OVERVIEW completado")
