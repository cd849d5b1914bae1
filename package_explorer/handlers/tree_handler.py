"""
Manejador especializado para operaciones GET_TREE.

Construye el árbol ligero del paquete de aplicación (sin contenido de
archivos) y lo devuelve junto con un listado Markdown y las rutas planas
de los archivos.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

import json
from typing import Any, Dict

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.services.tree_crawler import build_tree
from package_explorer.services.structure_formatter import format_markdown
from package_explorer.utils.tree_utils import flatten_file_paths
from package_explorer.utils.http_responses import create_tree_response, create_exception_response
from package_explorer.core.logger import get_logger, log_performance

logger = get_logger(__name__)


@log_performance(operation_name="get_tree")
def handle_get_tree(client: IRemoteClient, resolver: ApplicationUrlResolver) -> Dict[str, Any]:
    """
    Orquesta la obtención del árbol del paquete.

    Argumentos:
        client (IRemoteClient): Cliente remoto.
        resolver (ApplicationUrlResolver): Resolvedor de la URL de la aplicación.

    Retorna:
        Dict[str, Any]: Respuesta HTTP con root, totalFiles, totalDirectories,
        markdown y files. Un host inaccesible produce un árbol vacío, no un error.
    """
    try:
        content_url = resolver.content_url()
        logger.info("Iniciando obtención del árbol del paquete", extra={"content_url": content_url})

        summary = build_tree(client, content_url)
        markdown = format_markdown(summary.root)
        files = flatten_file_paths(summary.root)

        logger.info("Árbol generado correctamente", extra={
            "total_files": summary.total_files,
            "total_directories": summary.total_directories
        })
        return create_tree_response(summary, markdown, files)

    except Exception as e:
        logger.error("Error crítico durante la obtención del árbol", extra={
            "error": str(e),
            "error_type": type(e).__name__
        })
        return create_exception_response(e)


def handle_get_tree_local(client: IRemoteClient, resolver: ApplicationUrlResolver) -> None:
    """Ejecuta GET_TREE en local e imprime el resultado para debugging."""
    logger.info("=== INICIANDO GET_TREE (LOCAL) ===")
    response = handle_get_tree(client, resolver)
    data = json.loads(response.get("body", "{}"))

    if response.get("statusCode") != 200:
        print(f"\n❌ Error: {data.get('error')}")
        return

    print("\n" + "=" * 60)
    print("📦 ÁRBOL DEL PAQUETE DE APLICACIÓN")
    print("=" * 60)
    print(f"📄 Archivos: {data.get('totalFiles', 0)}")
    print(f"📁 Directorios: {data.get('totalDirectories', 0)}")

    print("\n" + "=" * 60)
    print("📋 LISTADO EN FORMATO MARKDOWN")
    print("=" * 60)
    print(data.get("markdown") or "(vacío)")

    print("\n✅ GET_TREE completado exitosamente")
