"""
Construcción del árbol ligero del paquete de aplicación.

Recorre los endpoints de listado a partir de la URL de contenido y arma
un árbol de TreeNode SIN descargar el contenido de los archivos; el
contenido se pide aparte, bajo demanda.

Hace una llamada HTTP por directorio. Con miles de directorios puede ser
lento, pero la memoria sólo crece con el número de nodos.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

from collections import deque
from typing import Deque, Set, Tuple

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.models.tree_node import TreeNode, TreeSummary
from package_explorer.services.path_resolver import resolve_url, extract_name, to_relative_path
from package_explorer.core.constants import LAZY_TREE_ROOT_NAME, ROOT_PATH, MetricNames
from package_explorer.core.logger import get_logger, log_business_metric

logger = get_logger(__name__)


def build_tree(client: IRemoteClient, base_listing_url: str) -> TreeSummary:
    """
    Construye el árbol completo bajo base_listing_url.

    Argumentos:
        client (IRemoteClient): Cliente remoto con degradación a vacío.
        base_listing_url (str): URL del directorio raíz (ej: ".../content/").

    Retorna:
        TreeSummary: Raíz sintética "content" más contadores de archivos y
        directorios (la raíz no cuenta). Ante cualquier error inesperado
        devuelve una raíz vacía con contadores en cero; nunca lanza.
    """
    logger.info(f"Building file tree from: {base_listing_url}")

    try:
        summary = _crawl(client, base_listing_url)
    except Exception:
        logger.exception(f"Error building file tree from: {base_listing_url}")
        return TreeSummary(root=TreeNode.directory(LAZY_TREE_ROOT_NAME, ROOT_PATH))

    logger.info("Successfully built file tree", extra={
        "total_files": summary.total_files,
        "total_directories": summary.total_directories
    })
    log_business_metric(MetricNames.TREE_FILES, summary.total_files, "count")
    log_business_metric(MetricNames.TREE_DIRECTORIES, summary.total_directories, "count")
    return summary


def _crawl(client: IRemoteClient, base_url: str) -> TreeSummary:
    root = TreeNode.directory(LAZY_TREE_ROOT_NAME, ROOT_PATH)
    summary = TreeSummary(root=root)

    # Cada directorio pendiente viaja con el nodo al que se cuelgan sus hijos
    pending: Deque[Tuple[str, TreeNode]] = deque([(base_url, root)])
    visited: Set[str] = {base_url}

    while pending:
        current_url, parent = pending.popleft()

        logger.debug(f"Fetching directory listing from: {current_url}")
        entries = client.get_listing(current_url)
        logger.debug(f"Found {len(entries)} entries at {current_url}")

        for entry in entries:
            resolved_url = resolve_url(current_url, entry)
            is_directory = entry.endswith("/")
            name = extract_name(entry)
            relative_path = to_relative_path(base_url, resolved_url, is_directory)

            # Una entrada repetida reutiliza el nodo existente, que puede estar ya en cola
            existing = parent.children.get(name)

            if is_directory:
                if existing is None:
                    parent.add_child(TreeNode.directory(name, relative_path))
                    summary.total_directories += 1
                elif existing.is_leaf:
                    logger.warning(f"Directory entry clashes with file, skipping: {resolved_url}")
                    continue

                if resolved_url not in visited:
                    visited.add(resolved_url)
                    pending.append((resolved_url, parent.children[name]))
                else:
                    logger.warning(f"Directory listed twice, not descending again: {resolved_url}")
            elif existing is None:
                parent.add_child(TreeNode.leaf(name, relative_path))
                summary.total_files += 1

    return summary
