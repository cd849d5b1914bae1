"""
Obtención bajo demanda del contenido de un archivo del paquete.

Se invoca cuando el usuario selecciona un archivo del árbol; devuelve
siempre el par (url, content), con un placeholder en lugar de error.
"""

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.models.tree_node import FileContent
from package_explorer.services.path_resolver import join_content_url
from package_explorer.core.constants import (
    NON_READABLE_EXTENSIONS,
    MODELS_PATH_MARKER,
    BINARY_FILE_PLACEHOLDER,
    EMPTY_FILE_PLACEHOLDER,
    READ_ERROR_PLACEHOLDER,
    MetricNames
)
from package_explorer.core.logger import get_logger, log_business_metric

logger = get_logger(__name__)


def is_binary_path(relative_path: str) -> bool:
    """
    True si el archivo no debe mostrarse como texto: extensión jar/zip/class
    o ruta bajo un directorio de modelos.
    """
    extension = relative_path.rsplit(".", 1)[-1].lower()
    return extension in NON_READABLE_EXTENSIONS or MODELS_PATH_MARKER in f"/{relative_path.lstrip('/')}"


def fetch_content(client: IRemoteClient, base_url: str, relative_path: str) -> FileContent:
    """
    Obtiene el texto de un único archivo.

    Argumentos:
        client (IRemoteClient): Cliente remoto.
        base_url (str): URL del contenido (ej: ".../content/").
        relative_path (str): Ruta del archivo relativa al contenido.

    Retorna:
        FileContent: URL completa del archivo y su texto o un placeholder.
    """
    file_url = join_content_url(base_url, relative_path)

    # La política de binarios se aplica antes de cualquier petición
    if is_binary_path(relative_path):
        logger.info(f"Binary file, skipping fetch: {file_url}")
        log_business_metric(MetricNames.BINARY_PLACEHOLDERS, 1, "count")
        return FileContent(url=file_url, content=BINARY_FILE_PLACEHOLDER)

    logger.info(f"Fetching file content from: {file_url}")
    try:
        content = client.get_text(file_url)
    except Exception as e:
        logger.error(f"Error fetching file content from: {file_url}", exc_info=True)
        return FileContent(url=file_url, content=READ_ERROR_PLACEHOLDER.format(reason=e))

    if not content:
        logger.warning(f"File content is empty or unreadable: {file_url}")
        return FileContent(url=file_url, content=EMPTY_FILE_PLACEHOLDER)

    logger.info(f"Successfully fetched file content ({len(content)} chars)")
    log_business_metric(MetricNames.FILES_FETCHED, 1, "count")
    return FileContent(url=file_url, content=content)
