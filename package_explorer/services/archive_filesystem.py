"""
Sistema de archivos navegable construido desde el JAR de componentes.

Descarga el JAR en streaming, lee sus entradas de forma secuencial y
arma un árbol de TreeNode con el contenido ya embebido en cada hoja:
texto para las extensiones legibles y placeholders para bytecode y
binarios.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

from typing import Dict, Optional

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.models.tree_node import TreeNode, ArchiveFilesystem
from package_explorer.services.jar_stream_reader import JarStreamReader
from package_explorer.services.path_resolver import extract_name
from package_explorer.core.constants import (
    TEXT_FILE_EXTENSIONS,
    MANIFEST_MARKER,
    CLASS_FILE_EXTENSION,
    CLASS_FILE_PLACEHOLDER,
    ARCHIVE_BINARY_PLACEHOLDER,
    ARCHIVE_ENTRY_ERROR_PLACEHOLDER,
    ARCHIVE_TREE_ROOT_NAME,
    ROOT_PATH,
    COMPONENTS_SEGMENT,
    MetricNames
)
from package_explorer.core.logger import get_logger, log_business_metric, log_performance

logger = get_logger(__name__)


def is_text_entry(name: str) -> bool:
    return name.lower().endswith(TEXT_FILE_EXTENSIONS) or MANIFEST_MARKER in name


def classify_entry(name: str, data: bytes) -> str:
    """
    Contenido visible de una entrada del JAR.

    Argumentos:
        name (str): Ruta de la entrada dentro del JAR (ej: "com/acme/A.java").
        data (bytes): Bytes descomprimidos de la entrada.

    Retorna:
        str: Texto UTF-8 (bytes inválidos reemplazados) para archivos
        legibles, o el placeholder de bytecode o de binario.
    """
    if is_text_entry(name):
        return data.decode("utf-8", errors="replace")
    if name.endswith(CLASS_FILE_EXTENSION):
        return CLASS_FILE_PLACEHOLDER.format(path=name)
    return ARCHIVE_BINARY_PLACEHOLDER.format(path=name)


def build_tree_from_entries(file_contents: Dict[str, str]) -> TreeNode:
    """
    Convierte el mapa plano ruta -> contenido en un árbol.

    Los directorios intermedios se crean una sola vez; la hoja cuelga del
    último segmento. La raíz es sintética: nombre "root", ruta "/".

    Example:
        >>> root = build_tree_from_entries({"a/b.java": "class B {}"})
        >>> root.children["a"].children["b.java"].path
        'a/b.java'
    """
    root = TreeNode.directory(ARCHIVE_TREE_ROOT_NAME, ROOT_PATH)

    for file_path, content in file_contents.items():
        parts = [part for part in file_path.split("/") if part]
        if not parts:
            continue

        current = root
        for depth, directory_name in enumerate(parts[:-1]):
            if directory_name not in current.children:
                directory_path = "/".join(parts[:depth + 1])
                current.add_child(TreeNode.directory(directory_name, directory_path))
            current = current.children[directory_name]

        current.add_child(TreeNode.leaf(parts[-1], file_path, content))

    return root


@log_performance(operation_name="build_archive_filesystem")
def build_from_archive(client: IRemoteClient, archive_url: str, archive_name: str) -> ArchiveFilesystem:
    """
    Descarga el JAR y construye su sistema de archivos.

    Argumentos:
        client (IRemoteClient): Cliente remoto.
        archive_url (str): URL completa del JAR.
        archive_name (str): Nombre del JAR, se devuelve tal cual.

    Retorna:
        ArchiveFilesystem: root=None y total_files=0 si la descarga no fue
        2xx o si el archivo no pudo leerse; nunca lanza.
    """
    logger.info(f"Building filesystem from archive: {archive_url}")

    try:
        with client.open_stream(archive_url) as stream:
            if not stream.ok:
                logger.error(f"Failed to download archive: HTTP {stream.status_code}")
                return ArchiveFilesystem(component_archive_name=archive_name)

            file_contents = _read_entries(JarStreamReader(stream.body))
    except Exception:
        logger.exception(f"Error building filesystem from archive: {archive_url}")
        return ArchiveFilesystem(component_archive_name=archive_name)

    root = build_tree_from_entries(file_contents)
    total_files = len(file_contents)

    logger.info(f"Successfully built filesystem with {total_files} files")
    log_business_metric(MetricNames.COMPONENT_ENTRIES, total_files, "count")
    return ArchiveFilesystem(
        component_archive_name=archive_name,
        root=root,
        total_files=total_files
    )


def _read_entries(reader: JarStreamReader) -> Dict[str, str]:
    file_contents: Dict[str, str] = {}

    for entry in reader.entries():
        if entry.is_directory:
            continue

        if entry.error is not None:
            logger.warning(f"Error reading file content for {entry.name}: {entry.error}")
            content = ARCHIVE_ENTRY_ERROR_PLACEHOLDER.format(reason=entry.error)
        else:
            content = classify_entry(entry.name, entry.data)

        file_contents[entry.name] = content
        logger.debug(f"Extracted file: {entry.name}")

    return file_contents


# ========================================
# DESCUBRIMIENTO DEL JAR DE COMPONENTES
# ========================================

def get_components_archive_name(client: IRemoteClient, application_url: str) -> Optional[str]:
    """Nombre del primer JAR listado bajo content/components/, o None si no hay ninguno."""
    listing_url = f"{application_url}/{COMPONENTS_SEGMENT}"
    entries = client.get_listing(listing_url)

    if not entries:
        logger.warning(f"No component archives listed at {listing_url}")
        return None

    archive_name = extract_name(entries[0])
    logger.info(f"Component archive name: {archive_name}")
    return archive_name


def get_components_filesystem(client: IRemoteClient, application_url: str) -> ArchiveFilesystem:
    """Sistema de archivos del JAR de componentes de la aplicación."""
    archive_name = get_components_archive_name(client, application_url)
    if not archive_name:
        return ArchiveFilesystem(component_archive_name="")

    archive_url = f"{application_url}/{COMPONENTS_SEGMENT}{archive_name}"
    return build_from_archive(client, archive_url, archive_name)
