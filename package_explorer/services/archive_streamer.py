"""
Empaquetado del paquete de aplicación completo como ZIP.

Recorre el contenido remoto en anchura y escribe las entradas del ZIP
directamente en un sink binario, sin construir el árbol en memoria:
nunca se retiene más de un archivo a la vez. El mismo algoritmo sirve
para el modo acotado que devuelve el ZIP como bytes (sink en memoria).

Características:
- Una entrada por ruta normalizada (deduplicación por conjunto)
- Entradas explícitas para cada directorio ancestro de un archivo
- Un archivo inaccesible se omite sin abortar el ZIP
- El escritor se finaliza (directorio central) en todos los caminos

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

import io
import time
import zipfile
from collections import deque
from dataclasses import dataclass
from typing import BinaryIO, Deque, List, Set

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.services.path_resolver import (
    resolve_url,
    to_relative_path,
    parent_directories
)
from package_explorer.core.constants import MetricNames
from package_explorer.core.exceptions import ArchiveError
from package_explorer.core.logger import get_logger, log_business_metric, debug_log_if_enabled

logger = get_logger(__name__)

_DIRECTORY_ATTRIBUTES = (0o40755 << 16) | 0x10  # drwxr-xr-x + flag MS-DOS de directorio
_FILE_ATTRIBUTES = 0o100644 << 16


@dataclass
class ArchiveStats:
    """Resumen de lo escrito en el ZIP."""
    directories: int = 0
    files: int = 0
    skipped_files: int = 0

    @property
    def entries(self) -> int:
        return self.directories + self.files


class _ArchiveWriter:
    """Escritor de entradas con el conjunto de rutas ya agregadas."""

    def __init__(self, zip_file: zipfile.ZipFile):
        self.zip_file = zip_file
        self.added: Set[str] = set()
        self.stats = ArchiveStats()
        self.date_time = time.localtime(time.time())[:6]

    def add_directory(self, archive_path: str) -> bool:
        if archive_path in self.added:
            return False
        info = zipfile.ZipInfo(archive_path, date_time=self.date_time)
        info.external_attr = _DIRECTORY_ATTRIBUTES
        info.compress_type = zipfile.ZIP_STORED
        self.zip_file.writestr(info, b"")
        self.added.add(archive_path)
        self.stats.directories += 1
        return True

    def add_parent_directories(self, archive_path: str) -> None:
        for directory in parent_directories(archive_path):
            self.add_directory(directory)

    def add_file(self, archive_path: str, data: bytes) -> None:
        info = zipfile.ZipInfo(archive_path, date_time=self.date_time)
        info.external_attr = _FILE_ATTRIBUTES
        info.compress_type = zipfile.ZIP_DEFLATED
        self.zip_file.writestr(info, data)
        self.added.add(archive_path)
        self.stats.files += 1


def stream_archive(client: IRemoteClient, base_listing_url: str, sink: BinaryIO) -> ArchiveStats:
    """
    Escribe en sink un ZIP completo con todo el contenido bajo base_listing_url.

    Argumentos:
        client (IRemoteClient): Cliente remoto.
        base_listing_url (str): URL del directorio raíz (ej: ".../content/").
        sink (BinaryIO): Destino binario escribible; no necesita soportar seek.

    Retorna:
        ArchiveStats: Cantidad de directorios, archivos y archivos omitidos.

    Lanza:
        ArchiveError: Si el escritor no puede abrirse o finalizarse, o si un
        error no recuperable impide completar el ZIP. El directorio central
        se intenta escribir igualmente antes de lanzar.
    """
    logger.info(f"Streaming package archive from: {base_listing_url}")

    try:
        zip_file = zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED)
    except Exception as e:
        raise ArchiveError("No se pudo abrir el escritor ZIP") from e

    writer = _ArchiveWriter(zip_file)
    failure = None

    try:
        _traverse(client, base_listing_url, writer)
    except Exception as e:
        logger.error("Archive traversal aborted", exc_info=True, extra={
            "entries_written": writer.stats.entries
        })
        failure = e

    try:
        zip_file.close()
    except Exception as e:
        raise ArchiveError(
            "No se pudo finalizar el ZIP del paquete",
            entries_written=writer.stats.entries
        ) from e

    if failure is not None:
        raise ArchiveError(
            "El ZIP del paquete quedó incompleto",
            entries_written=writer.stats.entries,
            details={"cause": str(failure)}
        ) from failure

    stats = writer.stats
    logger.info("Package archive completed", extra={
        "archive_directories": stats.directories,
        "archive_files": stats.files,
        "archive_skipped_files": stats.skipped_files
    })
    log_business_metric(MetricNames.ARCHIVE_ENTRIES, stats.entries, "count")
    if stats.skipped_files:
        log_business_metric(MetricNames.ARCHIVE_SKIPPED_FILES, stats.skipped_files, "count")
    return stats


def build_archive_bytes(client: IRemoteClient, base_listing_url: str) -> bytes:
    """Modo acotado: el mismo ZIP, acumulado en memoria y devuelto como bytes."""
    buffer = io.BytesIO()
    stream_archive(client, base_listing_url, buffer)
    archive = buffer.getvalue()
    log_business_metric(MetricNames.ARCHIVE_SIZE, len(archive), "bytes")
    return archive


def _traverse(client: IRemoteClient, base_url: str, writer: _ArchiveWriter) -> None:
    queue: Deque[str] = deque([base_url])
    queued: Set[str] = {base_url}

    while queue:
        current_url = queue.popleft()

        for entry in _list_directory(client, current_url):
            resolved_url = resolve_url(current_url, entry)
            is_directory = entry.endswith("/")
            archive_path = to_relative_path(base_url, resolved_url, is_directory)

            if archive_path in ("", "/"):
                logger.warning(f"Entry resolves to the archive root, ignoring: {entry}")
                continue

            if is_directory:
                writer.add_directory(archive_path)
                if resolved_url not in queued:
                    queued.add(resolved_url)
                    queue.append(resolved_url)
            elif archive_path in writer.added:
                logger.debug(f"Duplicate file entry, already archived: {archive_path}")
            else:
                _archive_file(client, writer, resolved_url, archive_path)


def _list_directory(client: IRemoteClient, url: str) -> List[str]:
    try:
        return client.get_listing(url)
    except Exception as e:
        logger.warning(f"Listing failed for {url}, treating as empty: {e}")
        return []


def _archive_file(client: IRemoteClient, writer: _ArchiveWriter, url: str, archive_path: str) -> None:
    logger.debug(f"Streaming file: {archive_path}")

    writer.add_parent_directories(archive_path)

    try:
        data = client.download_bytes(url)
    except Exception as e:
        logger.warning(f"Failed to stream file {archive_path}: {e}")
        writer.stats.skipped_files += 1
        return

    writer.add_file(archive_path, data)
    debug_log_if_enabled("Finished streaming", archive_path=archive_path, size_bytes=len(data))
