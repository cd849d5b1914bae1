"""
Manejador para operaciones DOWNLOAD_PACKAGE.

En AWS Lambda el ZIP del paquete se construye en memoria (modo acotado)
y se sube a S3, respondiendo con la referencia al objeto. En local el
ZIP se escribe en streaming directamente a disco.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict

import boto3

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver
from package_explorer.services.archive_streamer import build_archive_bytes, stream_archive
from package_explorer.utils.http_responses import create_reference_response, create_exception_response
from package_explorer.core.constants import (
    BUCKET_NAME,
    FOLDER_BUCKET,
    EXECUTION_ENVIROMENT,
    PACKAGE_ARCHIVE_NAME,
    PACKAGE_OUTPUT_PATH,
    ErrorCodes
)
from package_explorer.core.exceptions import PackageExplorerError, ArchiveError
from package_explorer.core.logger import get_logger, log_performance

logger = get_logger(__name__)


@log_performance(operation_name="download_package")
def handle_download_package(client: IRemoteClient, resolver: ApplicationUrlResolver) -> Dict[str, Any]:
    """
    Construye el ZIP del paquete y lo entrega vía S3.

    Argumentos:
        client (IRemoteClient): Cliente remoto.
        resolver (ApplicationUrlResolver): Resolvedor de la URL de la aplicación.

    Retorna:
        Dict[str, Any]: Respuesta con bucket_name y s3_path del ZIP, o una
        respuesta de error si el ZIP no pudo finalizarse o subirse.
    """
    try:
        content_url = resolver.content_url()
        logger.info("Starting package download", extra={"content_url": content_url})

        archive = build_archive_bytes(client, content_url)
        key_file = f"{FOLDER_BUCKET}/{_archive_filename()}"

        _upload_archive(archive, key_file)

        return create_reference_response(
            bucket_name=BUCKET_NAME,
            s3_path=key_file,
            filename=PACKAGE_ARCHIVE_NAME,
            archive_stats={"size_bytes": len(archive)}
        )

    except Exception as e:
        logger.error("Error in package download", extra={
            "error": str(e),
            "error_type": type(e).__name__
        })
        return create_exception_response(e)


def _archive_filename() -> str:
    """vespa-app-package-20251019T101500Z.zip"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    stem, extension = os.path.splitext(PACKAGE_ARCHIVE_NAME)
    return f"{stem}-{stamp}{extension}"


def _create_s3_client() -> Any:
    if EXECUTION_ENVIROMENT == 'local':
        logger.info("El entorno de ejecución es local")
        return boto3.client('s3',
                            aws_access_key_id=os.environ.get('AWS_SECRET_ID'),
                            aws_secret_access_key=os.environ.get('AWS_SECRET_ACCESS'),
                            verify=False,
                            use_ssl=False)

    logger.info("El entorno de ejecución debe ser lambda")
    return boto3.client('s3')


def _upload_archive(archive: bytes, key_file: str) -> None:
    if not BUCKET_NAME:
        raise PackageExplorerError(
            "BUCKET_NAME no está configurado",
            error_code=ErrorCodes.UPLOAD_FAILED
        )

    s3_client = _create_s3_client()
    try:
        response_s3 = s3_client.put_object(
            Bucket=BUCKET_NAME,
            Key=key_file,
            Body=archive,
            ContentType="application/zip"
        )
    except Exception as e:
        raise PackageExplorerError(
            "No se pudo subir el paquete a S3",
            error_code=ErrorCodes.UPLOAD_FAILED,
            details={"cause": str(e)}
        ) from e

    status = response_s3.get('ResponseMetadata', {}).get('HTTPStatusCode')
    logger.info(f"Operación de s3 ejecutada con status code -> {status}", extra={
        "s3_key": key_file,
        "archive_size": len(archive)
    })


# ========================================
# EJECUCIÓN LOCAL
# ========================================

def handle_download_package_local(client: IRemoteClient, resolver: ApplicationUrlResolver,
                                  output_path: str = PACKAGE_OUTPUT_PATH) -> None:
    """
    Escribe el ZIP del paquete en output_path sin retenerlo en memoria.

    Si el ZIP no puede finalizarse se informa el error; el archivo queda
    con las entradas escritas hasta ese momento.
    """
    logger.info("=== INICIANDO DOWNLOAD_PACKAGE (LOCAL) ===")

    try:
        with open(output_path, "wb") as sink:
            stats = stream_archive(client, resolver.content_url(), sink)
    except ArchiveError as e:
        logger.error("Package archive could not be completed", extra={"error_code": e.error_code})
        print(f"\n❌ Error: {e.message}")
        return
    except OSError as e:
        logger.error(f"Cannot write package archive to {output_path}: {e}")
        print(f"\n❌ Error: no se pudo escribir {output_path}: {e.strerror or e}")
        return

    print("\n" + "=" * 60)
    print("📦 PAQUETE DESCARGADO")
    print("=" * 60)
    print(f"💾 Archivo: {output_path}")
    print(f"📁 Directorios: {stats.directories}")
    print(f"📄 Archivos: {stats.files}")
    if stats.skipped_files:
        print(f"⚠️ Archivos omitidos: {stats.skipped_files}")

    print("\n✅ DOWNLOAD_PACKAGE completado exitosamente")
