import requests
from contextlib import contextmanager
from typing import Iterator, Type, TypeVar

from requests.adapters import HTTPAdapter

from package_explorer.interfaces.remote_client_interface import IRemoteClient, RemoteStream
from package_explorer.core.constants import (
    REQUEST_TIMEOUT,
    CONNECTION_TIMEOUT,
    CONNECTION_POOL_SIZE,
    CONNECTION_POOL_MAXSIZE,
    USER_AGENT
)
from package_explorer.core.exceptions import RemoteFetchError, handle_remote_exception
from package_explorer.core.logger import get_logger, log_remote_call

logger = get_logger(__name__)

T = TypeVar("T")


class RequestsRemoteClient(IRemoteClient):
    """
    Cliente HTTP sobre requests para el config server y sus endpoints de contenido.

    Todas las llamadas son bloqueantes y secuenciales; los timeouts de
    conexión y lectura salen de las constantes de entorno. No hay
    reintentos: un fallo degrada al valor por defecto.
    """

    def __init__(self, session: requests.Session = None):
        self.session = session or requests.Session()
        self.timeout = (CONNECTION_TIMEOUT, REQUEST_TIMEOUT)

        adapter = HTTPAdapter(pool_connections=CONNECTION_POOL_SIZE,
                              pool_maxsize=CONNECTION_POOL_MAXSIZE)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": USER_AGENT})

    def __enter__(self) -> "RequestsRemoteClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def request_get_with_default(self, url: str, expected_type: Type[T], default: T) -> T:
        log_remote_call("get", url, expected_type=expected_type.__name__)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"GET failed for {url}: {e}", extra={"error_type": type(e).__name__})
            return default

        if not response.ok:
            logger.warning(f"GET {url} returned HTTP {response.status_code}, using default")
            return default

        try:
            if expected_type is bytes:
                value = response.content
            elif expected_type is str:
                value = response.text
            else:
                value = response.json()
        except ValueError as e:
            logger.warning(f"Malformed body from {url}: {e}")
            return default

        if not isinstance(value, expected_type) or not value:
            logger.debug(f"Empty or unexpected body from {url}, using default", extra={
                "received_type": type(value).__name__
            })
            return default

        return value

    def download_bytes(self, url: str) -> bytes:
        log_remote_call("download", url)

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise handle_remote_exception(e, "download_bytes", {"url": url}) from e

        return response.content

    @contextmanager
    def open_stream(self, url: str) -> Iterator[RemoteStream]:
        log_remote_call("stream", url)

        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteFetchError(
                f"No se pudo abrir el stream de {url}",
                url=url,
                original_error=e
            ) from e

        try:
            # Descomprimir Content-Encoding (gzip) al leer del socket
            response.raw.decode_content = True
            yield RemoteStream(status_code=response.status_code, body=response.raw)
        finally:
            response.close()
