from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, BinaryIO, Type, TypeVar

T = TypeVar("T")


@dataclass
class RemoteStream:
    """Respuesta abierta en modo streaming: código HTTP y cuerpo legible con read(n)."""
    status_code: int
    body: BinaryIO

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class IRemoteClient(ABC):
    """
    Interfaz base para el acceso HTTP al host que expone el paquete.

    Define el único contrato que consumen los recorridos: peticiones GET
    con valor por defecto garantizado ante cualquier fallo, más una
    descarga estricta de bytes y una apertura en streaming.

    Permite desacoplar los algoritmos de recorrido del transporte real,
    de modo que los tests puedan usar un cliente en memoria.
    """

    @abstractmethod
    def request_get_with_default(self, url: str, expected_type: Type[T], default: T) -> T:
        """
        Ejecuta un GET y devuelve el cuerpo con la forma esperada.

        Args:
            url (str): URL absoluta a solicitar.
            expected_type (type): list (array JSON), dict (objeto JSON),
                                  str (texto) o bytes (binario).
            default: Valor devuelto ante error de transporte, estado no 2xx,
                     cuerpo vacío o cuerpo con forma distinta a la esperada.

        Returns:
            Valor del tipo esperado. Nunca lanza excepciones.
        """
        pass

    @abstractmethod
    def download_bytes(self, url: str) -> bytes:
        """
        Descarga el contenido completo de un archivo.

        Returns:
            bytes: Contenido del archivo.

        Raises:
            RemoteFetchError: Si la descarga falla o el estado no es 2xx.
        """
        pass

    @abstractmethod
    def open_stream(self, url: str) -> AbstractContextManager:
        """
        Abre la URL en modo streaming.

        Returns:
            Context manager que entrega un RemoteStream y libera la conexión al salir.

        Raises:
            RemoteFetchError: Si no se pudo establecer la conexión.
        """
        pass

    def close(self) -> None:
        """Libera los recursos del transporte. Por defecto no hace nada."""

    # Atajos tipados sobre request_get_with_default

    def get_listing(self, url: str) -> list:
        entries: Any = self.request_get_with_default(url, list, [])
        return [entry for entry in entries if isinstance(entry, str)]

    def get_text(self, url: str, default: str = "") -> str:
        return self.request_get_with_default(url, str, default)
