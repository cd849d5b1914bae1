"""
Lectura secuencial de un JAR/ZIP desde un stream sin seek.

Recorre las cabeceras locales de archivo una tras otra, sin usar el
directorio central (que está al final y exigiría descargar todo el
archivo o hacer peticiones por rango). Soporta entradas almacenadas
(método 0) y comprimidas con deflate (método 8), con o sin data
descriptor.

Formato de la cabecera local (30 bytes, little-endian):
    firma, versión, flags, método, hora, fecha, crc32,
    tamaño comprimido, tamaño original, largo del nombre, largo del extra
"""

import struct
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from package_explorer.core.constants import CHUNK_SIZE
from package_explorer.core.logger import get_logger

logger = get_logger(__name__)

LOCAL_FILE_HEADER = struct.Struct('<LHHHHHLLLHH')
LOCAL_FILE_SIGNATURE = 0x04034b50
DATA_DESCRIPTOR_SIGNATURE = 0x08074b50
ZIP64_EXTRA_ID = 0x0001

METHOD_STORED = 0
METHOD_DEFLATED = 8

FLAG_DATA_DESCRIPTOR = 0x08


class JarFormatError(ValueError):
    """El stream no es un ZIP legible o terminó en mitad de una entrada."""


@dataclass
class JarEntry:
    """
    Una entrada del archivo.

    data contiene los bytes descomprimidos; si la entrada no pudo leerse,
    data es None y error describe el motivo.
    """
    name: str
    is_directory: bool
    data: Optional[bytes] = None
    error: Optional[str] = None


class JarStreamReader:
    """
    Iterador de entradas sobre cualquier objeto con read(n).

    Example:
        >>> with client.open_stream(url) as stream:
        ...     for entry in JarStreamReader(stream.body).entries():
        ...         print(entry.name)
    """

    def __init__(self, body: BinaryIO, chunk_size: int = CHUNK_SIZE):
        self._body = body
        self._chunk_size = chunk_size
        self._pending = b""

    def entries(self) -> Iterator[JarEntry]:
        while True:
            header = self._read_exact(LOCAL_FILE_HEADER.size)
            if len(header) < 4:
                return

            signature = struct.unpack('<L', header[:4])[0]
            if signature != LOCAL_FILE_SIGNATURE:
                # Directorio central u otro registro final: no hay más entradas
                logger.debug(f"End of local entries, signature 0x{signature:08x}")
                return

            if len(header) < LOCAL_FILE_HEADER.size:
                raise JarFormatError("Cabecera local truncada")

            (_, _, flags, method, _, _, _, compressed_size, _,
             name_length, extra_length) = LOCAL_FILE_HEADER.unpack(header)

            raw_name = self._read_required(name_length)
            extra = self._read_required(extra_length)

            name = raw_name.decode('utf-8', errors='replace')
            zip64_size = _zip64_compressed_size(extra)
            if zip64_size is not None and compressed_size == 0xFFFFFFFF:
                compressed_size = zip64_size

            if flags & FLAG_DATA_DESCRIPTOR:
                entry = self._read_with_descriptor(name, method, zip64_size is not None)
                yield entry
                if entry.error is not None:
                    # Sin tamaño conocido no se puede ubicar la siguiente cabecera
                    logger.warning(f"Stopping archive read after unreadable entry: {name}")
                    return
            else:
                yield self._read_sized(name, method, compressed_size)

    # ========================================
    # LECTURA DE DATOS POR ENTRADA
    # ========================================

    def _read_sized(self, name: str, method: int, compressed_size: int) -> JarEntry:
        raw = self._read_required(compressed_size)
        is_directory = name.endswith("/")

        if method == METHOD_STORED:
            return JarEntry(name, is_directory, data=raw)
        if method == METHOD_DEFLATED:
            try:
                return JarEntry(name, is_directory, data=zlib.decompress(raw, -zlib.MAX_WBITS))
            except zlib.error as e:
                return JarEntry(name, is_directory, error=str(e))
        return JarEntry(name, is_directory, error=f"Unsupported compression method {method}")

    def _read_with_descriptor(self, name: str, method: int, is_zip64: bool) -> JarEntry:
        is_directory = name.endswith("/")

        if method != METHOD_DEFLATED:
            return JarEntry(
                name, is_directory,
                error=f"Entry size unknown for compression method {method}"
            )

        decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
        parts = []
        try:
            while not decompressor.eof:
                chunk = self._read_chunk()
                if not chunk:
                    raise JarFormatError(f"Stream terminó dentro de la entrada {name}")
                parts.append(decompressor.decompress(chunk))
        except zlib.error as e:
            return JarEntry(name, is_directory, error=str(e))

        self._pending = decompressor.unused_data + self._pending
        self._skip_data_descriptor(is_zip64)
        return JarEntry(name, is_directory, data=b"".join(parts))

    def _skip_data_descriptor(self, is_zip64: bool) -> None:
        sizes_length = 16 if is_zip64 else 8
        first = self._read_required(4)
        if struct.unpack('<L', first)[0] == DATA_DESCRIPTOR_SIGNATURE:
            self._read_required(4 + sizes_length)
        else:
            # Descriptor sin firma: los 4 bytes leídos eran el crc32
            self._read_required(sizes_length)

    # ========================================
    # LECTURA DEL STREAM
    # ========================================

    def _read_chunk(self) -> bytes:
        if self._pending:
            chunk, self._pending = self._pending, b""
            return chunk
        return self._body.read(self._chunk_size)

    def _read_exact(self, size: int) -> bytes:
        """Lee hasta size bytes; devuelve menos sólo si el stream terminó."""
        parts = []
        remaining = size
        while remaining > 0:
            chunk = self._read_chunk()
            if not chunk:
                break
            if len(chunk) > remaining:
                self._pending = chunk[remaining:] + self._pending
                chunk = chunk[:remaining]
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def _read_required(self, size: int) -> bytes:
        data = self._read_exact(size)
        if len(data) < size:
            raise JarFormatError(f"Stream truncado: se esperaban {size} bytes, llegaron {len(data)}")
        return data


def _zip64_compressed_size(extra: bytes) -> Optional[int]:
    """Tamaño comprimido del campo extra ZIP64, si existe."""
    offset = 0
    while offset + 4 <= len(extra):
        header_id, data_size = struct.unpack('<HH', extra[offset:offset + 4])
        if header_id == ZIP64_EXTRA_ID and data_size >= 16:
            # Orden en cabecera local: tamaño original, tamaño comprimido
            return struct.unpack('<Q', extra[offset + 12:offset + 20])[0]
        offset += 4 + data_size
    return None
