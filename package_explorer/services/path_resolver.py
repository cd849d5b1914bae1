"""
Resolución de rutas y URLs del listado remoto.

Funciones puras compartidas por el constructor de árbol y el streamer
de ZIP: mismas entradas producen siempre las mismas salidas.
"""

import re
from typing import List
from urllib.parse import urljoin, urlparse

from package_explorer.core.constants import SUPPORTED_URL_SCHEMES

_UNSAFE_URL_CHARS = re.compile(r"[:/?#]+")


def resolve_url(current_url: str, child_ref: str) -> str:
    """
    Resuelve la referencia de un hijo contra la URL del directorio actual.

    El listado puede devolver URLs completas, rutas absolutas ("/a/b")
    o nombres relativos ("b/").

    Example:
        >>> resolve_url("http://h:19071/app/content/", "schemas/")
        'http://h:19071/app/content/schemas/'
        >>> resolve_url("http://h:19071/app/content/", "/other/x.txt")
        'http://h:19071/other/x.txt'
    """
    if child_ref.startswith(SUPPORTED_URL_SCHEMES):
        return child_ref
    try:
        return urljoin(current_url, child_ref)
    except ValueError:
        if current_url.endswith("/"):
            return current_url + child_ref
        return current_url + "/" + child_ref


def extract_name(ref: str) -> str:
    """
    Último segmento de una ruta o URL, ignorando una barra final.

    Example:
        >>> extract_name("http://h/app/content/schemas/")
        'schemas'
    """
    cleaned = ref[:-1] if ref.endswith("/") else ref
    return cleaned.rsplit("/", 1)[-1]


def to_relative_path(base_url: str, absolute_url: str, is_directory: bool) -> str:
    """
    Ruta relativa a la base del recorrido; los directorios terminan en "/".

    Si la URL no cuelga de la base se usa su componente path sin la
    barra inicial y, si ni siquiera se puede parsear, la URL completa
    con ':/?#' sustituidos por '_'.
    """
    if absolute_url.startswith(base_url):
        relative = absolute_url[len(base_url):]
    else:
        try:
            relative = urlparse(absolute_url).path.lstrip("/")
        except ValueError:
            relative = _UNSAFE_URL_CHARS.sub("_", absolute_url)

    if is_directory and not relative.endswith("/"):
        relative += "/"
    return relative


def parent_directories(archive_path: str) -> List[str]:
    """
    Prefijos de directorio de una ruta, del más externo al más interno.

    Example:
        >>> parent_directories("a/b/c.txt")
        ['a/', 'a/b/']
    """
    prefixes = []
    prefix = ""
    for segment in archive_path.split("/")[:-1]:
        prefix += segment + "/"
        prefixes.append(prefix)
    return prefixes


def join_content_url(base_url: str, relative_path: str) -> str:
    """Une la URL base del contenido con una ruta relativa."""
    return base_url.rstrip("/") + "/" + relative_path.lstrip("/")
