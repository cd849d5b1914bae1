"""
Resumen del paquete de aplicación desplegado: generación, services.xml,
hosts.xml y nombres de los modelos.
"""

import json

from package_explorer.interfaces.remote_client_interface import IRemoteClient
from package_explorer.models.tree_node import PackageOverview
from package_explorer.services.path_resolver import extract_name
from package_explorer.core.constants import SERVICES_FILE, HOSTS_FILE, MODELS_SEGMENT
from package_explorer.core.logger import get_logger

logger = get_logger(__name__)

MODELS_PARSE_ERROR = "Error parsing models"


def assemble_overview(client: IRemoteClient, application_url: str) -> PackageOverview:
    """
    Reúne el resumen del paquete. Cada pieza degrada a cadena vacía por
    separado; sólo un listado de modelos malformado produce un aviso.
    """
    logger.info(f"Assembling package overview from: {application_url}")

    application = client.request_get_with_default(application_url, dict, {})
    generation = application.get("generation")

    services_content = client.get_text(f"{application_url}/{SERVICES_FILE}")
    hosts_content = client.get_text(f"{application_url}/{HOSTS_FILE}")
    models_raw = client.get_text(f"{application_url}/{MODELS_SEGMENT}")

    return PackageOverview(
        generation="" if generation is None else str(generation),
        services_content=services_content,
        hosts_content=hosts_content,
        models_content=parse_model_names(models_raw)
    )


def parse_model_names(models_raw: str) -> str:
    """
    Nombres de archivo del listado de modelos, uno por línea.

    Example:
        >>> parse_model_names('["http://h/content/models/a.onnx", "b.onnx"]')
        'a.onnx\\nb.onnx'
    """
    if not models_raw:
        return ""

    try:
        model_urls = json.loads(models_raw)
    except ValueError:
        logger.warning("Models listing is not valid JSON")
        return MODELS_PARSE_ERROR

    if not isinstance(model_urls, list):
        logger.warning("Models listing is not a JSON array")
        return MODELS_PARSE_ERROR

    return "\n".join(extract_name(str(url)) for url in model_urls)
