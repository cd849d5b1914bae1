from typing import Any, Dict
from urllib.parse import urlparse

from package_explorer.core.constants import (
    CONFIG_SERVER_PORT,
    DEFAULT_TENANT,
    DEFAULT_APPLICATION,
    DEFAULT_ENVIRONMENT,
    DEFAULT_REGION,
    DEFAULT_INSTANCE,
    APPLICATION_PATH_TEMPLATE,
    CONTENT_SEGMENT
)
from package_explorer.core.logger import get_logger

logger = get_logger(__name__)


class ApplicationUrlResolver:
    """
    Deriva la URL de la aplicación desplegada a partir de la configuración del request.

    Acepta una 'application_url' explícita o un 'config_host' (con o sin
    esquema y puerto); en el segundo caso compone la ruta de la API de
    despliegue con tenant/application/environment/region/instance.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    def application_url(self) -> str:
        explicit = self.config.get("application_url")
        if explicit:
            return explicit.rstrip("/")

        base = self._config_server_base(self.config["config_host"])
        path = APPLICATION_PATH_TEMPLATE.format(
            tenant=self.config.get("tenant", DEFAULT_TENANT),
            application=self.config.get("application", DEFAULT_APPLICATION),
            environment=self.config.get("environment", DEFAULT_ENVIRONMENT),
            region=self.config.get("region", DEFAULT_REGION),
            instance=self.config.get("instance", DEFAULT_INSTANCE),
        )
        url = base + path
        logger.debug(f"Application URL resolved: {url}")
        return url

    def content_url(self) -> str:
        return f"{self.application_url()}/{CONTENT_SEGMENT}"

    @staticmethod
    def _config_server_base(config_host: str) -> str:
        if "://" not in config_host:
            config_host = f"http://{config_host}"
        parsed = urlparse(config_host)
        if parsed.port is None:
            return f"{parsed.scheme}://{parsed.hostname}:{CONFIG_SERVER_PORT}"
        return f"{parsed.scheme}://{parsed.hostname}:{parsed.port}"
