"""
Ejecución local del explorador de paquetes de aplicación
========================================================

Permite probar en local las operaciones del servicio:
- Árbol del paquete (GET_TREE)
- Contenido de un archivo (GET_FILE)
- ZIP completo del paquete, escrito en streaming a disco (DOWNLOAD_PACKAGE)
- Sistema de archivos del JAR de componentes (GET_COMPONENTS)
- Resumen del paquete (GET_OVERVIEW)

Uso:
-----
Desde archivo de evento:
    python main.py events/get_tree.json

Desde argumentos CLI:
    python main.py --operation GET_FILE --config '{"config_host": "localhost"}' --path services.xml

El destino del ZIP local se configura con PACKAGE_OUTPUT_PATH.

Autor: Equipo de Ingeniería
Versión: 1.0.0
"""

import sys

from package_explorer.core.constants import Operations
from package_explorer.core.logger import (
    get_logger,
    set_request_context,
    clear_request_context
)
from package_explorer.utils.request_parser import parse_local_event
from package_explorer.handlers.tree_handler import handle_get_tree_local
from package_explorer.handlers.file_handler import handle_get_file_local
from package_explorer.handlers.package_download_handler import handle_download_package_local
from package_explorer.handlers.components_handler import handle_get_components_local
from package_explorer.handlers.overview_handler import handle_get_overview_local

logger = get_logger(__name__)


def main() -> None:
    """
    Carga un evento desde archivo o argumentos CLI e invoca el handler
    local de la operación solicitada.
    """
    client = None
    try:
        set_request_context(environment="local", source="main")
        logger.info("🧪 Inicio de prueba local")

        event_file = sys.argv[1] if len(sys.argv) > 1 and not sys.argv[1].startswith('--') else None
        operation, client, resolver, path = parse_local_event(event_file)

        if operation == Operations.GET_TREE:
            handle_get_tree_local(client, resolver)

        elif operation == Operations.GET_FILE:
            handle_get_file_local(client, resolver, path)

        elif operation == Operations.DOWNLOAD_PACKAGE:
            handle_download_package_local(client, resolver)

        elif operation == Operations.GET_COMPONENTS:
            handle_get_components_local(client, resolver)

        elif operation == Operations.GET_OVERVIEW:
            handle_get_overview_local(client, resolver)

        else:
            print(f"❌ Operación no reconocida: {operation}")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n⏹️ Ejecución interrumpida por el usuario")
        sys.exit(0)

    except Exception as e:
        logger.exception("🛑 Fallo durante ejecución local")
        print(f"\n❌ Error inesperado: {str(e)}")
        print(f"🔧 Tipo: {type(e).__name__}")
        sys.exit(1)

    finally:
        if client is not None:
            client.close()
        clear_request_context()
        logger.info("✅ Prueba local finalizada")


if __name__ == "__main__":
    main()
