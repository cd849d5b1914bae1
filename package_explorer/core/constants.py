"""
Constantes globales para el explorador de paquetes de aplicación.

Este módulo centraliza todas las constantes del sistema para facilitar
la configuración y mantenimiento. Separadas por categorías lógicas.

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

import os
from typing import FrozenSet, Tuple

# ========================================
# TIMEOUTS Y PERFORMANCE
# ========================================

# Timeouts para requests HTTP (prevenir Lambda timeout)
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '30'))  # Default: 30 segundos
CONNECTION_TIMEOUT = int(os.getenv('CONNECTION_TIMEOUT', '10'))  # Default: 10 segundos

# Tamaño de bloque para lectura de streams remotos
CHUNK_SIZE = int(os.getenv('CHUNK_SIZE', '8192'))  # 8KB

# Pool de conexiones para mejor performance
CONNECTION_POOL_SIZE = int(os.getenv('CONNECTION_POOL_SIZE', '10'))
CONNECTION_POOL_MAXSIZE = int(os.getenv('CONNECTION_POOL_MAXSIZE', '20'))

USER_AGENT = "package-explorer/1.0.0"

# Límite de longitud de rutas recibidas en requests
MAX_PATH_LENGTH = int(os.getenv('MAX_PATH_LENGTH', '1000'))

# ========================================
# CONFIGURACIÓN DE LOGGING
# ========================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = os.getenv('LOG_FORMAT', 'structured')  # 'structured' o 'simple'

LOG_SIMPLE_FORMAT = '[%(levelname)s] %(asctime)s - %(message)s'

# ========================================
# SERVIDOR DE CONFIGURACIÓN
# ========================================

# Puerto por defecto del config server
CONFIG_SERVER_PORT = int(os.getenv('CONFIG_SERVER_PORT', '19071'))

DEFAULT_TENANT = os.getenv('DEFAULT_TENANT', 'default')
DEFAULT_APPLICATION = os.getenv('DEFAULT_APPLICATION', 'default')
DEFAULT_ENVIRONMENT = os.getenv('DEFAULT_ENVIRONMENT', 'prod')
DEFAULT_REGION = os.getenv('DEFAULT_REGION', 'default')
DEFAULT_INSTANCE = os.getenv('DEFAULT_INSTANCE', 'default')

APPLICATION_PATH_TEMPLATE = (
    "/application/v2/tenant/{tenant}/application/{application}"
    "/environment/{environment}/region/{region}/instance/{instance}"
)

# Segmentos bajo la raíz de la aplicación
CONTENT_SEGMENT = "content/"
COMPONENTS_SEGMENT = "content/components/"
MODELS_SEGMENT = "content/models/"
SERVICES_FILE = "content/services.xml"
HOSTS_FILE = "content/hosts.xml"

SUPPORTED_URL_SCHEMES: Tuple[str, ...] = ("http://", "https://")

# ========================================
# ENTREGA DEL PAQUETE (S3)
# ========================================

BUCKET_NAME = os.getenv('BUCKET_NAME')
FOLDER_BUCKET = os.getenv('FOLDER_BUCKET', 'app-packages')
EXECUTION_ENVIROMENT = os.getenv('EXECUTION_ENVIROMENT', 'lambda')
PACKAGE_ARCHIVE_NAME = "vespa-app-package.zip"

# Destino del ZIP en ejecución local (streaming directo a disco)
PACKAGE_OUTPUT_PATH = os.getenv('PACKAGE_OUTPUT_PATH', PACKAGE_ARCHIVE_NAME)

# ========================================
# POLÍTICA DE CONTENIDO
# ========================================

# Extensiones que nunca se descargan como texto bajo demanda
NON_READABLE_EXTENSIONS: FrozenSet[str] = frozenset({"jar", "zip", "class"})

# Segmento de directorio de modelos (binarios grandes)
MODELS_PATH_MARKER = "/models/"

# Extensiones tratadas como texto dentro de un JAR
TEXT_FILE_EXTENSIONS: Tuple[str, ...] = (
    ".java", ".xml", ".def", ".properties", ".txt", ".md", ".json",
    ".yml", ".yaml", ".css", ".js", ".html", ".mf",
)
MANIFEST_MARKER = "MANIFEST"
CLASS_FILE_EXTENSION = ".class"

# Placeholders visibles para el cliente
BINARY_FILE_PLACEHOLDER = "// Binary file: Not displayable as text"
EMPTY_FILE_PLACEHOLDER = "// Empty file or could not read as text"
READ_ERROR_PLACEHOLDER = "// Error reading file: {reason}"
CLASS_FILE_PLACEHOLDER = (
    "// Compiled Java class file (bytecode)\n"
    "// Original source not available\n"
    "// File: {path}\n"
    "// Use a Java decompiler to view source code"
)
ARCHIVE_BINARY_PLACEHOLDER = "// Binary file: {path}\n// Content not displayable as text"
ARCHIVE_ENTRY_ERROR_PLACEHOLDER = "// Error reading file content: {reason}"

# Nombres de nodos raíz sintéticos
LAZY_TREE_ROOT_NAME = "content"
ARCHIVE_TREE_ROOT_NAME = "root"
ROOT_PATH = "/"

# ========================================
# OPERACIONES SOPORTADAS
# ========================================

class Operations:
    """Constantes para operaciones soportadas"""
    GET_TREE = "GET_TREE"
    GET_FILE = "GET_FILE"
    DOWNLOAD_PACKAGE = "DOWNLOAD_PACKAGE"
    GET_COMPONENTS = "GET_COMPONENTS"
    GET_OVERVIEW = "GET_OVERVIEW"

    ALL = [GET_TREE, GET_FILE, DOWNLOAD_PACKAGE, GET_COMPONENTS, GET_OVERVIEW]

    # Operaciones que requieren el campo 'path'
    REQUIRES_PATH = [GET_FILE]

    DESCRIPTIONS = {
        GET_TREE: "Obtiene el árbol del paquete de aplicación sin contenido",
        GET_FILE: "Obtiene el contenido de un archivo del paquete",
        DOWNLOAD_PACKAGE: "Descarga el paquete completo como ZIP",
        GET_COMPONENTS: "Obtiene el sistema de archivos del JAR de componentes",
        GET_OVERVIEW: "Obtiene el resumen del paquete (services, hosts, modelos)",
    }

# ========================================
# CÓDIGOS DE ERROR ESTANDARIZADOS
# ========================================

class ErrorCodes:
    """Códigos de error estandarizados para mejor categorización"""

    # Errores de validación (4xx)
    MISSING_OPERATION = "MISSING_OPERATION"
    MISSING_CONFIG = "MISSING_CONFIG"
    MISSING_PATH = "MISSING_PATH_FOR_FILE"
    INVALID_OPERATION = "UNSUPPORTED_OPERATION"
    INVALID_JSON = "INVALID_JSON"
    INVALID_PATH = "INVALID_PATH"
    PATH_TRAVERSAL = "PATH_TRAVERSAL_DETECTED"
    PATH_TOO_LONG = "PATH_TOO_LONG"

    # Errores de configuración (4xx)
    MISSING_REQUIRED_KEYS = "MISSING_REQUIRED_KEYS"
    INVALID_CONFIG_TYPE = "INVALID_CONFIG_TYPE"
    INVALID_URL = "INVALID_URL"

    # Errores remotos (5xx)
    REMOTE_API_ERROR = "REMOTE_API_ERROR"
    REMOTE_TIMEOUT = "REMOTE_TIMEOUT"
    REMOTE_NOT_FOUND = "REMOTE_NOT_FOUND"
    REMOTE_ACCESS_DENIED = "REMOTE_ACCESS_DENIED"

    # Errores de servicio (5xx)
    ARCHIVE_FAILED = "ARCHIVE_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"

# ========================================
# HEADERS HTTP ESTANDARIZADOS
# ========================================

COMMON_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "X-Content-Type-Options": "nosniff",
}

JSON_HEADERS = {
    **COMMON_HEADERS,
    "Content-Type": "application/json; charset=utf-8",
    "Cache-Control": "no-cache, no-store, must-revalidate",
}

ARCHIVE_HEADERS = {
    **COMMON_HEADERS,
    "Content-Type": "application/octet-stream",
    "Access-Control-Expose-Headers": "Content-Disposition",
}

# ========================================
# PATRONES DE SEGURIDAD
# ========================================

DANGEROUS_PATH_PATTERNS = [
    '..',           # Unix path traversal
    '\\',           # Separadores Windows
    '\x00',         # Null byte
]

# ========================================
# CONFIGURACIÓN DE ENTORNO
# ========================================

IS_LAMBDA = bool(os.getenv('AWS_LAMBDA_FUNCTION_NAME'))
IS_LOCAL = not IS_LAMBDA

if IS_LAMBDA:
    ENABLE_DEBUG_METRICS = False
    ENABLE_DETAILED_LOGGING = False
else:
    ENABLE_DEBUG_METRICS = True
    ENABLE_DETAILED_LOGGING = True

# ========================================
# MÉTRICAS Y MONITORING
# ========================================

class MetricNames:
    """Nombres estandarizados de métricas para observabilidad"""

    TREES_BUILT = "trees_built"
    TREE_FILES = "tree_files"
    TREE_DIRECTORIES = "tree_directories"
    FILES_FETCHED = "files_fetched"
    BINARY_PLACEHOLDERS = "binary_placeholders"
    ARCHIVE_ENTRIES = "archive_entries"
    ARCHIVE_SKIPPED_FILES = "archive_skipped_files"
    ARCHIVE_SIZE = "archive_size"
    COMPONENT_ENTRIES = "component_entries"
    REQUEST_DURATION = "request_duration"
    RESPONSE_SIZE = "response_size"
    ERRORS_TOTAL = "errors_total"
