"""
Excepciones personalizadas del explorador de paquetes de aplicación.

Este módulo define una jerarquía de excepciones tipadas que facilitan
el manejo de errores específicos del dominio y su mapeo a respuestas HTTP.

Los recorridos remotos degradan a vacío en lugar de lanzar; estas
excepciones sólo cruzan la frontera en fallos de operación completa
(validación de entrada, cierre del ZIP, subida del paquete).

Author: Equipo de Ingeniería
Created: 2025
Version: 1.0.0
"""

from typing import Optional, Dict, Any
from package_explorer.core.constants import ErrorCodes


class PackageExplorerError(Exception):
    """
    Excepción base para todos los errores del servicio.

    Attributes:
        message: Mensaje descriptivo del error para el usuario
        error_code: Código de error estandarizado (ver ErrorCodes)
        details: Información adicional del error para debugging
        http_status: Código HTTP sugerido para la respuesta

    Example:
        raise PackageExplorerError(
            "Error construyendo el ZIP",
            error_code=ErrorCodes.ARCHIVE_FAILED,
            details={"content_url": "http://host/content/"}
        )
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        http_status: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte la excepción a diccionario para serialización."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "http_status": self.http_status
        }

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.message} | Code: {self.error_code}"
        return self.message


class ValidationError(PackageExplorerError):
    """
    Error de validación de entrada del usuario.

    HTTP Status: 400 Bad Request
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field_name: Optional[str] = None,
        received_value: Any = None
    ):
        enhanced_details = details or {}
        if field_name:
            enhanced_details['field_name'] = field_name
        if received_value is not None:
            enhanced_details['received_value'] = str(received_value)
            enhanced_details['received_type'] = type(received_value).__name__

        super().__init__(
            message=message,
            error_code=error_code,
            details=enhanced_details,
            http_status=400
        )

        self.field_name = field_name
        self.received_value = received_value


class ConfigurationError(PackageExplorerError):
    """
    Error en la configuración de acceso al host remoto.

    HTTP Status: 400 Bad Request

    Common Scenarios:
        - Falta 'config_host' y 'application_url'
        - URL con esquema no soportado
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        missing_keys: Optional[list] = None
    ):
        enhanced_details = details or {}
        if missing_keys:
            enhanced_details['missing_keys'] = missing_keys

        super().__init__(
            message=message,
            error_code=error_code,
            details=enhanced_details,
            http_status=400
        )

        self.missing_keys = missing_keys or []


class SecurityError(ValidationError):
    """
    Error de seguridad detectado en la entrada (path traversal, null bytes).

    HTTP Status: 400 Bad Request
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        attack_type: Optional[str] = None,
        detected_pattern: Optional[str] = None
    ):
        enhanced_details = details or {}
        if attack_type:
            enhanced_details['attack_type'] = attack_type
        if detected_pattern:
            enhanced_details['detected_pattern'] = repr(detected_pattern)
        enhanced_details['security_event'] = True

        super().__init__(
            message=message,
            error_code=error_code,
            details=enhanced_details
        )

        self.attack_type = attack_type
        self.detected_pattern = detected_pattern


class RemoteFetchError(PackageExplorerError):
    """
    Error al obtener un recurso del host remoto.

    Lo lanza únicamente la descarga estricta de bytes usada por el
    streamer de ZIP; los recorridos lo capturan y omiten el archivo.

    HTTP Status: 502 Bad Gateway
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        enhanced_details = details or {}
        if url:
            enhanced_details['url'] = url
        if status_code:
            enhanced_details['remote_status_code'] = status_code
        if original_error:
            enhanced_details['original_error'] = str(original_error)
            enhanced_details['original_error_type'] = type(original_error).__name__

        super().__init__(
            message=message,
            error_code=error_code or ErrorCodes.REMOTE_API_ERROR,
            details=enhanced_details,
            http_status=502
        )

        self.url = url
        self.status_code = status_code
        self.original_error = original_error


class ArchiveError(PackageExplorerError):
    """
    El ZIP del paquete no pudo completarse (apertura o cierre del escritor).

    HTTP Status: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        entries_written: Optional[int] = None
    ):
        enhanced_details = details or {}
        if entries_written is not None:
            enhanced_details['entries_written'] = entries_written

        super().__init__(
            message=message,
            error_code=error_code or ErrorCodes.ARCHIVE_FAILED,
            details=enhanced_details,
            http_status=500
        )

        self.entries_written = entries_written


# ========================================
# FUNCIONES DE UTILIDAD PARA EXCEPCIONES
# ========================================

def create_validation_error(
    message: str,
    field_name: Optional[str] = None,
    received_value: Any = None,
    error_code: Optional[str] = None
) -> ValidationError:
    """Factory function para crear errores de validación consistentes."""
    return ValidationError(
        message=message,
        field_name=field_name,
        received_value=received_value,
        error_code=error_code
    )


def create_config_error(
    message: str,
    missing_keys: Optional[list] = None,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> ConfigurationError:
    """Factory function para crear errores de configuración consistentes."""
    return ConfigurationError(
        message=message,
        missing_keys=missing_keys,
        error_code=error_code,
        details=details
    )


def create_security_error(
    message: str,
    attack_type: str,
    detected_pattern: Optional[str] = None,
    error_code: Optional[str] = None
) -> SecurityError:
    """Factory function para crear errores de seguridad consistentes."""
    return SecurityError(
        message=message,
        attack_type=attack_type,
        detected_pattern=detected_pattern,
        error_code=error_code
    )


def handle_remote_exception(
    e: Exception,
    operation: str,
    context: Optional[Dict[str, Any]] = None
) -> RemoteFetchError:
    """
    Convierte excepciones genéricas en RemoteFetchError.

    Analiza el mensaje de la excepción original para elegir el
    código de error apropiado.

    Args:
        e: Excepción original
        operation: Operación que se estaba realizando
        context: Contexto adicional (url, path, etc.)

    Returns:
        RemoteFetchError apropiado para la excepción
    """
    error_message = str(e).lower()
    context = context or {}

    if "timeout" in error_message or "timed out" in error_message:
        code, text = ErrorCodes.REMOTE_TIMEOUT, f"Timeout en {operation}"
    elif "not found" in error_message or "404" in error_message:
        code, text = ErrorCodes.REMOTE_NOT_FOUND, f"Recurso no encontrado en {operation}"
    elif "forbidden" in error_message or "403" in error_message:
        code, text = ErrorCodes.REMOTE_ACCESS_DENIED, f"Sin permisos en {operation}"
    else:
        code, text = ErrorCodes.REMOTE_API_ERROR, f"Error remoto en {operation}"

    return RemoteFetchError(
        text,
        error_code=code,
        details=context,
        original_error=e
    )
