"""
Excepción base del API.

Solo la capa HTTP las traduce a respuestas JSON (ver main.py); el job de
sincronización usa sus propios errores (FredApiError, SyncConfigError, SeriesSyncError).
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """Error con código HTTP y código de error propio."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}
