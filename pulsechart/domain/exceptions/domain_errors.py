"""
PulseChart – Domain Exceptions
================================
Excepciones específicas del dominio del gráfico.

Las situaciones geométricas degeneradas (dominio de ancho cero, centro
fuera de los datos) NO son excepciones: se resuelven con una política
silenciosa en ViewportEngine / ZoomController.

JERARQUÍA:
    DomainError (base)
    ├── ConfigurationError
    │   └── InvalidGranularityError
    ├── FeedError
    └── InvalidTradeError
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ConfigurationError(DomainError):
    """Configuración inválida detectada al configurar (fatal, no se recupera)."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR"):
        super().__init__(message, code=code)


class InvalidGranularityError(ConfigurationError):
    """Granularidad no soportada por la fuente de datos."""

    def __init__(self, granularity: int, allowed: Optional[list[int]] = None):
        allowed_txt = f" Supported: {sorted(allowed)}" if allowed else ""
        super().__init__(
            f"Granularity of {granularity} is not supported.{allowed_txt}",
            code="INVALID_GRANULARITY",
        )
        self.granularity = granularity
        self.allowed = list(allowed) if allowed else []


class FeedError(DomainError):
    """Fallo de un feed histórico o de streaming (se notifica, no se reintenta)."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message, code="FEED_ERROR")
        self.source = source
        self.payload = payload


class InvalidTradeError(DomainError):
    """Trade con precio no finito o tamaño negativo."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="INVALID_TRADE")
        self.field = field
        self.value = value
