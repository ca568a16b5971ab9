"""
PulseChart – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env
(prefijo `PULSECHART_`). Se usa pydantic-settings para validación
estricta al arranque: un valor inválido falla antes de abrir ningún feed.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Velas ──────────────────────────────────────────────────────────
    default_granularity_seconds: int = Field(
        default=60 * 60 * 24, description="Granularidad inicial de las velas (seg)"
    )
    candles_of_data: int = Field(
        default=200, description="Velas solicitadas al feed histórico por carga"
    )
    max_candles: int = Field(
        default=2_000, description="Máximo de velas en memoria (working set)"
    )

    # ─── Viewport ───────────────────────────────────────────────────────
    default_visible_ratio: float = Field(
        default=0.2,
        description="Proporción de datos visible tras 'reset to latest'",
    )
    allow_pan: bool = Field(default=True, description="Permitir desplazamiento")
    allow_zoom: bool = Field(default=True, description="Permitir zoom")

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=1_000,
        description="Tamaño máximo de cola por consumidor del Event Bus",
    )

    # ─── Logging ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="PULSECHART_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "default_granularity_seconds",
        "candles_of_data",
        "max_candles",
        "event_bus_max_queue_size",
    )
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("debe ser > 0")
        return value

    @field_validator("default_visible_ratio")
    @classmethod
    def _ratio_in_range(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("default_visible_ratio debe estar en (0, 1]")
        return value


# Singleton global – se importa donde se necesite
settings = Settings()
