"""
PulseChart – Application Port: Historic Feed
==============================================
Interfaz para obtener un snapshot histórico de velas.

El caso de uso pide datos; la infraestructura decide CÓMO obtenerlos
(REST de un exchange, fichero, generador aleatorio...).

IMPLEMENTACIONES POSIBLES:
- RandomFinancialFeed (datos sintéticos diarios)
- Adaptadores REST de exchanges (fuera del núcleo)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions.domain_errors import InvalidGranularityError


@dataclass(frozen=True, slots=True)
class HistoricRequest:
    """Parámetros de una carga histórica."""

    product_id: str
    granularity_seconds: int
    candles: int
    end: float                # epoch ms del final del rango pedido

    @property
    def start(self) -> float:
        return self.end - self.candles * self.granularity_seconds * 1000


class HistoricFeed(ABC):
    """Fuente de snapshots históricos."""

    name: str = "historic"

    # None → cualquier granularidad
    supported_granularities: Optional[FrozenSet[int]] = None

    def validate_granularity(self, granularity_seconds: int) -> None:
        """
        Falla de forma síncrona si la granularidad no está soportada.
        Es un error de configuración fatal: no se recupera.
        """
        allowed = self.supported_granularities
        if allowed is not None and granularity_seconds not in allowed:
            raise InvalidGranularityError(granularity_seconds, sorted(allowed))

    def validate_product(self, product_id: str) -> None:
        """Hook para fuentes que solo sirven ciertos productos."""

    @abstractmethod
    async def fetch(self, request: HistoricRequest) -> List[Candle]:
        """
        Obtener velas históricas.

        Args:
            request: producto, granularidad, número de velas y fin del rango

        Returns:
            Lista de velas (no necesariamente ordenada)

        Raises:
            FeedError: si la fuente falla
        """
