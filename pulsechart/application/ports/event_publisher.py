"""
PulseChart – Application Port: Event Publisher
================================================
Interfaz para publicar eventos hacia otros consumidores (UI, logs,
grabadores). La sesión publica; la infraestructura decide CÓMO entregar.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IEventPublisher(ABC):
    """
    IMPLEMENTACIONES POSIBLES:
    - EventBus (asyncio.Queue fan-out en memoria)
    """

    @abstractmethod
    def publish(self, topic: str, data: Any) -> None:
        """
        Publica un evento a un tópico sin bloquear.

        Args:
            topic: Nombre del tópico (e.g. "viewport", "notification")
            data: Evento de dominio
        """
