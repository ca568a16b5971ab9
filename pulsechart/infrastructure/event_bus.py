"""
PulseChart – Event Bus (asyncio.Queue fan-out)
================================================
Bus de eventos interno para desacoplar la sesión del gráfico de sus
consumidores (UI, grabadores, tests).

Arquitectura:
  ┌──────────┐            ┌───────────┐
  │  Chart   │──viewport─▸│ Event Bus │──▸ Consumer 1 (render remoto)
  │ Session  │──notific.─▸│ (fan-out) │──▸ Consumer N ...
  └──────────┘            └───────────┘

POLÍTICA DE COLAS:
- Cada consumidor tiene su propia asyncio.Queue con tamaño limitado.
- Cola llena → se descarta el evento MÁS ANTIGUO (drop-oldest); la sesión
  nunca se bloquea por un consumidor lento.

`publish` es síncrono (put_nowait): la sesión lo llama desde callbacks
de trades y gestos que no son corrutinas.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict

from pulsechart.application.ports.event_publisher import IEventPublisher
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("event_bus")


class EventBus(IEventPublisher):
    """Fan-out event bus basado en asyncio.Queue."""

    def __init__(self, max_queue_size: int = 1_000) -> None:
        self._max_queue_size = max_queue_size
        # topic → lista de (queue, nombre_consumidor)
        self._subscribers: Dict[str, list[tuple[asyncio.Queue, str]]] = {}

    def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """
        Registrar un consumidor en un tópico.
        Retorna la Queue exclusiva de ese consumidor.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.setdefault(topic, []).append((queue, consumer_name))
        logger.info(
            "Consumidor '%s' suscrito a tópico '%s' (max_queue=%d)",
            consumer_name,
            topic,
            self._max_queue_size,
        )
        return queue

    def publish(self, topic: str, data: Any) -> None:
        """
        Publicar un evento a todos los suscriptores de un tópico.
        Política drop-oldest si la cola está llena.
        """
        for queue, consumer_name in self._subscribers.get(topic, []):
            if queue.full():
                try:
                    queue.get_nowait()
                    logger.warning(
                        "Cola llena para '%s' en tópico '%s' – evento antiguo descartado",
                        consumer_name,
                        topic,
                    )
                except asyncio.QueueEmpty:
                    pass
            queue.put_nowait(data)

    def unsubscribe_all(self, topic: str | None = None) -> None:
        """Desuscribir todos los consumidores (cleanup al shutdown)."""
        if topic:
            self._subscribers.pop(topic, None)
            logger.info("Todos los suscriptores del tópico '%s' eliminados", topic)
        else:
            self._subscribers.clear()
            logger.info("Todos los suscriptores eliminados (shutdown)")

    @property
    def subscriber_count(self) -> int:
        return sum(len(subs) for subs in self._subscribers.values())
