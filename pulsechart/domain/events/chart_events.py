"""
PulseChart – Domain Events
============================
Hechos que el núcleo comunica hacia afuera. Son inmutables y llevan
timestamp de creación.

- DomainChanged   → el ZoomController aceptó un gesto.
- ViewportUpdate  → tupla (domain, visible_data, tracking_latest) que
                    consume el render sink en cada cambio aceptado.
- Notification    → errores de feed reportados hacia arriba.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.value_objects.time_domain import TimeDomain


@dataclass(frozen=True)
class DomainEvent:
    """Evento base de dominio."""

    timestamp: float = field(default_factory=time.time, kw_only=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.__class__.__name__,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DomainChanged(DomainEvent):
    """Evento: un gesto de pan/zoom produjo un dominio nuevo."""

    domain: TimeDomain
    source: str = "primary"

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "domain": self.domain.to_list(),
            "source": self.source,
        })
        return base


@dataclass(frozen=True)
class ViewportUpdate(DomainEvent):
    """Evento: nuevo viewport listo para renderizar."""

    domain: TimeDomain
    visible_data: tuple[Candle, ...]
    tracking_latest: bool

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "domain": self.domain.to_list(),
            "visible_data": [c.to_dict() for c in self.visible_data],
            "tracking_latest": self.tracking_latest,
        })
        return base


@dataclass(frozen=True)
class Notification(DomainEvent):
    """Evento: mensaje para el usuario (errores de feed)."""

    id: int
    message: str
    level: str = "error"

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "id": self.id,
            "message": self.message,
            "level": self.level,
        })
        return base
