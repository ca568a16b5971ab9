"""
PulseChart – Zoom Controller
==============================
Convierte gestos de pan/zoom (traslación en píxeles + factor de escala,
acumulados durante el gesto) en un dominio temporal candidato, aplica las
políticas del ViewportEngine y publica un DomainChanged si se acepta.

MÁQUINA DE ESTADOS:
  IDLE ──begin_gesture()/update()──▸ DRAGGING ──end_gesture()──▸ IDLE
  Modalidad derivada del factor: scale == 1 → pan, scale != 1 → zoom.

CONTRATO POR UPDATE:
  1. Rango de traslación permitido a partir del extent de datos en píxeles;
     la traslación se recorta a ese rango.
  2. Pan / zoom según el factor.
  3. Modalidad deshabilitada → reset (scale=1, translate=0), sin evento.
  4. Dominio candidato por la inversa de la escala del inicio del gesto.
     Si los datos caben enteros en la vista → extent completo.
  5. Zoom con tracking-latest → se re-ancla a la última vela.
  6. Recorte componente a componente contra el extent de datos.
  7. Dominio de ancho cero → reset, sin evento.
  8. Publicar.

Un gesto rechazado NO es un error: es un límite normal de la interacción.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional

from pulsechart.domain.events.chart_events import DomainChanged
from pulsechart.domain.services.discontinuity import DiscontinuityProvider
from pulsechart.domain.services.time_scale import DiscontinuousTimeScale
from pulsechart.domain.services.viewport import ViewportEngine
from pulsechart.domain.value_objects.time_domain import TimeDomain
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("zoom_controller")

DomainListener = Callable[[DomainChanged], None]


class GestureState(str, Enum):
    IDLE = "IDLE"
    DRAGGING = "DRAGGING"


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


class ZoomController:
    """
    Controlador de gestos para una sub-vista del gráfico.

    Uso:
        zoom = ZoomController(width=800, provider=provider)
        zoom.configure(view_domain, data_extent, tracking_latest=True)
        zoom.on_domain_change(lambda event: session.on_view_change(event.domain))
        zoom.pan_by(-40)
        zoom.end_gesture()
    """

    def __init__(
        self,
        width: float,
        provider: DiscontinuityProvider,
        allow_pan: bool = True,
        allow_zoom: bool = True,
        tracking_latest: bool = True,
        source: str = "primary",
    ) -> None:
        if width <= 0:
            raise ValueError(f"ZoomController width must be > 0, got {width}")
        self._width = float(width)
        self._provider = provider
        self._viewport = ViewportEngine(provider)
        self.allow_pan = allow_pan
        self.allow_zoom = allow_zoom
        self.tracking_latest = tracking_latest
        self._source = source

        self._view_domain: Optional[TimeDomain] = None
        self._data_extent: Optional[TimeDomain] = None

        self._state = GestureState.IDLE
        self._base_scale: Optional[DiscontinuousTimeScale] = None
        self._translate = 0.0
        self._scale = 1.0
        self._last_published: Optional[TimeDomain] = None

        self._listeners: List[DomainListener] = []

    # ──────────────────────── Configuración ─────────────────────────────

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def width(self) -> float:
        return self._width

    @property
    def transform(self) -> tuple[float, float]:
        """(translate, scale) acumulados del gesto en curso."""
        return self._translate, self._scale

    @property
    def view_domain(self) -> Optional[TimeDomain]:
        return self._view_domain

    def configure(
        self,
        view_domain: TimeDomain,
        data_extent: TimeDomain,
        tracking_latest: Optional[bool] = None,
    ) -> ZoomController:
        """Actualizar dominio visible, extent de datos y flag de tracking."""
        self._view_domain = view_domain
        self._data_extent = data_extent
        if tracking_latest is not None:
            self.tracking_latest = tracking_latest
        if self._state is GestureState.IDLE:
            self._base_scale = None
        return self

    def resize(self, width: float) -> None:
        if width <= 0:
            raise ValueError(f"ZoomController width must be > 0, got {width}")
        self._width = float(width)
        self._base_scale = None

    def use_provider(self, provider: DiscontinuityProvider) -> None:
        """Cambiar de provider (nuevo producto); aborta el gesto en curso."""
        self._provider = provider
        self._viewport = ViewportEngine(provider)
        self.end_gesture()

    def on_domain_change(self, listener: DomainListener) -> ZoomController:
        self._listeners.append(listener)
        return self

    def clear_listeners(self) -> None:
        self._listeners.clear()

    # ──────────────────────── Gesto ─────────────────────────────────────

    def begin_gesture(self) -> None:
        if self._view_domain is None:
            return
        self._base_scale = DiscontinuousTimeScale(
            self._view_domain, (0.0, self._width), self._provider
        )
        self._reset_transform()
        self._state = GestureState.DRAGGING

    def end_gesture(self) -> None:
        if self._last_published is not None:
            self._view_domain = self._last_published
        self._last_published = None
        self._base_scale = None
        self._reset_transform()
        self._state = GestureState.IDLE

    def pan_by(self, dx: float) -> Optional[TimeDomain]:
        """Desplazar `dx` píxeles sobre la transformación acumulada."""
        return self.update(self._translate + dx, self._scale)

    def zoom_by(self, factor: float, anchor_px: Optional[float] = None) -> Optional[TimeDomain]:
        """Multiplicar la escala por `factor` manteniendo fijo `anchor_px`."""
        if factor <= 0:
            return None
        anchor = self._width / 2 if anchor_px is None else anchor_px
        location = (anchor - self._translate) / self._scale
        scale = self._scale * factor
        return self.update(anchor - location * scale, scale)

    def update(self, translate: float, scale: float = 1.0) -> Optional[TimeDomain]:
        """
        Procesar un update de gesto con la transformación ACUMULADA
        (`translate` en píxeles, `scale` factor). Retorna el dominio
        publicado o None si el gesto se rechazó.
        """
        if self._view_domain is None or self._data_extent is None:
            return None
        if scale <= 0:
            logger.debug("Gesto rechazado: factor de escala %s no positivo", scale)
            return None
        if self._state is GestureState.IDLE or self._base_scale is None:
            self.begin_gesture()

        base = self._base_scale
        data = self._data_extent
        width = self._width

        # ── 1. Rango de traslación desde el extent de datos en píxeles ──
        zoom_pixel_extent = (base(data.start), base(data.end) - width)
        max_domain_viewed = zoom_pixel_extent[0] > 0 and zoom_pixel_extent[1] < 0
        translate = _clamp(translate, -zoom_pixel_extent[1], -zoom_pixel_extent[0])
        self._translate = translate
        self._scale = scale

        # ── 2/3. Modalidad ──
        panned = scale == 1
        zoomed = not panned
        if (panned and not self.allow_pan) or (zoomed and not self.allow_zoom):
            logger.debug(
                "Gesto rechazado (%s deshabilitado)", "pan" if panned else "zoom"
            )
            self._reset_transform()
            return None

        # ── 4. Dominio candidato por la inversa de la escala ──
        if max_domain_viewed:
            candidate = data
        else:
            candidate = TimeDomain.of(
                base.invert((0 - translate) / scale),
                base.invert((width - translate) / scale),
            )
            # ── 5. Zoom anclado a la última vela ──
            if zoomed and self.tracking_latest:
                candidate = self._viewport.move_to_latest(candidate, data)

        # ── 6. Recorte contra el extent de datos ──
        domain = candidate.clamp_to(data)

        # ── 7. Guardia de dominio degenerado ──
        if domain.is_degenerate:
            logger.debug("Gesto rechazado: dominio de ancho cero en %s", domain.start)
            self._reset_transform()
            return None

        # ── 8. Publicar ──
        self._last_published = domain
        event = DomainChanged(domain=domain, source=self._source)
        for listener in list(self._listeners):
            listener(event)
        return domain

    def _reset_transform(self) -> None:
        self._translate = 0.0
        self._scale = 1.0
