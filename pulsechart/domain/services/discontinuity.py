"""
PulseChart – Domain Service: Discontinuity Providers
======================================================
Aritmética de "tiempo operable": cuánto tiempo negociable hay entre dos
instantes y qué instante queda a N ms negociables de otro.

Un eje temporal continuo usa estas dos operaciones en lugar de la resta
directa, así los periodos sin mercado (fines de semana) no ocupan píxeles.

IMPLEMENTACIONES:
- IdentityDiscontinuity      → sin huecos (cripto, mercados 24/7).
- SkipWeekendsDiscontinuity  → sábado y domingo excluidos (calendario UTC).

CONTRATO (para SkipWeekends):
- distance(a, b) >= 0 si b >= a, y monótona en b.
- offset(a, distance(a, b)) == b para todo a <= b que no caiga en fin de
  semana.
- Un límite de semana exacto (sábado 00:00 / lunes 00:00) se normaliza con
  clamp_up / clamp_down de forma idéntica en distance y offset; si no, el
  mapeo a píxeles deriva hasta un día cerca de los fines de semana.

Todos los instantes son epoch en milisegundos UTC.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

MILLIS_PER_DAY = 24 * 3600 * 1000
MILLIS_PER_WORK_WEEK = MILLIS_PER_DAY * 5
MILLIS_PER_WEEK = MILLIS_PER_DAY * 7

# 1970-01-05 00:00 UTC fue lunes (el epoch cae en jueves)
_FIRST_MONDAY_MS = 4 * MILLIS_PER_DAY
_EPOCH_WEEKDAY = 3  # lunes = 0


class DiscontinuityProvider(ABC):
    """
    Capacidad sin estado compartida por todo el pipeline de un producto.

    Viewport, escala y zoom deben usar la MISMA instancia para un mismo
    producto: si distance/offset difieren entre componentes, el dominio
    publicado y el mapeo a píxeles dejan de coincidir.
    """

    name: str = "abstract"

    @abstractmethod
    def distance(self, start: float, end: float) -> float:
        """Milisegundos operables entre `start` y `end`."""

    @abstractmethod
    def offset(self, start: float, delta_ms: float) -> float:
        """Instante a `delta_ms` milisegundos operables de `start`."""

    @abstractmethod
    def clamp_up(self, date: float) -> float:
        """Llevar un instante excluido al siguiente instante operable."""

    @abstractmethod
    def clamp_down(self, date: float) -> float:
        """Llevar un instante excluido al final del tramo operable anterior."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class IdentityDiscontinuity(DiscontinuityProvider):
    """Sin discontinuidades: el tiempo operable es el tiempo de reloj."""

    name = "identity"

    def distance(self, start: float, end: float) -> float:
        return end - start

    def offset(self, start: float, delta_ms: float) -> float:
        return start + delta_ms

    def clamp_up(self, date: float) -> float:
        return date

    def clamp_down(self, date: float) -> float:
        return date


# ──────────────────────── Helpers de calendario ─────────────────────────


def weekday(date: float) -> int:
    """Día de la semana UTC (lunes = 0 … domingo = 6)."""
    return int((date // MILLIS_PER_DAY + _EPOCH_WEEKDAY) % 7)


def is_weekend(date: float) -> bool:
    return weekday(date) >= 5


def monday_floor(date: float) -> float:
    """Lunes 00:00 de la semana que contiene `date`."""
    weeks = (date - _FIRST_MONDAY_MS) // MILLIS_PER_WEEK
    return _FIRST_MONDAY_MS + weeks * MILLIS_PER_WEEK


def saturday_ceil(date: float) -> float:
    """Primer sábado 00:00 en o después de `date`."""
    saturday = monday_floor(date) + MILLIS_PER_WORK_WEEK
    if saturday < date:
        saturday += MILLIS_PER_WEEK
    return saturday


class SkipWeekendsDiscontinuity(DiscontinuityProvider):
    """Excluye sábados y domingos del tiempo transcurrido."""

    name = "skip_weekends"

    def clamp_down(self, date: float) -> float:
        # Fin de semana → cierre del viernes previo (sábado 00:00)
        if is_weekend(date):
            return monday_floor(date) + MILLIS_PER_WORK_WEEK
        return date

    def clamp_up(self, date: float) -> float:
        # Fin de semana → lunes 00:00 siguiente
        if is_weekend(date):
            return monday_floor(date) + MILLIS_PER_WEEK
        return date

    def distance(self, start: float, end: float) -> float:
        if end < start:
            return -self.distance(end, start)

        start = self.clamp_up(start)
        end = self.clamp_down(end)
        # Ambos dentro del mismo fin de semana
        if end <= start:
            return 0

        # mover el inicio al límite de fin de semana
        offset_start = saturday_ceil(start)
        if end < offset_start:
            return end - start

        ms_added = offset_start - start

        # mover el final al límite de fin de semana
        offset_end = saturday_ceil(end)
        ms_removed = offset_end - end

        # semanas completas entre ambos límites (ambos son sábados)
        weeks = (offset_end - offset_start) // MILLIS_PER_WEEK

        return weeks * MILLIS_PER_WORK_WEEK + ms_added - ms_removed

    def offset(self, start: float, delta_ms: float) -> float:
        date = self.clamp_up(start)
        remaining = delta_ms

        if remaining < 0:
            start_of_week = monday_floor(date)
            remaining += date - start_of_week

            # el destino cae dentro de la misma semana
            if remaining >= 0:
                return date + delta_ms

            # saltar al sábado previo y retroceder semanas completas
            date = start_of_week - 2 * MILLIS_PER_DAY
            weeks = remaining // MILLIS_PER_WORK_WEEK
            date += weeks * MILLIS_PER_WEEK
            remaining -= weeks * MILLIS_PER_WORK_WEEK

            return date + remaining + 2 * MILLIS_PER_DAY

        end_of_week = saturday_ceil(date)
        remaining -= end_of_week - date

        # si no se alcanza el fin de semana, basta con sumar
        if remaining < 0:
            return date + delta_ms

        # saltar el fin de semana
        date = end_of_week + 2 * MILLIS_PER_DAY

        # semanas completas
        complete_weeks = remaining // MILLIS_PER_WORK_WEEK
        date += complete_weeks * MILLIS_PER_WEEK
        remaining -= complete_weeks * MILLIS_PER_WORK_WEEK

        return date + remaining


_PROVIDERS: dict[str, type[DiscontinuityProvider]] = {
    IdentityDiscontinuity.name: IdentityDiscontinuity,
    SkipWeekendsDiscontinuity.name: SkipWeekendsDiscontinuity,
}


def provider_for(name: str) -> DiscontinuityProvider:
    """Instanciar un provider por nombre ("identity" | "skip_weekends")."""
    try:
        return _PROVIDERS[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown discontinuity provider {name!r}. Supported: {sorted(_PROVIDERS)}"
        ) from None
