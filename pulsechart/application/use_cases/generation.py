"""
PulseChart – Generation token
===============================
Invalida callbacks asíncronos obsoletos. Cada selección de producto o
granularidad incrementa la generación; una carga histórica que termina
después solo se aplica si su token sigue siendo el actual.
"""

from __future__ import annotations


class GenerationToken:
    def __init__(self) -> None:
        self._generation = 0

    @property
    def current(self) -> int:
        return self._generation

    def issue(self) -> int:
        """Token de la generación vigente."""
        return self._generation

    def invalidate(self) -> int:
        """Invalidar todo lo emitido hasta ahora; retorna el nuevo token."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation
