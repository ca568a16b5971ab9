"""
PulseChart – Logging
======================
Todo el paquete registra bajo el namespace `pulsechart.*`; `setup_logging`
solo instala un handler en ese logger raíz del paquete, de modo que una
aplicación anfitriona conserva su propia configuración del root logger.

  setup_logging("DEBUG")                 # consola, nivel por nombre o número
  logger = get_logger("chart_session")   # → logging.Logger("pulsechart.chart_session")
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

NAMESPACE = "pulsechart"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Librerías que inundan DEBUG durante la reproducción de trades
NOISY_LOGGERS = ("asyncio",)


class _PackageHandler(logging.StreamHandler):
    """Handler propio del paquete; se reemplaza en cada setup_logging."""


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level {level!r}")
    return resolved


def quiet_loggers(*names: str, level: int = logging.WARNING) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def setup_logging(level: int | str = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Configurar el logger del paquete. Idempotente: llamar de nuevo cambia
    nivel y destino sin duplicar líneas.
    """
    resolved = _coerce_level(level)
    package_logger = logging.getLogger(NAMESPACE)
    for handler in list(package_logger.handlers):
        if isinstance(handler, _PackageHandler):
            package_logger.removeHandler(handler)

    handler = _PackageHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(resolved)
    package_logger.propagate = False

    quiet_loggers(*NOISY_LOGGERS)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{NAMESPACE}.{name}")
