"""
PulseChart – núcleo de gráficos de velas en vivo
==================================================
Agregación OHLC de trades, escalas temporales con discontinuidades
(fines de semana), políticas de viewport y máquina de estados de zoom/pan.
"""

__version__ = "0.1.0"
