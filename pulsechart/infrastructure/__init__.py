"""
PulseChart – Infrastructure Layer
===================================
Implementaciones concretas de los ports de aplicación.

- event_bus.py: IEventPublisher con colas asyncio (fan-out, drop-oldest)
- feeds/: feeds histórico y de streaming

Puede importar de domain/, application/ (ports, dto) y shared/.
"""
