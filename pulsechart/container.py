"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias que
gestiona feeds, providers, el Event Bus y las sesiones de gráfico.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pulsechart.application.dto.catalogue import DAY_1, DataSource, Product
from pulsechart.application.ports.event_publisher import IEventPublisher
from pulsechart.application.ports.historic_feed import HistoricFeed
from pulsechart.application.ports.render_sink import RenderSink
from pulsechart.application.ports.streaming_feed import StreamingFeed
from pulsechart.domain.services.discontinuity import (
    DiscontinuityProvider,
    IdentityDiscontinuity,
    SkipWeekendsDiscontinuity,
    provider_for,
)
from pulsechart.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Las dependencias se crean perezosamente y se comparten (singleton por
    contenedor); las sesiones se crean nuevas en cada llamada.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Ports (implementaciones concretas)
    _event_publisher: Optional[IEventPublisher] = None
    _historic_feed: Optional[HistoricFeed] = None
    _weekday_historic_feed: Optional[HistoricFeed] = None
    _streaming_feed: Optional[StreamingFeed] = None

    # Domain Services (stateless, se pueden compartir)
    _identity_provider: Optional[DiscontinuityProvider] = None
    _skip_weekends_provider: Optional[DiscontinuityProvider] = None

    # Cache de instancias
    _instances: Dict[str, Any] = field(default_factory=dict)

    # ==================== Domain Services ====================

    @property
    def identity_provider(self) -> DiscontinuityProvider:
        if self._identity_provider is None:
            self._identity_provider = provider_for(IdentityDiscontinuity.name)
        return self._identity_provider

    @property
    def skip_weekends_provider(self) -> DiscontinuityProvider:
        if self._skip_weekends_provider is None:
            self._skip_weekends_provider = provider_for(SkipWeekendsDiscontinuity.name)
        return self._skip_weekends_provider

    # ==================== Ports ====================

    @property
    def event_publisher(self) -> IEventPublisher:
        """Obtiene el Event Bus."""
        if self._event_publisher is None:
            from pulsechart.infrastructure.event_bus import EventBus
            self._event_publisher = EventBus(self.settings.event_bus_max_queue_size)
        return self._event_publisher

    @property
    def historic_feed(self) -> HistoricFeed:
        """Obtiene el feed histórico (generador aleatorio diario)."""
        if self._historic_feed is None:
            from pulsechart.infrastructure.feeds.random_financial_feed import RandomFinancialFeed
            self._historic_feed = RandomFinancialFeed()
        return self._historic_feed

    @property
    def weekday_historic_feed(self) -> HistoricFeed:
        """Feed histórico que solo emite velas de lunes a viernes."""
        if self._weekday_historic_feed is None:
            from pulsechart.infrastructure.feeds.random_financial_feed import (
                WEEKDAY_GENERATOR_PRODUCT,
                RandomFinancialFeed,
            )
            self._weekday_historic_feed = RandomFinancialFeed(
                skip_weekends=True, product_id=WEEKDAY_GENERATOR_PRODUCT
            )
        return self._weekday_historic_feed

    @property
    def streaming_feed(self) -> StreamingFeed:
        """Obtiene el feed de streaming (replay en memoria)."""
        if self._streaming_feed is None:
            from pulsechart.infrastructure.feeds.replay_streaming_feed import ReplayStreamingFeed
            self._streaming_feed = ReplayStreamingFeed()
        return self._streaming_feed

    # ==================== Catálogo ====================

    @property
    def data_generator_product(self) -> Product:
        """Producto "Data Generator" (diario, sin discontinuidades)."""
        if "data_generator_product" not in self._instances:
            from pulsechart.application.dto.notifications import (
                format_historic_error,
                format_streaming_error,
            )
            from pulsechart.infrastructure.feeds.random_financial_feed import (
                DATA_GENERATOR_PRODUCT,
            )
            source = DataSource(
                historic_feed=self.historic_feed,
                streaming_feed=self.streaming_feed,
                discontinuity_provider=self.identity_provider,
                historic_formatter=format_historic_error,
                streaming_formatter=format_streaming_error,
            )
            self._instances["data_generator_product"] = Product(
                id=DATA_GENERATOR_PRODUCT,
                source=source,
                display=DATA_GENERATOR_PRODUCT,
                periods=(DAY_1,),
            )
        return self._instances["data_generator_product"]

    @property
    def weekday_generator_product(self) -> Product:
        """Producto "Weekday Data Generator" (diario, sin fines de semana)."""
        if "weekday_generator_product" not in self._instances:
            from pulsechart.application.dto.notifications import (
                format_historic_error,
                format_streaming_error,
            )
            from pulsechart.infrastructure.feeds.random_financial_feed import (
                WEEKDAY_GENERATOR_PRODUCT,
            )
            source = DataSource(
                historic_feed=self.weekday_historic_feed,
                streaming_feed=self.streaming_feed,
                discontinuity_provider=self.skip_weekends_provider,
                historic_formatter=format_historic_error,
                streaming_formatter=format_streaming_error,
            )
            self._instances["weekday_generator_product"] = Product(
                id=WEEKDAY_GENERATOR_PRODUCT,
                source=source,
                display=WEEKDAY_GENERATOR_PRODUCT,
                periods=(DAY_1,),
            )
        return self._instances["weekday_generator_product"]

    @property
    def products(self) -> tuple[Product, ...]:
        """Catálogo completo, en orden de presentación."""
        return (self.data_generator_product, self.weekday_generator_product)

    # ==================== Use Cases ====================

    def get_chart_session(self, render_sink: Optional[RenderSink] = None):
        """
        Factory para ChartSession.

        Cada llamada crea una nueva instancia para evitar estado compartido.
        """
        from pulsechart.application.use_cases.chart_session import ChartSession
        return ChartSession(
            settings=self.settings,
            render_sink=render_sink,
            publisher=self.event_publisher,
        )

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._event_publisher = None
        self._historic_feed = None
        self._weekday_historic_feed = None
        self._streaming_feed = None
        self._identity_provider = None
        self._skip_weekends_provider = None
        self._instances.clear()

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'historic_feed')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """Obtiene la instancia global del contenedor."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Resetea el contenedor global."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.
    """
    global _container
    if settings is None:
        settings = Settings()
    _container = Container(settings=settings)
    return _container


# ==================== Testing Utilities ====================

def create_test_container(settings: Optional[Settings] = None, **overrides) -> Container:
    """
    Crea un contenedor de pruebas con dependencias sustituidas.

    Ejemplo:
        container = create_test_container(historic_feed=FakeHistoricFeed())
    """
    container = Container(settings=settings or Settings())
    for name, instance in overrides.items():
        container.override(name, instance)
    return container
