"""
Search container.

Composition root of the engine: builds every service explicitly from
configuration once, starts the instrumentation consumer and releases
connections on shutdown.
"""

from typing import Optional

from ...application.services import (
    InstrumentationService,
    RecommendationApplicationService,
    SearchApplicationService
)
from ...core.interfaces import InstrumentationSinkInterface
from ...domain.search import FacetService, HighlightService, QueryCompiler, QueryValidator
from ...infrastructure.analytics import LoggingInstrumentationSink, MongoInstrumentationSink
from ...infrastructure.config import ConfigManager, EnvironmentConfig
from ...infrastructure.database import ConnectionFactory
from ...infrastructure.database.elastic import FullTextBackend
from ...infrastructure.database.mongo import AggregationBackend, MongoRecipeRepository
from ...shared.logging import LogLevel, configure_logging, set_default_level

logger = configure_logging(__name__)


class SearchContainer:
    """
    Container for search and recommendation services.

    Usable as an async context manager::

        async with SearchContainer(config_dir="config") as container:
            results = await container.search_service.search(query)
    """

    def __init__(
        self,
        config_dir: str = "config",
        environment: Optional[str] = None,
        config: Optional[EnvironmentConfig] = None,
        connections: Optional[ConnectionFactory] = None,
        sink: Optional[InstrumentationSinkInterface] = None
    ):
        """
        Initialize the container.

        Args:
            config_dir: Configuration directory
            environment: Optional environment name
            config: Already loaded configuration, skips loading from files
            connections: Optional connection factory
            sink: Optional analytics sink overriding the configured one
        """
        self.config = config or ConfigManager(
            config_dir=config_dir,
            environment=environment
        ).load_config()

        level = LogLevel.from_name(self.config.get_log_level())
        set_default_level(level)

        self.connections = connections or ConnectionFactory(self.config)
        self.instrumentation = InstrumentationService(
            sink=sink or self._create_sink(),
            queue_size=self.config.get_instrumentation_queue_size(),
            slow_query_threshold_ms=self.config.get_slow_query_threshold_ms(),
            enabled=self.config.get_instrumentation_enabled()
        )

        default_limit = self.config.get_search_default_limit()
        max_limit = self.config.get_search_max_limit()
        stable = self.config.get_stable_sort()

        self.aggregation_backend = AggregationBackend(
            self.connections,
            QueryCompiler(default_limit, max_limit, tie_breaker_field="_id" if stable else None)
        )
        self.fulltext_backend = FullTextBackend(
            self.connections,
            QueryCompiler(default_limit, max_limit),
            recipes_index=self.config.get_recipes_index(),
            ingredients_index=self.config.get_ingredients_index()
        )

        self.search_service = SearchApplicationService(
            backends={
                self.aggregation_backend.name: self.aggregation_backend,
                self.fulltext_backend.name: self.fulltext_backend
            },
            default_backend=self.config.get_default_backend(),
            instrumentation=self.instrumentation,
            validator=QueryValidator(),
            highlighter=HighlightService(),
            facet_service=FacetService(),
            suggester=self.fulltext_backend,
            suggestion_limit=self.config.get_suggestion_limit()
        )
        self.recommendation_service = RecommendationApplicationService(
            repository=MongoRecipeRepository(self.connections),
            instrumentation=self.instrumentation
        )

    def _create_sink(self) -> InstrumentationSinkInterface:
        if self.config.get_instrumentation_sink() == "mongodb":
            return MongoInstrumentationSink(self.connections)
        return LoggingInstrumentationSink()

    async def start(self) -> None:
        """Start background work."""
        await self.instrumentation.start()
        logger.info("Search container started", backend=self.config.get_default_backend())

    async def shutdown(self) -> None:
        """Drain analytics and close backend connections."""
        try:
            await self.instrumentation.stop()
        finally:
            await self.connections.close()
        logger.info("Search container shut down")

    async def __aenter__(self) -> "SearchContainer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
