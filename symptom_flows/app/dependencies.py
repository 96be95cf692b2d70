"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the application's services.
It is responsible for:
1. Instantiating the core Singleton services (Repositories, Log Store, Weather).
2. Wiring them together into the FlowService.
3. Managing the lifecycle of these objects using @lru_cache to ensure
   they are created only once per application process.

Tests replace any of these through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from ..config import settings
from ..rendering.weather import SimulatedWeatherProvider, WeatherProvider
from ..repositories.flow import FileFlowRepository, FlowRepository, StaticFlowRepository
from ..repositories.log_store import InMemoryLogStore, LogStore, SqlLogStore
from ..repositories.session import InMemorySessionRepository, SessionRepository
from ..services.flow_service import FlowService


# Flow Repository (Singleton)
@lru_cache()
def get_flow_repository() -> FlowRepository:
    if settings.FLOW_CONFIG_DIR:
        return FileFlowRepository(settings.FLOW_CONFIG_DIR)
    return StaticFlowRepository()

# Log Store (Singleton)
@lru_cache()
def get_log_store() -> LogStore:
    if settings.LOG_STORE_BACKEND == "sql":
        return SqlLogStore()
    return InMemoryLogStore()

# Session Repository (Singleton)
# Note: sessions hold live controllers, so this must be a singleton!
@lru_cache()
def get_session_repository() -> SessionRepository:
    return InMemorySessionRepository()

# Weather Source (Singleton)
@lru_cache()
def get_weather_provider() -> Optional[WeatherProvider]:
    if settings.WEATHER_PROVIDER == "none":
        return None
    return SimulatedWeatherProvider()

# The Flow Service (Singleton Service)
@lru_cache()
def get_flow_service(
    flow_repo: FlowRepository = Depends(get_flow_repository),
    session_repo: SessionRepository = Depends(get_session_repository),
    log_store: LogStore = Depends(get_log_store),
    weather: Optional[WeatherProvider] = Depends(get_weather_provider),
) -> FlowService:
    """
    Injects all necessary components into the FlowService.
    """
    return FlowService(
        flow_repository=flow_repo,
        session_repository=session_repo,
        log_store=log_store,
        weather_provider=weather,
        viewport_width=settings.VIEWPORT_WIDTH,
    )
