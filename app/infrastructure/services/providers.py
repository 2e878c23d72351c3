"""Process-wide singletons: settings, database engine, record store and
notification service. Routes receive them through the aliases in
``infrastructure.services.dependencies``; tests clear the caches or use
``dependency_overrides``.
"""

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from infrastructure.configuration import Settings
from infrastructure.notifications.service import NotificationService
from infrastructure.notifications.store import NotificationRecordStore
from infrastructure.persistence import build_session_factory, engine_from_settings


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_engine() -> Engine:
    return engine_from_settings(get_settings().database)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return build_session_factory(get_engine())


@lru_cache
def get_record_store() -> NotificationRecordStore:
    return NotificationRecordStore(get_session_factory())


@lru_cache
def get_notification_service() -> NotificationService:
    """Service wired with the record store and one HTTP provider channel per
    external channel; shut down by the application lifespan."""
    return NotificationService(settings=get_settings(), store=get_record_store())
