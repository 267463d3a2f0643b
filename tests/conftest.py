from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from cybershield.db.base import Base
from cybershield.db.session import make_engine, make_session_factory
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.state_store import StateStore


class FixedClock:
    """Callable clock pinned to a moment; tests move it forward explicitly."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def store(session_factory: sessionmaker[Session]) -> StateStore:
    return StateStore(session_factory)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def catalog() -> ModuleCatalog:
    return ModuleCatalog()
