"""Process-wide engine wiring used as FastAPI dependencies.

All engines share one catalog and one StateStore; the API serves a single
trainee, so there is exactly one session slot and one progress record.
"""
from dataclasses import dataclass

import httpx
from sqlalchemy.orm import Session, sessionmaker

from cybershield.core.clock import Clock, utcnow
from cybershield.core.config import Settings, get_settings
from cybershield.db.session import SessionLocal
from cybershield.services.ai_client import AIClient
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.coaching import CoachingService
from cybershield.services.preferences import PreferencesService
from cybershield.services.progression import ProgressionEngine
from cybershield.services.scenario_source import ScenarioSource
from cybershield.services.session_engine import SessionEngine
from cybershield.services.state_store import StateStore
from cybershield.services.training import TrainingRunner


@dataclass
class Runtime:
    settings: Settings
    store: StateStore
    catalog: ModuleCatalog
    sessions: SessionEngine
    progression: ProgressionEngine
    preferences: PreferencesService
    scenarios: ScenarioSource
    coaching: CoachingService
    training: TrainingRunner


def build_runtime(
    settings: Settings,
    session_factory: sessionmaker[Session],
    transport: httpx.AsyncBaseTransport | None = None,
    now: Clock = utcnow,
) -> Runtime:
    store = StateStore(session_factory)
    catalog = ModuleCatalog()
    sessions = SessionEngine(catalog, now=now)
    progression = ProgressionEngine(store, catalog, now=now)
    client = AIClient(settings, transport=transport)
    scenarios = ScenarioSource(client, max_tokens=settings.scenario_max_tokens)
    training = TrainingRunner(
        sessions,
        progression,
        catalog,
        source=scenarios,
        scenarios_per_session=settings.scenarios_per_session,
        correct_answer_points=settings.correct_answer_points,
        xp_multiplier=settings.xp_multiplier,
    )
    return Runtime(
        settings=settings,
        store=store,
        catalog=catalog,
        sessions=sessions,
        progression=progression,
        preferences=PreferencesService(store),
        scenarios=scenarios,
        coaching=CoachingService(client),
        training=training,
    )


_runtime: Runtime | None = None


def get_runtime() -> Runtime:
    global _runtime
    if _runtime is None:
        _runtime = build_runtime(get_settings(), SessionLocal)
    return _runtime
