from cybershield.services.catalog import ModuleCatalog
from cybershield.services.progression import ProgressionEngine
from cybershield.services.scoring import level_title, score_grade
from cybershield.services.session_engine import SessionEngine

__all__ = ["ModuleCatalog", "ProgressionEngine", "SessionEngine", "level_title", "score_grade"]
