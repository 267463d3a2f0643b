"""SQLAlchemy declarative base and model imports for Alembic."""
from cybershield.db.session import Base

# Import all models so Alembic can see them
from cybershield.models.app_state import AppState  # noqa: F401

__all__ = ["Base", "AppState"]
