from cybershield.models.app_state import AppState

__all__ = ["AppState"]
