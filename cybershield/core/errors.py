"""Exception hierarchy shared by the engines and the HTTP layer.

Every error carries the HTTP status the API answers with, so routers can let
them propagate to the single handler registered in ``cybershield.main``.
"""


class CyberShieldError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


# ---------- contract violations ----------

class InvalidModuleError(CyberShieldError):
    status_code = 404

    def __init__(self, module_id: str) -> None:
        super().__init__(f"Unknown training module: {module_id!r}")
        self.module_id = module_id


class ModuleLockedError(CyberShieldError):
    status_code = 409

    def __init__(self, module_id: str) -> None:
        super().__init__(f"Training module is locked: {module_id!r}")
        self.module_id = module_id


class InactiveSessionError(CyberShieldError):
    status_code = 409

    def __init__(self, operation: str) -> None:
        super().__init__(f"No active session for {operation}()")
        self.operation = operation


class DuplicateBadgeError(CyberShieldError):
    status_code = 409

    def __init__(self, badge_id: str) -> None:
        super().__init__(f"Badge already earned: {badge_id!r}")
        self.badge_id = badge_id


class InvalidArgumentError(CyberShieldError):
    status_code = 422


class ScenarioRequestInFlightError(CyberShieldError):
    status_code = 409

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Scenario request already in flight for session {session_id}")
        self.session_id = session_id


# ---------- external service failures ----------

class ScenarioSourceError(CyberShieldError):
    status_code = 502


class ScenarioParseError(ScenarioSourceError):
    """The AI service answered, but not with a usable scenario."""


class CoachingError(CyberShieldError):
    status_code = 502
