"""Training module catalog.

The catalog is static data except for each module's status, best score and
completed-scenario count, which follow the trainee's progress.
"""
import logging

from cybershield.core.errors import InvalidModuleError, ModuleLockedError
from cybershield.schemas.progress import UserProgress
from cybershield.schemas.training import Difficulty, ModuleStatus, ModuleType, TrainingModule

logger = logging.getLogger(__name__)

DEFAULT_MODULES = [
    TrainingModule(
        id="phishing-101",
        type=ModuleType.PHISHING,
        title="Phishing Detection Lab",
        description="Learn to identify and report phishing emails, texts, and suspicious links.",
        difficulty=Difficulty.BEGINNER,
        status=ModuleStatus.AVAILABLE,
        estimated_minutes=15,
        total_scenarios=10,
        required_score=70,
        icon="🎣",
        skills=["Email Analysis", "URL Inspection", "Sender Verification"],
    ),
    TrainingModule(
        id="social-engineering-basics",
        type=ModuleType.SOCIAL_ENGINEERING,
        title="Social Engineering Defense",
        description="Practice recognizing manipulation tactics and protecting sensitive information.",
        difficulty=Difficulty.BEGINNER,
        status=ModuleStatus.AVAILABLE,
        estimated_minutes=20,
        total_scenarios=8,
        required_score=70,
        icon="🎭",
        skills=["Threat Recognition", "Information Protection", "Verification Protocols"],
    ),
    TrainingModule(
        id="incident-response-101",
        type=ModuleType.INCIDENT_RESPONSE,
        title="Incident Response Simulator",
        description="Handle simulated security incidents and learn proper response procedures.",
        difficulty=Difficulty.INTERMEDIATE,
        status=ModuleStatus.LOCKED,
        estimated_minutes=30,
        total_scenarios=6,
        required_score=75,
        prerequisites=["phishing-101"],
        icon="🚨",
        skills=["Incident Triage", "Escalation", "Documentation", "Containment"],
    ),
    TrainingModule(
        id="password-security",
        type=ModuleType.PASSWORD_SECURITY,
        title="Password & Authentication",
        description="Master password best practices and multi-factor authentication.",
        difficulty=Difficulty.BEGINNER,
        status=ModuleStatus.AVAILABLE,
        estimated_minutes=12,
        total_scenarios=8,
        required_score=80,
        icon="🔐",
        skills=["Password Creation", "MFA Setup", "Credential Management"],
    ),
]


class ModuleCatalog:
    def __init__(self, modules: list[TrainingModule] | None = None) -> None:
        self._source = DEFAULT_MODULES if modules is None else modules
        self.reset()

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def list_modules(self) -> list[TrainingModule]:
        return list(self._modules.values())

    def get(self, module_id: str) -> TrainingModule | None:
        return self._modules.get(module_id)

    def require(self, module_id: str) -> TrainingModule:
        module = self._modules.get(module_id)
        if module is None:
            raise InvalidModuleError(module_id)
        return module

    def require_unlocked(self, module_id: str) -> TrainingModule:
        module = self.require(module_id)
        if module.status == ModuleStatus.LOCKED:
            raise ModuleLockedError(module_id)
        return module

    def mark_in_progress(self, module_id: str) -> None:
        module = self.require_unlocked(module_id)
        if module.status != ModuleStatus.COMPLETED:
            module.status = ModuleStatus.IN_PROGRESS

    def record_result(self, module_id: str, score: int, passed: bool) -> list[str]:
        """Apply one finished attempt; returns ids of modules it unlocked.

        A locked module keeps its status until its prerequisites are completed.
        """
        module = self.require(module_id)
        module.best_score = max(score, module.best_score or 0)
        if module.status == ModuleStatus.LOCKED and not self._prerequisites_met(module):
            logger.warning(f"[Catalog] result for locked module {module_id} leaves it locked")
            return []
        if passed:
            module.status = ModuleStatus.COMPLETED
            module.completed_scenarios = module.total_scenarios
        elif module.status != ModuleStatus.COMPLETED:
            module.status = ModuleStatus.IN_PROGRESS
        return self.refresh_locks()

    def _completed_ids(self) -> set[str]:
        return {m.id for m in self._modules.values() if m.status == ModuleStatus.COMPLETED}

    def _prerequisites_met(self, module: TrainingModule, completed: set[str] | None = None) -> bool:
        if completed is None:
            completed = self._completed_ids()
        return all(p in completed for p in module.prerequisites)

    def refresh_locks(self) -> list[str]:
        """Unlock every locked module whose prerequisites are all completed."""
        completed = self._completed_ids()
        unlocked = []
        for module in self._modules.values():
            if module.status != ModuleStatus.LOCKED:
                continue
            if self._prerequisites_met(module, completed):
                module.status = ModuleStatus.AVAILABLE
                unlocked.append(module.id)
        if unlocked:
            logger.info(f"[Catalog] unlocked {unlocked}")
        return unlocked

    def sync_from_progress(self, progress: UserProgress) -> None:
        """Re-apply persisted per-module progress after a restart."""
        completed = self._completed_ids() | {
            module_id
            for module_id, record in progress.module_progress.items()
            if record.status == ModuleStatus.COMPLETED
        }
        for module_id, record in progress.module_progress.items():
            module = self._modules.get(module_id)
            if module is None:
                continue
            module.best_score = max(record.best_score, module.best_score or 0)
            if module.status == ModuleStatus.LOCKED and not self._prerequisites_met(module, completed):
                continue
            module.status = record.status
            if record.status == ModuleStatus.COMPLETED:
                module.completed_scenarios = module.total_scenarios
        self.refresh_locks()

    def reset(self) -> None:
        self._modules = {m.id: m.model_copy(deep=True) for m in self._source}
