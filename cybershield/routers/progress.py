"""Progress and preference routes."""
from typing import Annotated

from fastapi import APIRouter, Depends

from cybershield.deps import Runtime, get_runtime
from cybershield.schemas.progress import (
    Badge,
    ModuleResultSchema,
    OnboardingSchema,
    ProgressOutSchema,
    ThemeSchema,
    UserSettings,
    XPSchema,
)
from cybershield.services.scoring import level_title

router = APIRouter(prefix="/api", tags=["progress"])


def _progress_out(runtime: Runtime) -> ProgressOutSchema:
    progress = runtime.progression.progress
    return ProgressOutSchema(
        **progress.model_dump(),
        level_title=level_title(progress.level),
        badge_count=len(progress.badges),
    )


@router.get("/progress", response_model=ProgressOutSchema)
def get_progress(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return _progress_out(runtime)


@router.post("/progress/xp", response_model=ProgressOutSchema)
def add_xp(body: XPSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.progression.add_xp(body.amount)
    return _progress_out(runtime)


@router.post("/progress/modules/{module_id}", response_model=list[Badge])
def record_module_result(
    module_id: str,
    body: ModuleResultSchema,
    runtime: Annotated[Runtime, Depends(get_runtime)],
):
    """Record an attempt; returns badges it unlocked."""
    return runtime.progression.update_module_progress(module_id, body.score, body.passed)


@router.post("/progress/streak", response_model=list[Badge])
def update_streak(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.progression.update_streak()


@router.post("/progress/reset", response_model=ProgressOutSchema)
def reset_progress(runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.progression.reset_progress()
    return _progress_out(runtime)


# ---------- preferences ----------

@router.get("/settings", response_model=UserSettings)
def read_settings(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.preferences.get_settings()


@router.patch("/settings", response_model=UserSettings)
def update_settings(body: dict, runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.preferences.update_settings(**body)


@router.post("/settings/reset", response_model=UserSettings)
def reset_settings(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.preferences.reset_settings()


@router.get("/settings/onboarding", response_model=OnboardingSchema)
def get_onboarding(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return OnboardingSchema(seen=runtime.preferences.has_seen_onboarding())


@router.post("/settings/onboarding", response_model=OnboardingSchema)
def mark_onboarding(runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.preferences.mark_onboarding_seen()
    return OnboardingSchema(seen=True)


@router.delete("/settings/onboarding", response_model=OnboardingSchema)
def clear_onboarding(runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.preferences.clear_onboarding()
    return OnboardingSchema(seen=False)


@router.get("/settings/theme", response_model=ThemeSchema)
def get_theme(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return ThemeSchema(theme=runtime.preferences.get_theme())


@router.put("/settings/theme", response_model=ThemeSchema)
def set_theme(body: ThemeSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    return ThemeSchema(theme=runtime.preferences.set_theme(body.theme))
