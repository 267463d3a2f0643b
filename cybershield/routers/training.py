"""Training routes: module catalog and the active session."""
from typing import Annotated

from fastapi import APIRouter, Depends

from cybershield.deps import Runtime, get_runtime
from cybershield.schemas.progress import AdvanceOutSchema, TrainingResultSchema
from cybershield.schemas.scenario import AnswerResultSchema, LoadedScenarioSchema, SessionOutSchema
from cybershield.schemas.training import (
    AddMessageSchema,
    AnswerSchema,
    ChatMessage,
    ScoreDeltaSchema,
    SessionFeedback,
    StartSessionSchema,
    TrainingModule,
)

router = APIRouter(prefix="/api", tags=["training"])


def _session_out(runtime: Runtime) -> SessionOutSchema:
    state = runtime.sessions.state
    return SessionOutSchema(
        **state.model_dump(),
        loading=runtime.training.loading,
        current_scenario=runtime.training.current_scenario,
    )


# ---------- catalog ----------

@router.get("/modules", response_model=list[TrainingModule])
def list_modules(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.catalog.list_modules()


@router.get("/modules/{module_id}", response_model=TrainingModule)
def get_module(module_id: str, runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.catalog.require(module_id)


# ---------- session primitives ----------

@router.get("/session", response_model=SessionOutSchema)
def get_session(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return _session_out(runtime)


@router.post("/session/start", response_model=SessionOutSchema)
def start_session(body: StartSessionSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.training.start(body.module_id)
    return _session_out(runtime)


@router.post("/session/messages", response_model=ChatMessage)
def add_message(body: AddMessageSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.sessions.add_message(body.role, body.content, body.metadata)


@router.post("/session/score", response_model=SessionOutSchema)
def update_score(body: ScoreDeltaSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.sessions.update_score(body.delta)
    return _session_out(runtime)


@router.post("/session/next", response_model=SessionOutSchema)
def next_scenario(runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.sessions.next_scenario()
    return _session_out(runtime)


@router.post("/session/end", response_model=SessionOutSchema)
def end_session(
    runtime: Annotated[Runtime, Depends(get_runtime)],
    body: SessionFeedback | None = None,
):
    runtime.sessions.end_session(body)
    return _session_out(runtime)


@router.post("/session/reset", response_model=SessionOutSchema)
def reset_session(runtime: Annotated[Runtime, Depends(get_runtime)]):
    runtime.sessions.reset_session()
    return _session_out(runtime)


# ---------- guided training flow ----------

@router.post("/session/scenario", response_model=LoadedScenarioSchema | None)
async def load_scenario(runtime: Annotated[Runtime, Depends(get_runtime)]):
    """Load the next scenario; null when the session changed while loading."""
    return await runtime.training.load_scenario()


@router.post("/session/answer", response_model=AnswerResultSchema)
def answer_scenario(body: AnswerSchema, runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.training.answer(body.is_threat)


@router.post("/session/advance", response_model=AdvanceOutSchema)
def advance(runtime: Annotated[Runtime, Depends(get_runtime)]):
    result = runtime.training.advance()
    return AdvanceOutSchema(
        finished=result is not None,
        scenario_index=runtime.sessions.state.scenario_index,
        result=result,
    )


@router.post("/session/finish", response_model=TrainingResultSchema)
def finish(runtime: Annotated[Runtime, Depends(get_runtime)]):
    return runtime.training.finish()
