"""Training runner: drives one session through judge-the-scenario rounds.

Flow per session: ``start`` -> (``load_scenario`` -> ``answer`` -> ``advance``)*
-> ``finish`` (called by the last ``advance``). Finishing feeds the result
into the progression engine: module result, XP and daily streak.
"""
import logging
from dataclasses import dataclass, field

from cybershield.core.errors import (
    InactiveSessionError,
    InvalidArgumentError,
    ScenarioRequestInFlightError,
    ScenarioSourceError,
)
from cybershield.schemas.progress import TrainingResultSchema
from cybershield.schemas.scenario import (
    AnswerResultSchema,
    LoadedScenarioSchema,
    PhishingScenario,
    Scenario,
    URLContent,
)
from cybershield.schemas.training import MessageMetadata, MessageRole, SessionFeedback, SessionState
from cybershield.services.catalog import ModuleCatalog
from cybershield.services.progression import ProgressionEngine
from cybershield.services.scenario_source import ScenarioSource, fallback_scenario
from cybershield.services.scoring import build_feedback, final_score, score_grade, session_xp
from cybershield.services.session_engine import SessionEngine
from cybershield.services.url_analysis import analyze_suspicious_url

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    """Per-session answer bookkeeping."""

    session_id: str
    correct: int = 0
    answered: int = 0
    seen_ids: list[str] = field(default_factory=list)
    identified_red_flags: list[str] = field(default_factory=list)
    missed_red_flags: list[str] = field(default_factory=list)


class TrainingRunner:
    def __init__(
        self,
        sessions: SessionEngine,
        progression: ProgressionEngine,
        catalog: ModuleCatalog,
        source: ScenarioSource | None = None,
        scenarios_per_session: int = 5,
        correct_answer_points: int = 20,
        xp_multiplier: float = 1.5,
    ) -> None:
        self.sessions = sessions
        self.progression = progression
        self.catalog = catalog
        self.source = source
        self.scenarios_per_session = scenarios_per_session
        self.correct_answer_points = correct_answer_points
        self.xp_multiplier = xp_multiplier

        self.current_scenario: Scenario | None = None
        # (session_id, scenario_index) the current scenario was loaded for
        self._scenario_slot: tuple[str, int] | None = None
        self._answered = False
        self._tally: _Tally | None = None
        self._in_flight: str | None = None

    @property
    def loading(self) -> bool:
        return self._in_flight is not None and self._in_flight == self.sessions.state.session_id

    def _active_state(self, operation: str) -> SessionState:
        state = self.sessions.state
        if not state.is_active:
            raise InactiveSessionError(operation)
        return state

    def _tally_for(self, state: SessionState) -> _Tally:
        if self._tally is None or self._tally.session_id != state.session_id:
            self._tally = _Tally(session_id=state.session_id)
        return self._tally

    def start(self, module_id: str) -> SessionState:
        state = self.sessions.start_session(module_id)
        self._tally = _Tally(session_id=state.session_id)
        self.current_scenario = None
        self._scenario_slot = None
        self._answered = False
        return state

    async def load_scenario(self) -> LoadedScenarioSchema | None:
        """Fetch the next scenario for the active session.

        Returns None when the session changed or ended while the request was
        outstanding; the late result is dropped.
        """
        state = self._active_state("load_scenario")
        session_id = state.session_id
        if self._in_flight == session_id:
            raise ScenarioRequestInFlightError(session_id)
        if self._scenario_slot == (session_id, state.scenario_index):
            raise InvalidArgumentError(f"Scenario {state.scenario_index} is already loaded; advance first")

        module = self.catalog.require(state.module_id)
        exclude_ids = list(self._tally_for(state).seen_ids)
        fallback = False
        self._in_flight = session_id
        try:
            try:
                if self.source is None:
                    raise ScenarioSourceError("No scenario source configured")
                scenario = await self.source.generate_scenario(module.type, module.difficulty, exclude_ids)
            except ScenarioSourceError as e:
                logger.warning(f"[Training] using fallback scenario for {module.id}: {e}")
                scenario = fallback_scenario(module.type)
                fallback = True
        finally:
            if self._in_flight == session_id:
                self._in_flight = None

        current = self.sessions.state
        if not current.is_active or current.session_id != session_id:
            logger.info(f"[Training] dropping scenario for stale session {session_id}")
            return None

        self.current_scenario = scenario
        self._scenario_slot = (session_id, current.scenario_index)
        self._answered = False
        self._tally_for(current).seen_ids.append(scenario.id)
        return LoadedScenarioSchema(scenario=scenario, scenario_index=current.scenario_index, fallback=fallback)

    def answer(self, is_threat: bool) -> AnswerResultSchema:
        """Judge the trainee's verdict on the current scenario."""
        state = self._active_state("answer")
        scenario = self.current_scenario
        if scenario is None or self._answered or self._scenario_slot != (state.session_id, state.scenario_index):
            raise InvalidArgumentError("No unanswered scenario to judge")

        tally = self._tally_for(state)
        expected = scenario.expected_answer
        correct = is_threat == expected
        score_impact = self.correct_answer_points if correct else 0

        self.sessions.add_message(
            MessageRole.USER,
            "This is a threat." if is_threat else "This looks legitimate.",
        )
        if correct:
            self.sessions.update_score(score_impact)
            tally.correct += 1
            tally.identified_red_flags.extend(scenario.red_flags)
        else:
            tally.missed_red_flags.extend(scenario.red_flags)
        tally.answered += 1
        self._answered = True

        self.sessions.add_message(
            MessageRole.ASSISTANT,
            scenario.explanation,
            MessageMetadata(
                is_attack=expected,
                red_flag_triggered=scenario.red_flags[0] if scenario.red_flags else None,
                score_impact=score_impact,
            ),
        )

        url_warnings = []
        if isinstance(scenario, PhishingScenario) and isinstance(scenario.content, URLContent):
            url_warnings = analyze_suspicious_url(scenario.content.url)

        return AnswerResultSchema(
            correct=correct,
            expected=expected,
            score=self.sessions.state.score,
            red_flags=scenario.red_flags,
            explanation=scenario.explanation,
            url_warnings=url_warnings,
        )

    def advance(self) -> TrainingResultSchema | None:
        """Move to the next scenario, or finish after the last one."""
        state = self._active_state("advance")
        if state.scenario_index + 1 >= self.scenarios_per_session:
            return self.finish()
        self.sessions.next_scenario()
        self.current_scenario = None
        self._scenario_slot = None
        self._answered = False
        return None

    def finish(self) -> TrainingResultSchema:
        state = self._active_state("finish")
        module = self.catalog.require(state.module_id)
        tally = self._tally_for(state)

        correct = min(tally.correct, self.scenarios_per_session)
        score = final_score(correct, self.scenarios_per_session)
        passed = score >= module.required_score
        feedback: SessionFeedback = build_feedback(
            correct,
            self.scenarios_per_session,
            passed,
            identified_red_flags=tally.identified_red_flags,
            missed_red_flags=tally.missed_red_flags,
        )
        self.sessions.end_session(feedback)
        self.current_scenario = None
        self._scenario_slot = None

        new_badges = self.progression.update_module_progress(module.id, score, passed)
        xp = session_xp(score, self.xp_multiplier)
        progress = self.progression.add_xp(xp)
        new_badges += self.progression.update_streak()

        logger.info(f"[Training] finished {module.id} score={score} passed={passed} xp={xp}")
        return TrainingResultSchema(
            feedback=feedback,
            grade=score_grade(score),
            passed=passed,
            xp_earned=xp,
            level=progress.level,
            new_badges=new_badges,
        )
