from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import analytics
from analytics import ScenarioAttempt
from config import GameConfig
from game_state import GameState
from models import Client, DayAnalytics, DaySummary, FinalSummary, Scenario, TradeResult
from scenario_manager import RandomSource, ScenarioManager, SystemRandomSource

logger = logging.getLogger(__name__)


class SessionNotFoundError(ValueError):
    pass


@dataclass
class GameSession:
    session_id: str
    mode: str
    state: GameState
    scenarios: ScenarioManager
    attempt: Optional[ScenarioAttempt] = None
    day_attempts: List[ScenarioAttempt] = field(default_factory=list)
    game_attempts: List[ScenarioAttempt] = field(default_factory=list)
    day_history: List[DayAnalytics] = field(default_factory=list)


@dataclass
class DecisionResult:
    trade: TradeResult
    attempt: ScenarioAttempt
    reaction: str
    day_complete: bool
    game_complete: bool


@dataclass
class DayReport:
    summary: DaySummary
    analytics: DayAnalytics


@dataclass
class FinalReport:
    summary: FinalSummary
    overall_score: int
    overall_grade: str
    days: List[DayAnalytics]


class OptionsGameEngine:
    """
    Drives "Options, Please" sessions.
    - Each session owns its own GameState, ScenarioManager and attempt records.
    - A scenario is spawned, investigated (clues / client file), then decided.
    - Day-end analytics are folded into the session history when the next day starts.
    """
    def __init__(
        self,
        catalog: Optional[Dict[str, Any]],
        config: Optional[GameConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.config = config or GameConfig()
        self.clock = clock
        self._sessions: Dict[str, GameSession] = {}

    # ---------- Session lifecycle ----------
    def start_session(self, mode: Optional[str] = None, seed: Optional[int] = None,
                      rng: Optional[RandomSource] = None) -> GameSession:
        mode = mode or self.config.selection_mode
        if mode not in ("random", "sequential"):
            raise ValueError(f"Unknown selection mode: {mode}")
        sid = str(uuid.uuid4())
        state = GameState(
            total_days=self.config.total_days,
            total_clients=self.config.clients_per_day,
            starting_reputation=self.config.starting_reputation,
        )
        manager = ScenarioManager(self.catalog, rng=rng or SystemRandomSource(seed))
        needed = self.config.total_days * self.config.clients_per_day
        if mode == "sequential" and len(manager.scenarios) < needed:
            raise ValueError(
                f"Sequential mode needs {needed} scenarios "
                f"({self.config.total_days} days x {self.config.clients_per_day} clients), "
                f"catalog has {len(manager.scenarios)}"
            )
        session = GameSession(session_id=sid, mode=mode, state=state, scenarios=manager)
        self._sessions[sid] = session
        logger.info("Session %s started (mode=%s)", sid, mode)
        return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def restart_session(self, session_id: str) -> GameSession:
        s = self._require_session(session_id)
        s.state.initialize()
        s.scenarios.reset_used_scenarios()
        s.attempt = None
        s.day_attempts, s.game_attempts, s.day_history = [], [], []
        return s

    # ---------- Scenario handling ----------
    def next_scenario(self, session_id: str) -> Scenario:
        s = self._require_session(session_id)
        st = s.state
        if st.game_completed or st.is_game_complete():
            raise ValueError("Game is over.")
        if st.is_day_complete():
            raise ValueError("Day is complete; start the next day first.")
        if s.attempt is not None:
            raise ValueError("A scenario is already in progress.")

        if s.mode == "sequential":
            scenario = s.scenarios.pick_by_index(st.scenario_count)
        else:
            scenario = s.scenarios.pick_random_unused()
        st.scenario_count += 1
        st.current_scenario = scenario
        st.current_client = s.scenarios.scenario_client(scenario)
        s.attempt = analytics.begin(scenario, clock=self.clock, time_limit=self.config.time_bonus_seconds)
        return scenario

    def view_clue(self, session_id: str, category: str) -> Optional[Any]:
        s = self._require_session(session_id)
        attempt = self._require_attempt(s)
        clue = s.scenarios.resolve_clue(s.state.current_scenario, category)
        if clue is not None:
            attempt.track_clue_access(category)
        return clue

    def open_client_file(self, session_id: str) -> Optional[Client]:
        s = self._require_session(session_id)
        attempt = self._require_attempt(s)
        attempt.track_client_file_access()
        return s.state.current_client

    def submit_decision(self, session_id: str, decision: str) -> DecisionResult:
        s = self._require_session(session_id)
        attempt = self._require_attempt(s)
        scenario = s.state.current_scenario
        client = s.state.current_client

        outcome = s.scenarios.resolve_outcome(scenario, decision)
        attempt.finalize(decision, outcome)
        trade = TradeResult(
            decision=decision,
            success=outcome.success,
            reputation_change=outcome.reputation_change,
            message=outcome.message,
            client_name=client.name if client else None,
        )
        s.state.complete_client(trade)
        s.day_attempts.append(attempt)
        s.game_attempts.append(attempt)
        s.attempt = None

        return DecisionResult(
            trade=trade,
            attempt=attempt,
            reaction=analytics.client_reaction(client, decision),
            day_complete=s.state.is_day_complete(),
            game_complete=s.state.is_day_complete() and s.state.current_day >= s.state.total_days,
        )

    def discard_scenario(self, session_id: str) -> None:
        s = self._require_session(session_id)
        if s.attempt is None:
            return
        s.attempt.discard()
        s.attempt = None
        if s.mode == "sequential":
            # Serve the abandoned scenario again next time.
            s.state.scenario_count -= 1
        s.state.current_scenario = None
        s.state.current_client = None

    # ---------- Day / game reports ----------
    def day_report(self, session_id: str) -> DayReport:
        s = self._require_session(session_id)
        return DayReport(
            summary=s.state.day_summary(),
            analytics=analytics.aggregate_day(s.day_attempts, day=s.state.current_day),
        )

    def start_next_day(self, session_id: str) -> GameSession:
        s = self._require_session(session_id)
        if s.state.game_completed:
            raise ValueError("Game is over.")
        if not s.state.is_day_complete():
            raise ValueError("Day is not complete yet.")
        s.day_history.append(analytics.aggregate_day(s.day_attempts, day=s.state.current_day))
        s.day_attempts = []
        s.state.start_new_day()
        logger.info("Session %s: day %d started (reputation %d)",
                    session_id, s.state.current_day, s.state.reputation)
        return s

    def final_report(self, session_id: str) -> FinalReport:
        s = self._require_session(session_id)
        days = list(s.day_history)
        if s.day_attempts:
            days.append(analytics.aggregate_day(s.day_attempts, day=s.state.current_day))
        overall = analytics.aggregate_day(s.game_attempts)
        return FinalReport(
            summary=s.state.final_summary(),
            overall_score=overall.overall_score,
            overall_grade=overall.overall_grade,
            days=days,
        )

    # ---------- helpers ----------
    def _require_session(self, session_id: str) -> GameSession:
        s = self._sessions.get(session_id)
        if not s:
            raise SessionNotFoundError("Unknown session_id")
        return s

    @staticmethod
    def _require_attempt(s: GameSession) -> ScenarioAttempt:
        if s.attempt is None:
            raise ValueError("No scenario in progress.")
        return s.attempt
