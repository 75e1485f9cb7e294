from __future__ import annotations
import logging
import math
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional, Set

from models import (
    CLUE_CATEGORIES, DECISION_CALL, DECISION_HOLD, DECISION_PUT,
    Client, DayAnalytics, Outcome, Scenario, ScoreBreakdown, UNKNOWN_OUTCOME,
    canonical_category,
)
import messages

logger = logging.getLogger(__name__)

INVESTIGATION_POINTS = 25
DECISION_POINTS = 50
CLIENT_REVIEW_POINTS = 15
TIME_BONUS_POINTS = 10
DEFAULT_TIME_LIMIT_SECONDS = 120.0
PASSING_SCORE = 60
PERFECT_SCORE = 90


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def grade_for(score: int) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def count_available_clues(scenario: Scenario) -> int:
    return sum(1 for cat in CLUE_CATEGORIES if scenario.clues.get(cat))


def optimal_decision(scenario: Scenario) -> str:
    """
    Decision with the strictly greatest reputation change, measured against
    hold's own change. Checked in order call, put, then any other authored
    keys; an equal value never displaces an earlier one.
    """
    baseline = scenario.outcomes.get(DECISION_HOLD, UNKNOWN_OUTCOME).reputation_change
    order = [DECISION_CALL, DECISION_PUT] + [
        k for k in scenario.outcomes if k not in (DECISION_CALL, DECISION_PUT, DECISION_HOLD)
    ]
    best, best_change = DECISION_HOLD, baseline
    for decision in order:
        outcome = scenario.outcomes.get(decision)
        if outcome is not None and outcome.reputation_change > best_change:
            best, best_change = decision, outcome.reputation_change
    return best


class AttemptStatus(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    FINALIZED = "finalized"
    DISCARDED = "discarded"


class ScenarioAttempt:
    """
    Scored record of one scenario playthrough.
    created -> in_progress (clue / client-file access) -> finalized.
    Finalization is terminal; an unfinished attempt may be discarded instead.
    """
    def __init__(
        self,
        scenario: Scenario,
        clock: Callable[[], float] = time.monotonic,
        time_limit: float = DEFAULT_TIME_LIMIT_SECONDS,
    ):
        self.scenario_id = scenario.id
        self.scenario_name = scenario.title
        self.client_id = scenario.client
        self._clock = clock
        self.time_limit = time_limit
        self.start_time = clock()
        self.end_time: Optional[float] = None
        self.available_clues = count_available_clues(scenario)
        self.accessed_clues: Set[str] = set()
        self.client_files_accessed = False
        self.optimal_decision = optimal_decision(scenario)
        self.decision: Optional[str] = None
        self.outcome: Optional[Outcome] = None
        self.score: Optional[int] = None
        self.grade: Optional[str] = None
        self.breakdown = ScoreBreakdown()
        self.feedback: List[str] = []
        self.status = AttemptStatus.CREATED

    # ---------- Tracking ----------
    def track_clue_access(self, category: str) -> None:
        self._require_open()
        self.accessed_clues.add(canonical_category(category))
        self.status = AttemptStatus.IN_PROGRESS

    def track_client_file_access(self) -> None:
        self._require_open()
        self.client_files_accessed = True
        self.status = AttemptStatus.IN_PROGRESS

    # ---------- Derived ----------
    @property
    def investigation_ratio(self) -> float:
        if self.available_clues == 0:
            return 1.0
        accessed = len(self.accessed_clues & set(CLUE_CATEGORIES))
        return min(1.0, accessed / self.available_clues)

    @property
    def elapsed(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    @property
    def chose_optimal(self) -> bool:
        return self.decision is not None and self.decision == self.optimal_decision

    @property
    def passed(self) -> bool:
        return self.score is not None and self.score >= PASSING_SCORE

    @property
    def is_finalized(self) -> bool:
        return self.status == AttemptStatus.FINALIZED

    # ---------- Lifecycle ----------
    def finalize(self, decision: str, outcome: Outcome) -> int:
        if self.status == AttemptStatus.FINALIZED:
            raise ValueError(f"Attempt for scenario {self.scenario_id} already finalized.")
        self._require_open()
        self.end_time = self._clock()
        self.decision = decision
        self.outcome = outcome

        ratio = self.investigation_ratio
        self.breakdown.investigation = round_half_up(INVESTIGATION_POINTS * ratio)
        if ratio >= 0.8:
            self.feedback.append(messages.FEEDBACK_THOROUGH)
        elif ratio >= 0.5:
            self.feedback.append(messages.FEEDBACK_PARTIAL)
        else:
            self.feedback.append(messages.FEEDBACK_LIMITED)

        if self.chose_optimal:
            self.breakdown.decision = DECISION_POINTS
            self.feedback.append(messages.FEEDBACK_OPTIMAL)
        else:
            self.feedback.append(messages.FEEDBACK_NOT_OPTIMAL)

        if self.client_files_accessed:
            self.breakdown.client_review = CLIENT_REVIEW_POINTS
            self.feedback.append(messages.FEEDBACK_CLIENT_REVIEWED)
        else:
            self.feedback.append(messages.FEEDBACK_CLIENT_SKIPPED)

        if self.elapsed < self.time_limit:
            self.breakdown.time_bonus = TIME_BONUS_POINTS
            self.feedback.append(messages.FEEDBACK_QUICK)
        else:
            self.feedback.append(messages.FEEDBACK_SLOW)

        b = self.breakdown
        total = b.investigation + b.decision + b.client_review + b.time_bonus
        self.score = max(0, min(100, total))
        self.grade = grade_for(self.score)
        self.status = AttemptStatus.FINALIZED
        logger.info("Scenario %s scored %d (%s): decision=%s optimal=%s",
                    self.scenario_id, self.score, self.grade, decision, self.optimal_decision)
        return self.score

    def discard(self) -> None:
        if self.status == AttemptStatus.FINALIZED:
            raise ValueError("Cannot discard a finalized attempt.")
        self.status = AttemptStatus.DISCARDED
        logger.debug("Discarded attempt for scenario %s", self.scenario_id)

    def _require_open(self) -> None:
        if self.status in (AttemptStatus.FINALIZED, AttemptStatus.DISCARDED):
            raise ValueError(f"Attempt for scenario {self.scenario_id} is {self.status.value}.")


def begin(scenario: Scenario, clock: Callable[[], float] = time.monotonic,
          time_limit: float = DEFAULT_TIME_LIMIT_SECONDS) -> ScenarioAttempt:
    return ScenarioAttempt(scenario, clock=clock, time_limit=time_limit)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def generate_insights(day: DayAnalytics) -> List[str]:
    insights: List[str] = []
    fired: Set[str] = set()
    for metric, threshold, op, text in messages.INSIGHT_RULES:
        if metric in fired:
            continue
        value = getattr(day, metric)
        hit = value >= threshold if op == "ge" else value < threshold
        if hit:
            insights.append(text)
            fired.add(metric)
    return insights


def aggregate_day(attempts: Iterable[ScenarioAttempt], day: int = 0) -> DayAnalytics:
    done = [a for a in attempts if a.is_finalized]
    if not done:
        return DayAnalytics(
            day=day, attempts=0, overall_score=0, overall_grade=grade_for(0),
            investigation_rate=0.0, client_files_rate=0.0, optimal_decision_rate=0.0,
            perfect_scores=0, insights=[],
        )
    overall = round_half_up(_mean([a.score for a in done]))
    result = DayAnalytics(
        day=day,
        attempts=len(done),
        overall_score=overall,
        overall_grade=grade_for(overall),
        investigation_rate=_mean([a.investigation_ratio for a in done]),
        client_files_rate=_mean([1.0 if a.client_files_accessed else 0.0 for a in done]),
        optimal_decision_rate=_mean([1.0 if a.chose_optimal else 0.0 for a in done]),
        perfect_scores=sum(1 for a in done if a.score >= PERFECT_SCORE),
    )
    result.insights = generate_insights(result)
    return result


def client_reaction(client: Optional[Client], decision: str) -> str:
    if decision == DECISION_CALL and client is not None and (client.risk_profile or "").lower() == "low":
        return messages.REACTION_WORRIED
    if decision in (DECISION_CALL, DECISION_PUT):
        return messages.REACTION_GRATEFUL
    if decision == DECISION_HOLD:
        return messages.REACTION_CAUTIOUS
    return messages.REACTION_UNSURE
