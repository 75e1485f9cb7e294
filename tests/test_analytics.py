import pytest

import analytics
import messages
from analytics import AttemptStatus, aggregate_day, client_reaction, grade_for, optimal_decision
from models import Client, Outcome, Scenario
from scenario_manager import ScenarioManager


def _scenario(outcomes, clues=None):
    return Scenario.from_dict({
        "id": "x",
        "title": "X",
        "clues": clues or {},
        "outcomes": {k: {"reputationChange": v, "success": v > 0, "message": k} for k, v in outcomes.items()},
    })


@pytest.mark.parametrize("score,grade", [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"),
                                         (70, "C"), (69, "D"), (60, "D"), (59, "F"), (0, "F")])
def test_grade_for(score, grade):
    assert grade_for(score) == grade


def test_optimal_decision_rules():
    assert optimal_decision(_scenario({"call": 10, "put": -10, "hold": 0})) == "call"
    assert optimal_decision(_scenario({"call": -20, "put": 15, "hold": -5})) == "put"
    # Ties: call is checked before put and keeps the lead.
    assert optimal_decision(_scenario({"put": 10, "call": 10, "hold": 0})) == "call"
    # Nothing beats hold's own change.
    assert optimal_decision(_scenario({"call": -5, "put": 0, "hold": 0})) == "hold"
    assert optimal_decision(_scenario({"call": -5})) == "hold"
    # Scenario-specific decisions are considered after call and put.
    assert optimal_decision(_scenario({"call": 5, "straddle": 20, "hold": 0})) == "straddle"
    assert optimal_decision(_scenario({"call": 20, "straddle": 20, "hold": 0})) == "call"


def test_available_clue_count(catalog):
    mgr = ScenarioManager(catalog)
    assert analytics.count_available_clues(mgr.find_scenario("s1")) == 3
    assert analytics.count_available_clues(mgr.find_scenario("s2")) == 2
    assert analytics.count_available_clues(mgr.find_scenario("s3")) == 0


def test_end_to_end_optimal_call_scores_85(simple_scenario, clock):
    attempt = analytics.begin(simple_scenario, clock=clock)
    clock.advance(30)
    score = attempt.finalize("call", simple_scenario.outcomes["call"])
    assert score == 85
    assert attempt.grade == "B"
    assert attempt.passed
    assert attempt.breakdown.investigation == 25
    assert attempt.breakdown.decision == 50
    assert attempt.breakdown.client_review == 0
    assert attempt.breakdown.time_bonus == 10


def test_end_to_end_hold_scores_35(simple_scenario, clock):
    attempt = analytics.begin(simple_scenario, clock=clock)
    clock.advance(30)
    assert attempt.finalize("hold", simple_scenario.outcomes["hold"]) == 35
    assert attempt.grade == "F"
    assert not attempt.passed
    assert messages.FEEDBACK_NOT_OPTIMAL in attempt.feedback


def test_full_marks_with_thorough_investigation(catalog, clock):
    sc = ScenarioManager(catalog).find_scenario("s1")
    attempt = analytics.begin(sc, clock=clock)
    assert attempt.status == AttemptStatus.CREATED
    for cat in ("wordOfMouth", "newspaper", "charts", "newspaper"):
        attempt.track_clue_access(cat)
    attempt.track_client_file_access()
    attempt.track_client_file_access()
    assert attempt.status == AttemptStatus.IN_PROGRESS
    clock.advance(10)
    assert attempt.finalize("call", sc.outcomes["call"]) == 100
    assert attempt.grade == "A"
    assert attempt.feedback[0] == messages.FEEDBACK_THOROUGH


def test_partial_investigation_rounds_half_up(catalog, clock):
    sc = ScenarioManager(catalog).find_scenario("s2")
    attempt = analytics.begin(sc, clock=clock)
    attempt.track_clue_access("newspaper")
    attempt.finalize("put", sc.outcomes["put"])
    assert attempt.investigation_ratio == 0.5
    assert attempt.breakdown.investigation == 13
    assert messages.FEEDBACK_PARTIAL in attempt.feedback


def test_graphs_counts_as_charts(catalog, clock):
    sc = ScenarioManager(catalog).find_scenario("s2")
    attempt = analytics.begin(sc, clock=clock)
    attempt.track_clue_access("graphs")
    attempt.track_clue_access("newspaper")
    assert attempt.investigation_ratio == 1.0


def test_limited_investigation(catalog, clock):
    sc = ScenarioManager(catalog).find_scenario("s1")
    attempt = analytics.begin(sc, clock=clock)
    attempt.track_clue_access("newspaper")
    attempt.finalize("put", sc.outcomes["put"])
    assert attempt.breakdown.investigation == 8
    assert messages.FEEDBACK_LIMITED in attempt.feedback


def test_time_bonus_requires_quick_decision(simple_scenario, clock):
    attempt = analytics.begin(simple_scenario, clock=clock)
    clock.advance(120)
    assert attempt.finalize("call", simple_scenario.outcomes["call"]) == 75
    assert attempt.breakdown.time_bonus == 0
    assert attempt.elapsed == 120


def test_second_finalize_rejected(simple_scenario, clock):
    attempt = analytics.begin(simple_scenario, clock=clock)
    attempt.finalize("call", simple_scenario.outcomes["call"])
    with pytest.raises(ValueError):
        attempt.finalize("hold", simple_scenario.outcomes["hold"])
    assert attempt.score == 85
    assert attempt.decision == "call"
    with pytest.raises(ValueError):
        attempt.track_clue_access("newspaper")


def test_discard(simple_scenario, clock):
    attempt = analytics.begin(simple_scenario, clock=clock)
    attempt.discard()
    assert attempt.status == AttemptStatus.DISCARDED
    with pytest.raises(ValueError):
        attempt.finalize("call", simple_scenario.outcomes["call"])

    done = analytics.begin(simple_scenario, clock=clock)
    done.finalize("call", simple_scenario.outcomes["call"])
    with pytest.raises(ValueError):
        done.discard()


def test_aggregate_day(catalog, simple_scenario, clock):
    mgr = ScenarioManager(catalog)
    s1 = mgr.find_scenario("s1")

    perfect = analytics.begin(s1, clock=clock)
    for cat in ("wordOfMouth", "newspaper", "charts"):
        perfect.track_clue_access(cat)
    perfect.track_client_file_access()
    perfect.finalize("call", s1.outcomes["call"])  # 100

    good = analytics.begin(simple_scenario, clock=clock)
    good.finalize("call", simple_scenario.outcomes["call"])  # 85

    poor = analytics.begin(simple_scenario, clock=clock)
    poor.finalize("hold", simple_scenario.outcomes["hold"])  # 35

    abandoned = analytics.begin(simple_scenario, clock=clock)
    abandoned.discard()

    day = aggregate_day([perfect, good, poor, abandoned], day=2)
    assert day.day == 2
    assert day.attempts == 3
    assert day.overall_score == 73  # 220 / 3
    assert day.overall_grade == "C"
    assert day.investigation_rate == pytest.approx(1.0)
    assert day.client_files_rate == pytest.approx(1 / 3)
    assert day.optimal_decision_rate == pytest.approx(2 / 3)
    assert day.perfect_scores == 1
    assert day.insights == [
        messages.INSIGHT_RULES[0][3],
        messages.INSIGHT_RULES[3][3],
        messages.INSIGHT_RULES[6][3],
    ]


def test_aggregate_empty_day():
    day = aggregate_day([])
    assert day.attempts == 0
    assert day.overall_score == 0
    assert day.overall_grade == "F"
    assert day.insights == []


def test_insights_at_most_four():
    day = aggregate_day([])
    day.investigation_rate = 0.1
    day.client_files_rate = 0.1
    day.optimal_decision_rate = 0.1
    day.perfect_scores = 2
    assert len(analytics.generate_insights(day)) == 4


def test_client_reaction():
    low = Client(id="a", name="A", risk_profile="low")
    high = Client(id="b", name="B", risk_profile="high")
    assert client_reaction(low, "call") == messages.REACTION_WORRIED
    assert client_reaction(high, "call") == messages.REACTION_GRATEFUL
    assert client_reaction(low, "put") == messages.REACTION_GRATEFUL
    assert client_reaction(None, "hold") == messages.REACTION_CAUTIOUS
    assert client_reaction(high, "straddle") == messages.REACTION_UNSURE


def _rule_text(index):
    return messages.INSIGHT_RULES[index][3]


@pytest.mark.parametrize("metric,value,expected", [
    ("investigation_rate", 0.8, _rule_text(0)),
    ("investigation_rate", 0.79, None),
    ("investigation_rate", 0.5, None),
    ("investigation_rate", 0.49, _rule_text(1)),
    ("client_files_rate", 0.8, _rule_text(2)),
    ("client_files_rate", 0.79, None),
    ("client_files_rate", 0.5, None),
    ("client_files_rate", 0.49, _rule_text(3)),
    ("optimal_decision_rate", 0.8, _rule_text(4)),
    ("optimal_decision_rate", 0.79, None),
    ("optimal_decision_rate", 0.5, None),
    ("optimal_decision_rate", 0.49, _rule_text(5)),
    ("perfect_scores", 1, _rule_text(6)),
    ("perfect_scores", 0, None),
])
def test_insight_thresholds(metric, value, expected):
    day = aggregate_day([])
    day.investigation_rate = 0.6
    day.client_files_rate = 0.6
    day.optimal_decision_rate = 0.6
    day.perfect_scores = 0
    setattr(day, metric, value)
    assert analytics.generate_insights(day) == ([expected] if expected else [])
