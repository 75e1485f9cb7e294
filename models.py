from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DECISION_CALL = "call"
DECISION_PUT = "put"
DECISION_HOLD = "hold"

# Clue categories counted towards investigation; "graphs" is an alias of "charts".
CLUE_CATEGORIES = ("wordOfMouth", "newspaper", "charts")
CLUE_ALIASES = {"graphs": "charts"}


def canonical_category(category: str) -> str:
    return CLUE_ALIASES.get(category, category)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else [value]


def merge_clues(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fold aliased categories together; both "charts" and "graphs" end up as one list."""
    clues: Dict[str, Any] = {}
    for key, value in raw.items():
        cat = canonical_category(key)
        if clues.get(cat) and value:
            clues[cat] = _as_list(clues[cat]) + _as_list(value)
        elif value or cat not in clues:
            clues[cat] = value
    return clues


@dataclass(frozen=True)
class Outcome:
    success: bool
    reputation_change: int
    message: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Outcome":
        return cls(
            success=bool(data.get("success", False)),
            reputation_change=int(data.get("reputationChange", data.get("reputation_change", 0)) or 0),
            message=str(data.get("message", "")),
        )


UNKNOWN_OUTCOME = Outcome(success=False, reputation_change=0, message="Unknown outcome")


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    avatar: Optional[str] = None
    risk_profile: Optional[str] = None
    investment_amount: Optional[float] = None
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        amount = data.get("investment_amount", data.get("investmentAmount"))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            avatar=data.get("avatar"),
            risk_profile=data.get("risk_profile", data.get("riskProfile", data.get("riskTolerance"))),
            investment_amount=float(amount) if amount is not None else None,
            description=str(data.get("description", "")),
        )


@dataclass(frozen=True)
class Scenario:
    """
    Authored client case. `clues` values are kept as authored: lists of strings
    for wordOfMouth/newspaper, a chart descriptor (or list of them) for charts.
    `outcomes` preserves authored key order, which matters for tie-breaks.
    """
    id: str
    title: str
    description: str = ""
    opening_statement: str = ""
    clues: Dict[str, Any] = field(default_factory=dict)
    outcomes: Dict[str, Outcome] = field(default_factory=dict)
    client: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        clues = merge_clues(data.get("clues") or {})
        outcomes = {str(k): Outcome.from_dict(v) for k, v in (data.get("outcomes") or {}).items()}
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", data.get("name", data["id"]))),
            description=str(data.get("description", "")),
            opening_statement=str(data.get("openingStatement", data.get("opening_statement", ""))),
            clues=clues,
            outcomes=outcomes,
            client=data.get("client"),
        )


@dataclass(frozen=True)
class TradeResult:
    decision: str
    success: bool
    reputation_change: int
    message: str
    client_name: Optional[str] = None


@dataclass
class DaySummary:
    day: int
    trades: List[TradeResult]
    reputation_change: int
    final_reputation: int


@dataclass
class FinalSummary:
    total_days: int
    final_reputation: int
    total_trades: int
    successful_trades: int


@dataclass
class ScoreBreakdown:
    investigation: int = 0
    decision: int = 0
    client_review: int = 0
    time_bonus: int = 0


@dataclass
class DayAnalytics:
    day: int
    attempts: int
    overall_score: int
    overall_grade: str
    investigation_rate: float
    client_files_rate: float
    optimal_decision_rate: float
    perfect_scores: int
    insights: List[str] = field(default_factory=list)
