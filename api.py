from __future__ import annotations
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from config import GameConfig, configure_logging
from engine import OptionsGameEngine, SessionNotFoundError, GameSession, DayReport
from models import Client, DayAnalytics, Scenario, TradeResult
from scenario_manager import load_catalog_file

# ---------- Pydantic IO models ----------
class StartSessionIn(BaseModel):
    mode: Optional[str] = Field(default=None, examples=["random", "sequential"])
    seed: Optional[int] = None

class SessionStateOut(BaseModel):
    session_id: str
    mode: str
    reputation: int
    current_day: int
    total_days: int
    clients_completed: int
    total_clients: int
    scenario_count: int
    day_complete: bool
    game_completed: bool
    current_scenario_id: Optional[str] = None

class ClientOut(BaseModel):
    id: str
    name: str
    avatar: Optional[str] = None
    risk_profile: Optional[str] = None
    investment_amount: Optional[float] = None
    description: str = ""

class ScenarioOut(BaseModel):
    id: str
    title: str
    description: str
    opening_statement: str
    clue_categories: List[str]
    decisions: List[str]
    client: Optional[ClientOut] = None

class ClueOut(BaseModel):
    category: str
    clue: Any

class DecisionIn(BaseModel):
    decision: str = Field(..., examples=["call"])

class TradeOut(BaseModel):
    decision: str
    success: bool
    reputation_change: int
    message: str
    client_name: Optional[str] = None

class ScoreOut(BaseModel):
    scenario_id: str
    score: int
    grade: str
    passed: bool
    optimal_decision: str
    feedback: List[str]
    investigation: int
    decision: int
    client_review: int
    time_bonus: int

class DecisionOut(BaseModel):
    trade: TradeOut
    analytics: ScoreOut
    reaction: str
    reputation: int
    day_complete: bool
    game_complete: bool

class DayAnalyticsOut(BaseModel):
    day: int
    attempts: int
    overall_score: int
    overall_grade: str
    investigation_rate: float
    client_files_rate: float
    optimal_decision_rate: float
    perfect_scores: int
    insights: List[str]

class DayReportOut(BaseModel):
    day: int
    trades: List[TradeOut]
    reputation_change: int
    final_reputation: int
    analytics: DayAnalyticsOut

class FinalReportOut(BaseModel):
    total_days: int
    final_reputation: int
    total_trades: int
    successful_trades: int
    overall_score: int
    overall_grade: str
    days: List[DayAnalyticsOut]

# ---------- App ----------
app = FastAPI(title="Options, Please API", version="1.0.0")

_config = GameConfig.from_env()
configure_logging(_config.log_level)
_engine = OptionsGameEngine(catalog=load_catalog_file(_config.catalog_path), config=_config)

def _to_state_out(s: GameSession) -> SessionStateOut:
    st = s.state
    return SessionStateOut(
        session_id=s.session_id,
        mode=s.mode,
        reputation=st.reputation,
        current_day=st.current_day,
        total_days=st.total_days,
        clients_completed=st.clients_completed,
        total_clients=st.total_clients,
        scenario_count=st.scenario_count,
        day_complete=st.is_day_complete(),
        game_completed=st.game_completed,
        current_scenario_id=st.current_scenario.id if st.current_scenario else None,
    )

def _to_client_out(c: Optional[Client]) -> Optional[ClientOut]:
    if c is None:
        return None
    return ClientOut(
        id=c.id, name=c.name, avatar=c.avatar, risk_profile=c.risk_profile,
        investment_amount=c.investment_amount, description=c.description,
    )

def _to_scenario_out(sc: Scenario, client: Optional[Client]) -> ScenarioOut:
    return ScenarioOut(
        id=sc.id,
        title=sc.title,
        description=sc.description,
        opening_statement=sc.opening_statement,
        clue_categories=[k for k, v in sc.clues.items() if v],
        decisions=list(sc.outcomes),
        client=_to_client_out(client),
    )

def _to_trade_out(t: TradeResult) -> TradeOut:
    return TradeOut(
        decision=t.decision, success=t.success, reputation_change=t.reputation_change,
        message=t.message, client_name=t.client_name,
    )

def _to_day_out(d: DayAnalytics) -> DayAnalyticsOut:
    return DayAnalyticsOut(
        day=d.day, attempts=d.attempts, overall_score=d.overall_score, overall_grade=d.overall_grade,
        investigation_rate=d.investigation_rate, client_files_rate=d.client_files_rate,
        optimal_decision_rate=d.optimal_decision_rate, perfect_scores=d.perfect_scores,
        insights=list(d.insights),
    )

def _to_day_report_out(r: DayReport) -> DayReportOut:
    return DayReportOut(
        day=r.summary.day,
        trades=[_to_trade_out(t) for t in r.summary.trades],
        reputation_change=r.summary.reputation_change,
        final_reputation=r.summary.final_reputation,
        analytics=_to_day_out(r.analytics),
    )

@app.post("/v1/options/sessions", response_model=SessionStateOut)
def start_session(payload: StartSessionIn):
    try:
        s = _engine.start_session(mode=payload.mode, seed=payload.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_state_out(s)

@app.get("/v1/options/sessions/{session_id}", response_model=SessionStateOut)
def get_state(session_id: str):
    s = _engine.get_session(session_id)
    if not s:
        raise HTTPException(404, "Session not found")
    return _to_state_out(s)

@app.post("/v1/options/sessions/{session_id}/scenario", response_model=ScenarioOut)
def next_scenario(session_id: str):
    try:
        sc = _engine.next_scenario(session_id)
        return _to_scenario_out(sc, _engine.get_session(session_id).state.current_client)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.delete("/v1/options/sessions/{session_id}/scenario", status_code=204)
def discard_scenario(session_id: str):
    try:
        _engine.discard_scenario(session_id)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.post("/v1/options/sessions/{session_id}/clues/{category}", response_model=ClueOut)
def view_clue(session_id: str, category: str):
    try:
        clue = _engine.view_clue(session_id, category)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if clue is None:
        raise HTTPException(404, f"No {category} clue for this scenario")
    return ClueOut(category=category, clue=clue)

@app.post("/v1/options/sessions/{session_id}/client-file", response_model=ClientOut)
def open_client_file(session_id: str):
    try:
        client = _engine.open_client_file(session_id)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if client is None:
        raise HTTPException(404, "No client file for this scenario")
    return _to_client_out(client)

@app.post("/v1/options/sessions/{session_id}/decision", response_model=DecisionOut)
def submit_decision(session_id: str, payload: DecisionIn):
    try:
        res = _engine.submit_decision(session_id, payload.decision)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    a = res.attempt
    return DecisionOut(
        trade=_to_trade_out(res.trade),
        analytics=ScoreOut(
            scenario_id=a.scenario_id, score=a.score, grade=a.grade, passed=a.passed,
            optimal_decision=a.optimal_decision, feedback=list(a.feedback),
            investigation=a.breakdown.investigation, decision=a.breakdown.decision,
            client_review=a.breakdown.client_review, time_bonus=a.breakdown.time_bonus,
        ),
        reaction=res.reaction,
        reputation=_engine.get_session(session_id).state.reputation,
        day_complete=res.day_complete,
        game_complete=res.game_complete,
    )

@app.get("/v1/options/sessions/{session_id}/day", response_model=DayReportOut)
def day_report(session_id: str):
    try:
        return _to_day_report_out(_engine.day_report(session_id))
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")

@app.post("/v1/options/sessions/{session_id}/next-day", response_model=SessionStateOut)
def start_next_day(session_id: str):
    try:
        return _to_state_out(_engine.start_next_day(session_id))
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/v1/options/sessions/{session_id}/final", response_model=FinalReportOut)
def final_report(session_id: str):
    try:
        r = _engine.final_report(session_id)
    except SessionNotFoundError:
        raise HTTPException(404, "Session not found")
    return FinalReportOut(
        total_days=r.summary.total_days,
        final_reputation=r.summary.final_reputation,
        total_trades=r.summary.total_trades,
        successful_trades=r.summary.successful_trades,
        overall_score=r.overall_score,
        overall_grade=r.overall_grade,
        days=[_to_day_out(d) for d in r.days],
    )
