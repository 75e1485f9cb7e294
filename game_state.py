from __future__ import annotations
import logging
from typing import List, Optional

from models import DaySummary, FinalSummary, Scenario, Client, TradeResult

logger = logging.getLogger(__name__)

MIN_REPUTATION = 0
MAX_REPUTATION = 100


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


class GameState:
    """
    Session-wide progress: reputation, day and client counters, trades.
    Pure data mutation; the session engine decides when to call what.
    """
    def __init__(self, total_days: int = 5, total_clients: int = 3, starting_reputation: int = 50):
        self.total_days = total_days
        self.total_clients = total_clients
        self.starting_reputation = clamp(starting_reputation, MIN_REPUTATION, MAX_REPUTATION)
        self.initialize()

    def initialize(self) -> None:
        self.reputation = self.starting_reputation
        self.current_day = 1
        self.clients_completed = 0
        self.daily_trades: List[TradeResult] = []
        self.all_trades: List[TradeResult] = []
        self.game_completed = False
        self.scenario_count = 0
        self.current_scenario: Optional[Scenario] = None
        self.current_client: Optional[Client] = None

    # ---------- Mutation ----------
    def complete_client(self, trade: TradeResult) -> None:
        self.daily_trades.append(trade)
        self.all_trades.append(trade)
        self.clients_completed += 1
        before = self.reputation
        self.reputation = clamp(before + trade.reputation_change, MIN_REPUTATION, MAX_REPUTATION)
        self.current_scenario = None
        self.current_client = None
        logger.debug("Trade %s for %s: reputation %d -> %d",
                     trade.decision, trade.client_name, before, self.reputation)

    def start_new_day(self) -> None:
        self.current_day += 1
        self.clients_completed = 0
        self.daily_trades = []
        self.current_scenario = None
        self.current_client = None
        if self.is_game_complete():
            self.game_completed = True

    # ---------- Queries ----------
    def is_day_complete(self) -> bool:
        return self.clients_completed >= self.total_clients

    def is_game_complete(self) -> bool:
        return self.current_day > self.total_days

    def day_summary(self) -> DaySummary:
        return DaySummary(
            day=self.current_day,
            trades=list(self.daily_trades),
            reputation_change=sum(t.reputation_change for t in self.daily_trades),
            final_reputation=self.reputation,
        )

    def final_summary(self) -> FinalSummary:
        # Counts every trade of the game, not only the last day's.
        return FinalSummary(
            total_days=self.total_days,
            final_reputation=self.reputation,
            total_trades=len(self.all_trades),
            successful_trades=sum(1 for t in self.all_trades if t.success),
        )
