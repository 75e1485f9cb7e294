from __future__ import annotations
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Set

from models import (
    Client, Outcome, Scenario, UNKNOWN_OUTCOME, canonical_category,
)

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def pick(self, n: int) -> int:
        """Return an index in [0, n) chosen uniformly."""
        ...


class SystemRandomSource:
    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def pick(self, n: int) -> int:
        if n <= 0:
            raise ValueError("Cannot pick from an empty range")
        return self._rng.randrange(n)


def load_catalog_file(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


class ScenarioManager:
    """
    Owns the scenario/client catalog and answers selection and lookup queries.
    Lookups return None on a miss; outcome lookups fall back to UNKNOWN_OUTCOME.
    """
    def __init__(self, data: Optional[Dict[str, Any]] = None, rng: Optional[RandomSource] = None):
        self.rng: RandomSource = rng or SystemRandomSource()
        self.scenarios: List[Scenario] = []
        self.clients: List[Client] = []
        self.used_scenarios: Set[str] = set()
        self.load_catalog(data)

    # ---------- Catalog ----------
    def load_catalog(self, data: Optional[Dict[str, Any]]) -> None:
        if not data:
            self.scenarios, self.clients = [], []
            logger.warning("No scenario data supplied; catalog is empty")
            return
        self.scenarios = [Scenario.from_dict(s) for s in data.get("scenarios") or []]
        self.clients = [Client.from_dict(c) for c in data.get("clients") or []]
        self.used_scenarios.clear()
        logger.info("Loaded %d scenarios and %d clients", len(self.scenarios), len(self.clients))

    def all_scenarios(self) -> List[Scenario]:
        return list(self.scenarios)

    def reset_used_scenarios(self) -> None:
        self.used_scenarios.clear()

    # ---------- Selection ----------
    def pick_random_unused(self) -> Scenario:
        if not self.scenarios:
            raise ValueError("Scenario catalog is empty")
        available = [s for s in self.scenarios if s.id not in self.used_scenarios]
        if not available:
            # Full cycle done; repeats allowed from here on.
            self.used_scenarios.clear()
            logger.info("All %d scenarios used; starting a new cycle", len(self.scenarios))
            return self.scenarios[self.rng.pick(len(self.scenarios))]
        chosen = available[self.rng.pick(len(available))]
        self.used_scenarios.add(chosen.id)
        return chosen

    def pick_by_index(self, index: int) -> Scenario:
        if index < 0 or index >= len(self.scenarios):
            raise IndexError(f"Scenario index {index} out of range (catalog has {len(self.scenarios)})")
        return self.scenarios[index]

    # ---------- Lookups ----------
    def find_scenario(self, scenario_id: str) -> Optional[Scenario]:
        return next((s for s in self.scenarios if s.id == scenario_id), None)

    def find_client(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    def scenario_client(self, scenario: Optional[Scenario]) -> Optional[Client]:
        if not scenario or not scenario.client:
            return None
        return self.find_client(scenario.client)

    def resolve_clue(self, scenario: Optional[Scenario], category: str) -> Optional[Any]:
        if not scenario:
            return None
        clue = scenario.clues.get(canonical_category(category))
        if not clue:
            return None
        if isinstance(clue, list):
            return clue[self.rng.pick(len(clue))]
        return clue

    def resolve_outcome(self, scenario: Optional[Scenario], decision: str) -> Outcome:
        if not scenario or decision not in scenario.outcomes:
            logger.warning("No outcome for decision %r in scenario %s",
                           decision, scenario.id if scenario else None)
            return UNKNOWN_OUTCOME
        return scenario.outcomes[decision]
