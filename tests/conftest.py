import pytest

from models import Scenario
from helpers import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return {
        "clients": [
            {"id": "c1", "name": "Rose", "risk_profile": "low", "investment_amount": 1000},
            {"id": "c2", "name": "Chad", "riskProfile": "high", "investmentAmount": 5000},
        ],
        "scenarios": [
            {
                "id": "s1",
                "title": "Earnings",
                "openingStatement": "Should I buy?",
                "client": "c1",
                "clues": {
                    "wordOfMouth": ["tip a", "tip b"],
                    "newspaper": ["headline"],
                    "charts": {"type": "line", "title": "t", "data": [1, 2], "labels": ["a", "b"]},
                },
                "outcomes": {
                    "call": {"success": True, "reputationChange": 10, "message": "Up"},
                    "put": {"success": False, "reputationChange": -10, "message": "Down"},
                    "hold": {"success": True, "reputationChange": 0, "message": "Flat"},
                },
            },
            {
                "id": "s2",
                "name": "Recall",
                "client": "c2",
                "clues": {"newspaper": ["probe"], "graphs": {"type": "bar", "data": [3]}},
                "outcomes": {
                    "call": {"success": False, "reputationChange": -20, "message": "Ouch"},
                    "put": {"success": True, "reputationChange": 15, "message": "Nice"},
                    "hold": {"success": False, "reputationChange": -5, "message": "Meh"},
                },
            },
            {
                "id": "s3",
                "title": "Quiet",
                "client": "missing",
                "clues": {},
                "outcomes": {
                    "call": {"success": True, "reputationChange": 10, "message": "Good"},
                    "hold": {"success": True, "reputationChange": 0, "message": "Meh"},
                },
            },
        ],
    }


@pytest.fixture
def simple_scenario():
    return Scenario.from_dict({
        "id": "e2e",
        "title": "End to end",
        "outcomes": {
            "call": {"reputationChange": 10, "success": True, "message": "Good"},
            "hold": {"reputationChange": 0, "success": True, "message": "Meh"},
        },
    })
