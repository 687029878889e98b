"""
Bots module - Computer player implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- MoveEvaluator: Scores candidate moves
- LudoBot: Greedy Ludo bot
- Personality: Configurable play styles
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import MoveEvaluator, MoveWeights, MoveScore
from .personality import Personality, PERSONALITIES, get_personality
from .ludo_bot import LudoBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "MoveEvaluator",
    "MoveWeights",
    "MoveScore",
    "Personality",
    "PERSONALITIES",
    "get_personality",
    "LudoBot",
]
