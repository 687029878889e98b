"""
Bot Personalities - Configurable play styles.

Personalities adjust the move weights a bot scores with. BALANCED
carries the standard weights; the others lean towards hunting
opponents or racing tokens home.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .evaluator import MoveWeights


@dataclass
class Personality:
    """
    A bot personality that defines play style.
    """
    name: str
    description: str = ""
    weights: MoveWeights = field(default_factory=MoveWeights)


BALANCED = Personality(
    name="Balanced",
    description="Finishes first, captures when it can, releases on a 6",
    weights=MoveWeights(),
)

AGGRESSIVE = Personality(
    name="Aggressive",
    description="Prioritizes captures over everything but finishing",
    weights=MoveWeights(
        release=40.0,
        capture=180.0,
        safe_zone=5.0,
    ),
)

RUNNER = Personality(
    name="Runner",
    description="Pushes the lead token home and plays safe",
    weights=MoveWeights(
        release=30.0,
        capture=60.0,
        home_column_base=60.0,
        track_progress=1.0,
        safe_zone=25.0,
    ),
)

PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "runner": RUNNER,
}


def get_personality(name: str | None) -> Personality:
    """Look up a personality by name, defaulting to balanced."""
    if not name:
        return BALANCED
    try:
        return PERSONALITIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown personality: {name}. Choose from {sorted(PERSONALITIES)}"
        ) from None
