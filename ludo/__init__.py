"""
Ludo - Multiplayer Ludo Engine

A deterministic, server-authoritative engine for turn-based Ludo.
The package provides:
- Board geometry and immutable game state
- Move generation, capture and blocking rules
- Action validation and turn control
- Bot policies for computer-controlled players
- A thin room/session layer and REST API on top of the engine
"""

__version__ = "0.1.0"
