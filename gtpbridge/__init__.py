"""
GTP Bridge - HTTP control surface for a Go Text Protocol engine.

Runs one engine subprocess (KataGo by default) at a time and lets a
remote caller:
- Start a game (board size, komi, model and config)
- Play moves and request engine moves
- End the game, killing the engine
"""

__version__ = "0.1.0"
