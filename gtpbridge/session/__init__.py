"""
Session Module - The single engine session.

A session represents one game against the engine:
- Created by start_game (engine launched, board configured)
- Used by play / genmove
- Destroyed by end_game or when the engine dies

Sessions are EPHEMERAL: nothing survives a restart of the service.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
