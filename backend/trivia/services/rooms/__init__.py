"""Room domain services: registry, game lifecycle, scoring and events.

This package holds the framework-agnostic game logic. Socket handlers and
HTTP routes import it and turn the returned events into broadcasts, keeping
transport concerns separated from room state.
"""

from .connections import ConnectionDirectory, Membership
from .events import Event, HandlerResult
from .registry import RoomRegistry, normalize_code
from .session import GameSession, reveal_if_complete


class TriviaRuntime:
    """Bundle of the process-lifetime room services owned by one app."""

    def __init__(self, registry: RoomRegistry, session: GameSession, connections: ConnectionDirectory):
        self.registry = registry
        self.session = session
        self.connections = connections


__all__ = [
    'ConnectionDirectory',
    'Event',
    'GameSession',
    'HandlerResult',
    'Membership',
    'RoomRegistry',
    'TriviaRuntime',
    'normalize_code',
    'reveal_if_complete',
]
