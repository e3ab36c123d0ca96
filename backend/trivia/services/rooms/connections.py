import threading
from typing import Dict, NamedTuple, Optional


class Membership(NamedTuple):
    room_code: str
    player_id: str


class ConnectionDirectory:
    """Maps transport connection ids to the room and player they represent.

    A connection belongs to at most one room at a time. The player id is
    currently the connection id itself; keeping the mapping explicit leaves
    room for reconnect support.
    """

    def __init__(self):
        self._by_connection: Dict[str, Membership] = {}
        self._lock = threading.Lock()

    def player_id_for(self, connection_id: str) -> str:
        with self._lock:
            membership = self._by_connection.get(connection_id)
        return membership.player_id if membership else connection_id

    def lookup(self, connection_id: str) -> Optional[Membership]:
        with self._lock:
            return self._by_connection.get(connection_id)

    def bind(self, connection_id: str, room_code: str, player_id: str) -> Membership:
        membership = Membership(room_code, player_id)
        with self._lock:
            self._by_connection[connection_id] = membership
        return membership

    def release(self, connection_id: str) -> Optional[Membership]:
        with self._lock:
            return self._by_connection.pop(connection_id, None)
