import logging
import random
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from trivia.errors import GameAlreadyStarted, InvalidRoomCode, RoomCodesExhausted, RoomNotFound
from trivia.models import PHASE_FINISHED, PHASE_LOBBY, Player, Room
from trivia.questions import QuestionBank
from . import events
from .events import HandlerResult

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
DEFAULT_CODE_LENGTH = 5
DEFAULT_NICKNAME = 'Affe'


def normalize_code(room_code, length: int = DEFAULT_CODE_LENGTH) -> str:
    """Uppercase and strip a user-typed room code, validating its length."""
    code = (room_code or '').strip().upper() if isinstance(room_code, str) else ''
    if not code or len(code) != length:
        raise InvalidRoomCode()
    return code


class RoomRegistry:
    """Owns every live room, keyed by room code.

    The table itself is guarded by ``_lock``; per-room state is guarded by each
    room's own lock (see :meth:`locked`).
    """

    def __init__(self, bank: QuestionBank, code_length: int = DEFAULT_CODE_LENGTH,
                 alphabet: str = DEFAULT_ALPHABET, max_code_attempts: int = 50,
                 default_nickname: str = DEFAULT_NICKNAME, max_nickname_length: int = 24,
                 code_factory: Optional[Callable[[], str]] = None):
        self.bank = bank
        self.code_length = code_length
        self.alphabet = alphabet
        self.max_code_attempts = max_code_attempts
        self.default_nickname = default_nickname
        self.max_nickname_length = max_nickname_length
        self.code_factory = code_factory or self._random_code
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    # -------------------- Lookup -------------------- #

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_code):
        with self._lock:
            return room_code in self._rooms

    def normalize(self, room_code) -> str:
        return normalize_code(room_code, self.code_length)

    def get(self, room_code) -> Room:
        code = self.normalize(room_code)
        with self._lock:
            room = self._rooms.get(code)
        if room is None:
            raise RoomNotFound()
        return room

    @contextmanager
    def locked(self, room_code) -> Iterator[Room]:
        """Yield the room with its lock held, or raise ``RoomNotFound``."""
        room = self.get(room_code)
        with room.lock:
            if room.closed:
                raise RoomNotFound()
            yield room

    def get_public_state(self, room_code):
        with self.locked(room_code) as room:
            return room.public_state()

    # -------------------- Membership -------------------- #

    def clean_nickname(self, nickname) -> str:
        if not isinstance(nickname, str):
            return self.default_nickname
        nickname = nickname.strip()[:self.max_nickname_length].strip()
        return nickname or self.default_nickname

    def _random_code(self) -> str:
        return ''.join(random.choices(self.alphabet, k=self.code_length))

    def create_room(self, nickname, player_id: str) -> HandlerResult:
        player = Player(player_id, self.clean_nickname(nickname))
        with self._lock:
            for _ in range(self.max_code_attempts):
                code = self.code_factory()
                if code not in self._rooms:
                    break
                logger.debug(f"[room-code-collision] code={code}")
            else:
                logger.warning(f"[room-code-exhausted] attempts={self.max_code_attempts}")
                raise RoomCodesExhausted()
            room = Room(code, player, self.bank.questions)
            self._rooms[code] = room
        logger.info(f"[room-create] room={code} host={player_id}")
        return HandlerResult(
            reply={'roomCode': code, 'isHost': True, 'playerId': player_id},
            events=[events.room_update(room)],
        )

    def join_room(self, room_code, nickname, player_id: str) -> HandlerResult:
        with self.locked(room_code) as room:
            if room.phase == PHASE_FINISHED:
                raise GameAlreadyStarted(GameAlreadyStarted.finished_message)
            if room.phase != PHASE_LOBBY:
                raise GameAlreadyStarted()
            player = room.players.get(player_id)
            if player is None:
                room.players[player_id] = Player(player_id, self.clean_nickname(nickname))
                logger.info(f"[room-join] room={room.code} player={player_id} players={len(room.players)}")
            else:
                # Re-join from the same connection only refreshes the nickname
                player.nickname = self.clean_nickname(nickname)
            return HandlerResult(
                reply={'roomCode': room.code, 'isHost': room.host_id == player_id, 'playerId': player_id},
                events=[events.room_update(room)],
            )

    def remove_player(self, room_code, player_id: str) -> HandlerResult:
        """Drop ``player_id`` from the room, handing over host or deleting the room."""
        with self.locked(room_code) as room:
            if room.players.pop(player_id, None) is None:
                return HandlerResult()
            if not room.players:
                self._delete(room)
                return HandlerResult()
            if room.host_id == player_id:
                room.host_id = next(iter(room.players))
                logger.info(f"[host-handover] room={room.code} from={player_id} to={room.host_id}")
            logger.info(f"[room-leave] room={room.code} player={player_id} players={len(room.players)}")
            return HandlerResult(events=[events.room_update(room)])

    def _delete(self, room: Room) -> None:
        room.closed = True
        with self._lock:
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
        logger.info(f"[room-delete] room={room.code}")
