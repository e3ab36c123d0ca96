"""Per-room game lifecycle: start, answer collection, reveal, advance, finish.

``GameSession`` methods are synchronous and return a ``HandlerResult``; they
never talk to the transport. Illegal requests (wrong requester, wrong phase,
repeated answers) are dropped with an empty result.
"""

import logging
from typing import List

from trivia.errors import (
    DuplicateAnswer,
    IgnoredAction,
    MalformedRequest,
    TriviaError,
    Unauthorized,
    UnknownPlayer,
    WrongPhase,
)
from trivia.models import (
    PHASE_FINISHED,
    PHASE_QUESTION_OPEN,
    PHASE_QUESTION_REVEALED,
    IN_GAME_PHASES,
    Room,
)
from . import events
from .events import Event, HandlerResult
from .registry import RoomRegistry
from .scoring import DEFAULT_CORRECT_POINTS, build_leaderboard, score_answer

logger = logging.getLogger(__name__)


def reveal_if_complete(room: Room) -> List[Event]:
    """Close the open question once every present player has answered.

    Must be called with ``room.lock`` held. Returns the reveal event at most
    once per question, since the phase moves on before returning.
    """
    if room.phase != PHASE_QUESTION_OPEN or not room.all_answered():
        return []
    room.phase = PHASE_QUESTION_REVEALED
    logger.info(
        f"[reveal] room={room.code} question={room.current_question_index + 1} answers={len(room.current_answers)}"
    )
    return [events.answer_reveal(room)]


def _require_host(room: Room, requester_id: str) -> None:
    if requester_id != room.host_id:
        raise Unauthorized(f'{requester_id} is not host of {room.code}')


class GameSession:
    def __init__(self, registry: RoomRegistry, points: int = DEFAULT_CORRECT_POINTS):
        self.registry = registry
        self.points = points

    def _ignore(self, action: str, room_code, exc: Exception) -> HandlerResult:
        logger.debug(f"[ignored] action={action} room={room_code} reason={type(exc).__name__} {exc}")
        return HandlerResult()

    def start_game(self, room_code, requester_id: str) -> HandlerResult:
        try:
            with self.registry.locked(room_code) as room:
                _require_host(room, requester_id)
                previous = room.phase
                room.current_question_index = 0
                room.reset_answers()
                room.phase = PHASE_QUESTION_OPEN
                logger.info(f"[game-start] room={room.code} from={previous} players={len(room.players)} questions={room.total_questions}")
                return HandlerResult(events=[
                    events.room_update(room),
                    events.game_started(room),
                    events.new_question(room),
                ])
        except (IgnoredAction, TriviaError) as exc:
            return self._ignore('startGame', room_code, exc)

    def submit_answer(self, room_code, player_id: str, answer_index) -> HandlerResult:
        try:
            with self.registry.locked(room_code) as room:
                player = room.players.get(player_id)
                if player is None:
                    raise UnknownPlayer(player_id)
                if player.answered_current:
                    raise DuplicateAnswer(player_id)
                if room.phase != PHASE_QUESTION_OPEN:
                    raise WrongPhase(room.phase)
                question = room.current_question
                if isinstance(answer_index, bool) or not isinstance(answer_index, int) \
                        or not 0 <= answer_index < len(question.options):
                    raise MalformedRequest(f'answerIndex={answer_index!r}')

                room.current_answers.append(score_answer(player, question, answer_index, self.points))
                result = HandlerResult(events=[
                    events.player_answered(room, player_id),
                    events.score_update(room),
                ])
                result.events.extend(reveal_if_complete(room))
                return result
        except (IgnoredAction, TriviaError) as exc:
            return self._ignore('submitAnswer', room_code, exc)

    def next_question(self, room_code, requester_id: str) -> HandlerResult:
        try:
            with self.registry.locked(room_code) as room:
                _require_host(room, requester_id)
                if room.phase not in IN_GAME_PHASES:
                    raise WrongPhase(room.phase)
                room.current_question_index += 1
                room.reset_answers()

                if room.current_question_index >= room.total_questions:
                    room.phase = PHASE_FINISHED
                    leaderboard = build_leaderboard(room)
                    logger.info(f"[game-over] room={room.code} leader={leaderboard[0]['nickname'] if leaderboard else None}")
                    return HandlerResult(events=[
                        events.game_over(room, leaderboard),
                        events.room_update(room),
                    ])

                room.phase = PHASE_QUESTION_OPEN
                logger.info(f"[next-question] room={room.code} question={room.current_question_index + 1}/{room.total_questions}")
                return HandlerResult(events=[events.new_question(room)])
        except (IgnoredAction, TriviaError) as exc:
            return self._ignore('nextQuestion', room_code, exc)

    def remove_player(self, room_code, player_id: str) -> HandlerResult:
        """Membership removal plus the reveal a smaller player set may complete."""
        try:
            with self.registry.locked(room_code) as room:
                result = self.registry.remove_player(room.code, player_id)
                if not room.closed:
                    result.events.extend(reveal_if_complete(room))
                return result
        except TriviaError as exc:
            return self._ignore('removePlayer', room_code, exc)
