from typing import Any, List, NamedTuple, Optional

from trivia.models import Room

ROOM_UPDATE = 'roomUpdate'
GAME_STARTED = 'gameStarted'
NEW_QUESTION = 'newQuestion'
SCORE_UPDATE = 'scoreUpdate'
PLAYER_ANSWERED = 'playerAnswered'
ANSWER_REVEAL = 'answerReveal'
GAME_OVER = 'gameOver'


class Event(NamedTuple):
    """An outbound message for every connection subscribed to ``room``."""
    name: str
    room: str
    payload: Any = None


class HandlerResult:
    """Value returned by every request handler: a direct reply plus broadcasts."""

    __slots__ = ('reply', 'events')

    def __init__(self, reply=None, events: Optional[List[Event]] = None):
        self.reply = reply
        self.events: List[Event] = list(events or [])

    def names(self) -> List[str]:
        return [e.name for e in self.events]

    def __repr__(self):
        return f'<HandlerResult reply={self.reply!r} events={self.names()}>'


def room_update(room: Room) -> Event:
    return Event(ROOM_UPDATE, room.code, room.public_state())


def score_update(room: Room) -> Event:
    return Event(SCORE_UPDATE, room.code, room.public_state())


def game_started(room: Room) -> Event:
    return Event(GAME_STARTED, room.code)


def new_question(room: Room) -> Event:
    question = room.current_question
    payload = question.to_public_dict(room.current_question_index + 1, room.total_questions)
    return Event(NEW_QUESTION, room.code, payload)


def player_answered(room: Room, player_id: str) -> Event:
    return Event(PLAYER_ANSWERED, room.code, {'playerId': player_id})


def answer_reveal(room: Room) -> Event:
    return Event(ANSWER_REVEAL, room.code, {
        'answers': [a.to_dict() for a in room.current_answers],
        'correctIndex': room.current_question.correct_index,
    })


def game_over(room: Room, leaderboard) -> Event:
    return Event(GAME_OVER, room.code, leaderboard)
