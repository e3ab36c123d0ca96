import threading
from typing import Dict, List, Optional, Sequence, Tuple

PHASE_LOBBY = 'lobby'
PHASE_QUESTION_OPEN = 'question-open'
PHASE_QUESTION_REVEALED = 'question-revealed'
PHASE_FINISHED = 'finished'

IN_GAME_PHASES = (PHASE_QUESTION_OPEN, PHASE_QUESTION_REVEALED)


class Question:
    __slots__ = ('id', 'category', 'question', 'options', 'correct_index')

    def __init__(self, category: str, question: str, options: Sequence[str], correct_index: int, id=None):
        self.id = id
        self.category = category
        self.question = question
        self.options: Tuple[str, ...] = tuple(options)
        self.correct_index = correct_index

    def to_public_dict(self, index: int, total: int):
        """Payload for ``newQuestion``; the correct index is withheld."""
        return {
            'index': index,
            'total': total,
            'category': self.category,
            'question': self.question,
            'options': list(self.options),
        }

    def __repr__(self):
        return f'<Question {self.id!r} {self.category!r}>'


class Player:
    def __init__(self, id: str, nickname: str):
        self.id = id
        self.nickname = nickname
        self.score = 0
        self.answered_current = False

    def to_dict(self):
        return {
            'id': self.id,
            'nickname': self.nickname,
            'score': self.score,
        }


class Answer:
    __slots__ = ('player_id', 'nickname', 'answer_index', 'correct')

    def __init__(self, player_id: str, nickname: str, answer_index: int, correct: bool):
        self.player_id = player_id
        self.nickname = nickname
        self.answer_index = answer_index
        self.correct = correct

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'nickname': self.nickname,
            'answerIndex': self.answer_index,
            'correct': self.correct,
        }


class Room:
    """Authoritative state of one game room.

    Every read-modify-write on a room happens while holding ``lock``. A room
    that has been removed from the registry is marked ``closed`` so callers
    that were waiting on the lock can tell it no longer exists.
    """

    def __init__(self, code: str, host: Player, questions: Sequence[Question]):
        self.code = code
        self.host_id = host.id
        self.players: Dict[str, Player] = {host.id: host}
        self.questions: Tuple[Question, ...] = tuple(questions)
        self.current_question_index = 0
        self.phase = PHASE_LOBBY
        self.current_answers: List[Answer] = []
        self.closed = False
        self.lock = threading.RLock()

    @property
    def is_started(self) -> bool:
        return self.phase in IN_GAME_PHASES

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def reset_answers(self) -> None:
        self.current_answers = []
        for p in self.players.values():
            p.answered_current = False

    def all_answered(self) -> bool:
        # An empty room never counts as complete
        return bool(self.players) and all(p.answered_current for p in self.players.values())

    def public_state(self):
        return {
            'hostId': self.host_id,
            'isStarted': self.is_started,
            'players': [p.to_dict() for p in self.players.values()],
        }

    def __repr__(self):
        return f'<Room {self.code} phase={self.phase} players={len(self.players)}>'
