from typing import List

from trivia.models import Answer, Player, Question, Room

DEFAULT_CORRECT_POINTS = 100


def score_answer(player: Player, question: Question, answer_index: int,
                 points: int = DEFAULT_CORRECT_POINTS) -> Answer:
    """Record ``player``'s answer to ``question`` and apply its points.

    A correct answer earns ``points``; anything else earns nothing. There is
    no partial credit and no time bonus.
    """
    correct = answer_index == question.correct_index
    if correct:
        player.score += points
    player.answered_current = True
    return Answer(player.id, player.nickname, answer_index, correct)


def build_leaderboard(room: Room) -> List[dict]:
    # sorted() is stable, so equal scores keep join order
    ranked = sorted(room.players.values(), key=lambda p: p.score, reverse=True)
    return [{'nickname': p.nickname, 'score': p.score} for p in ranked]
