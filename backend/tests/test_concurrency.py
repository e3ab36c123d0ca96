import threading

from conftest import make_bank
from trivia.models import PHASE_QUESTION_REVEALED
from trivia.services.rooms import GameSession, RoomRegistry

PLAYERS = 16


def _run_together(targets):
    barrier = threading.Barrier(len(targets))
    results = [None] * len(targets)

    def _worker(i, fn):
        barrier.wait()
        results[i] = fn()

    threads = [threading.Thread(target=_worker, args=(i, fn)) for i, fn in enumerate(targets)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    return results


def _crowded_room():
    registry = RoomRegistry(make_bank())
    session = GameSession(registry)
    code = registry.create_room('Host', 'p0').reply['roomCode']
    for i in range(1, PLAYERS):
        registry.join_room(code, f'P{i}', f'p{i}')
    session.start_game(code, 'p0')
    return registry, session, code


def test_simultaneous_answers_reveal_exactly_once():
    registry, session, code = _crowded_room()
    results = _run_together([
        (lambda pid=f'p{i}': session.submit_answer(code, pid, 1)) for i in range(PLAYERS)
    ])
    reveals = [e for r in results for e in r.events if e.name == 'answerReveal']
    assert len(reveals) == 1
    assert len(reveals[0].payload['answers']) == PLAYERS
    room = registry.get(code)
    assert room.phase == PHASE_QUESTION_REVEALED
    assert all(p.score == 100 for p in room.players.values())


def test_duplicate_submissions_race_scores_once():
    registry, session, code = _crowded_room()
    results = _run_together([lambda: session.submit_answer(code, 'p3', 1) for _ in range(8)])
    assert sum(1 for r in results if r.events) == 1
    assert registry.get(code).players['p3'].score == 100
    assert len(registry.get(code).current_answers) == 1


def test_departures_racing_answers_reveal_exactly_once():
    registry, session, code = _crowded_room()
    half = PLAYERS // 2
    answering = [(lambda pid=f'p{i}': session.submit_answer(code, pid, 0)) for i in range(half)]
    leaving = [(lambda pid=f'p{i}': session.remove_player(code, pid)) for i in range(half, PLAYERS)]
    results = _run_together(answering + leaving)
    reveals = [e for r in results for e in r.events if e.name == 'answerReveal']
    assert len(reveals) == 1
    room = registry.get(code)
    assert len(room.players) == half
    assert room.phase == PHASE_QUESTION_REVEALED
