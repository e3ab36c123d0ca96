"""Question bank loading and validation."""

import json
import os
from typing import Iterable, List, Optional

from trivia.models import Question

DEFAULT_QUESTION_BANK = os.path.join(os.path.dirname(__file__), 'data', 'questions.json')

MIN_OPTIONS = 2
MAX_OPTIONS = 4


class QuestionBankError(ValueError):
    pass


class QuestionBank:
    """Ordered, immutable sequence of questions."""

    def __init__(self, questions: Iterable[Question]):
        self._questions = tuple(questions)
        if not self._questions:
            raise QuestionBankError('Question bank is empty')

    @property
    def questions(self):
        return self._questions

    @property
    def categories(self) -> List[str]:
        seen = []
        for q in self._questions:
            if q.category not in seen:
                seen.append(q.category)
        return seen

    def __len__(self):
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    def __getitem__(self, index):
        return self._questions[index]


def parse_question(record, position: int) -> Question:
    if not isinstance(record, dict):
        raise QuestionBankError(f'Question #{position}: expected an object')
    prompt = record.get('question')
    if not isinstance(prompt, str) or not prompt.strip():
        raise QuestionBankError(f'Question #{position}: missing question text')
    options = record.get('options')
    if not isinstance(options, list) or not (MIN_OPTIONS <= len(options) <= MAX_OPTIONS):
        raise QuestionBankError(f'Question #{position}: needs {MIN_OPTIONS}-{MAX_OPTIONS} options')
    if not all(isinstance(o, str) for o in options):
        raise QuestionBankError(f'Question #{position}: options must be strings')
    correct = record.get('correctIndex')
    # bool is an int subclass; reject it explicitly
    if isinstance(correct, bool) or not isinstance(correct, int) or not 0 <= correct < len(options):
        raise QuestionBankError(f'Question #{position}: correctIndex out of range')
    return Question(
        category=str(record.get('category') or 'General'),
        question=prompt,
        options=options,
        correct_index=correct,
        id=record.get('id', position),
    )


def load_question_bank(path: Optional[str] = None) -> QuestionBank:
    path = path or DEFAULT_QUESTION_BANK
    with open(path, encoding='utf-8') as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise QuestionBankError(f'{path}: invalid JSON ({exc})') from exc
    if not isinstance(data, list):
        raise QuestionBankError(f'{path}: expected a list of questions')
    return QuestionBank(parse_question(rec, i) for i, rec in enumerate(data, start=1))
