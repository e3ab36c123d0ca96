import os

_DEFAULT_ORIGINS = 'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173'


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Room codes: fixed length, no ambiguous glyphs (0/O, 1/I)
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '5'))
    ROOM_CODE_ALPHABET = os.environ.get('ROOM_CODE_ALPHABET') or 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get('ROOM_CODE_MAX_ATTEMPTS', '50'))
    # Scoring
    CORRECT_ANSWER_POINTS = int(os.environ.get('CORRECT_ANSWER_POINTS', '100'))
    # Players
    DEFAULT_NICKNAME = os.environ.get('DEFAULT_NICKNAME') or 'Affe'
    MAX_NICKNAME_LENGTH = int(os.environ.get('MAX_NICKNAME_LENGTH', '24'))
    # None falls back to the bundled question bank
    QUESTION_BANK_PATH = os.environ.get('QUESTION_BANK_PATH')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', _DEFAULT_ORIGINS).split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE') or '/'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
